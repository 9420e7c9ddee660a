#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from sqlalchemy import (
    JSON,
    Column,
    String,
    UniqueConstraint,
)

from .base import (
    Base,
    BaseModelUpdate,
)


class Record(BaseModelUpdate, Base):
    """
    Store a single key-value record of a datalake table

    Several datalakes can share the table, records are separated by namespace (usually the datalake id).

    Note: Token amounts exceed 64 bits and are kept as (arbitrary precision) JSON numbers.
    """
    __tablename__ = "record"

    namespace = Column(String(length=64), nullable=False, index=True)
    table_name = Column(String(length=64), nullable=False, index=True)
    key = Column(String(length=256), nullable=False)
    value = Column(JSON, nullable=False)

    __table_args__ = (
        UniqueConstraint("namespace", "table_name", "key"),
    )

    def __repr__(self) -> str:
        return f"Record <namespace={self.namespace} table={self.table_name} key={self.key}>"

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import (
    Any,
    Iterable,
    Iterator,
    Optional,
    Tuple,
)

import logging

import sqlalchemy.exc
from sqlalchemy import (
    delete,
    select,
    text,
)

import xlake.db
import xlake.db.orm as orm
from xlake.types import TRecord

from .base import Store

log = logging.getLogger(__name__)


class Store_SQL(Store):
    """
    Store backed by a single sqlalchemy table (see ``orm.Record``)
    """

    def __init__(self, tables: Iterable[str], db: xlake.db.FusionSQL, namespace: str = "xlake") -> None:
        """
        :param tables: names of the tables that can be accessed
        :param db: database service
        :param namespace: record prefix, allows several datalakes to share a database
        """
        super().__init__(tables)
        self._db = db
        self._namespace = namespace

    def _select(self, *entities):
        return select(*entities).filter(orm.Record.namespace == self._namespace)

    def get(self, table: str, key: str) -> Optional[TRecord]:
        self._check_table(table)
        with self._db.session() as session:
            return session.execute(
                self._select(orm.Record.value)
                    .filter(orm.Record.table_name == table)
                    .filter(orm.Record.key == key)
            ).scalar_one_or_none()

    def set(self, table: str, key: str, value: TRecord) -> Any:
        self._check_table(table)

        def load_record(s):
            return s.execute(
                self._select(orm.Record)
                    .filter(orm.Record.table_name == table)
                    .filter(orm.Record.key == key)
            ).scalar_one_or_none()

        with self._db.session() as session:
            record = load_record(session)
            if record is None:
                session.add(orm.Record(namespace=self._namespace, table_name=table, key=key, value=dict(value)))
            else:
                record.value = dict(value)

            # handle race conditions
            try:
                session.commit()
            except sqlalchemy.exc.IntegrityError:
                session.rollback()
                log.warning(f"Concurrent insert of record '{key}' in table '{self._namespace}:{table}'")
                record = load_record(session)
                record.value = dict(value)
                session.commit()

    def items(self, table: str) -> Iterator[Tuple[str, TRecord]]:
        self._check_table(table)
        with self._db.session() as session:
            rows = session.execute(
                self._select(orm.Record.key, orm.Record.value)
                    .filter(orm.Record.table_name == table)
                    .order_by(orm.Record.id)
            ).all()

        for key, value in rows:
            yield key, value

    def ping(self) -> Any:
        with self._db.session() as session:
            session.execute(text("SELECT 1"))

    def flush(self) -> Any:
        with self._db.session.begin() as session:
            session.execute(
                delete(orm.Record)
                    .filter(orm.Record.namespace == self._namespace)
                    .filter(orm.Record.table_name.in_(self.tables))
            )

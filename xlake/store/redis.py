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

import pickle
import redis

from xlake.types import TRecord

from .base import Store


class Store_Redis(Store):
    """
    Simple wrapper around a redis instance, each table is kept in a separate redis hash

    Note: Currently uses ``pickle`` to convert records to bytes
    """

    def __init__(
        self,
        tables: Iterable[str],
        host: str,
        port: int,
        password: Optional[str],
        db: int,
        namespace: str = "xlake",
    ) -> None:
        """
        :param tables: names of the tables that can be accessed
        :param host: redis host
        :param port: redis port
        :param password: redis password
        :param db: redis database index
        :param namespace: key prefix, allows several datalakes to share a database
        """
        super().__init__(tables)

        self._namespace = namespace
        self._redis = redis.Redis(
            host=host,
            port=int(port),
            password=password,
            db=int(db),
        )

    def _name(self, table: str) -> str:
        return f"{self._namespace}:{table}"

    def get(self, table: str, key: str) -> Optional[TRecord]:
        self._check_table(table)
        value = self._redis.hget(self._name(table), key)
        if value is None:
            return None
        return pickle.loads(value)

    def set(self, table: str, key: str, value: TRecord) -> Any:
        self._check_table(table)
        self._redis.hset(self._name(table), key, pickle.dumps(value, protocol=5))

    def items(self, table: str) -> Iterator[Tuple[str, TRecord]]:
        self._check_table(table)
        for key, value in self._redis.hscan_iter(self._name(table)):
            yield key.decode("utf-8"), pickle.loads(value)

    def ping(self) -> Any:
        self._redis.ping()

    def flush(self) -> Any:
        self._redis.delete(*[self._name(table) for table in self.tables])

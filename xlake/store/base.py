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

import abc
import logging

from xlake.types import TRecord

log = logging.getLogger(__name__)

TABLE_STATE = "state"


class Store(abc.ABC):
    """
    Key-value storage organised in named tables.

    Every handler declares the tables it writes to, any access to an undeclared table is
    rejected. Records are plain dicts. Amounts are stored as python integers and must
    survive a round trip without loss of precision.

    Note: This store has no notion of chain reorganisations, records are never rolled back.
    """

    def __init__(self, tables: Iterable[str]) -> None:
        """
        Create the store

        :param tables: names of the tables that can be accessed
        """
        self._tables = frozenset(tables) | {TABLE_STATE}

    @property
    def tables(self) -> frozenset:
        return self._tables

    def _check_table(self, table: str) -> None:
        if table not in self._tables:
            raise KeyError(f"Unknown table '{table}'")

    @abc.abstractmethod
    def get(self, table: str, key: str) -> Optional[TRecord]:
        """
        Return the record at ``key`` in ``table``, or None if the key doesn't exist

        :param table: table name
        :param key: record key
        :return:
        """
        raise NotImplementedError

    @abc.abstractmethod
    def set(self, table: str, key: str, value: TRecord) -> Any:
        """
        Create or replace the record at ``key`` in ``table``

        :param table: table name
        :param key: record key
        :param value: record
        :return:
        """
        raise NotImplementedError

    @abc.abstractmethod
    def items(self, table: str) -> Iterator[Tuple[str, TRecord]]:
        """
        Iterate over all ``(key, record)`` pairs of ``table`` (no particular order)

        :param table: table name
        :return:
        """
        raise NotImplementedError

    @abc.abstractmethod
    def ping(self) -> Any:
        """
        Ping the underlying storage service

        :return:
        """
        raise NotImplementedError

    @abc.abstractmethod
    def flush(self) -> Any:
        """
        Delete all records of all tables

        :return:
        """
        raise NotImplementedError

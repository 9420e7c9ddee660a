#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from . import orm


class FusionSQL(object):

    def __init__(self, conn: str, verbose: bool = False) -> None:
        """
        Manages sqlalchemy engine and session factory.

        Note: This should only be instantiated once per process.

        :param conn: database connection string
        :param verbose: enable sqlalchemy verbosity
        """
        assert isinstance(conn, str)
        assert isinstance(verbose, bool)

        self._engine = create_engine(conn, echo=False)

        if verbose:
            logging.getLogger("sqlalchemy.engine").setLevel(logging.DEBUG)

        self._session = sessionmaker(
            bind=self._engine,
            autoflush=True,
            expire_on_commit=False,
        )

    def create_all(self) -> None:
        """
        Create all missing tables of the orm models.
        """
        orm.Base.metadata.create_all(self._engine)

    @property
    def session(self):
        """
        Factory session object

        The returned object should be used in a context.

        Usage:

        # closes the session
        with FusionSQL.session() as session:
            session.add(some_object)
            session.commit()

        # auto commits the transaction, closes the session
        with FusionSQL.session.begin() as session:
            session.add(some_object)

        """
        return self._session

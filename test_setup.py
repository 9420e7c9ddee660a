#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

import logging
import sys

from web3 import Web3

import xlake.db
import xlake.store
from xlake.config import CONFIG as C
from xlake.util import timeit

log = logging.getLogger(__name__)

MIN_PYTHON = (3, 8)
if sys.version_info < MIN_PYTHON:
    sys.exit("Python {}.{} or later is required!".format(*MIN_PYTHON))


@timeit
def main() -> int:
    """
    Simple testing script to ensure the environment is working.

    :return:
    """
    logging.basicConfig(level=C["LOG_LEVEL"], format=C["LOG_FORMAT"], datefmt=C["LOG_DATE_FORMAT"])

    # check rpc node
    w3 = Web3(Web3.HTTPProvider(endpoint_uri=C["API_URL"], request_kwargs={"timeout": 30}))
    log.info(f"Connected to chain {w3.eth.chain_id} at block {w3.eth.get_block_number()}")

    # check database
    db = xlake.db.FusionSQL(
        conn=xlake.db.build_url(
            driver=C["DB_DRIVER"],
            host=C["DB_HOST"],
            port=C["DB_PORT"],
            username=C["DB_USERNAME"],
            password=C["DB_PASSWORD"],
            database=C["DB_DATABASE"],
        ),
        verbose=C["DB_DEBUG"],
    )
    xlake.store.Store_SQL(tables=[], db=db).ping()

    # check redis
    store = xlake.store.Store_Redis(
        tables=[],
        host=C["REDIS_HOST"],
        port=C["REDIS_PORT"],
        password=C["REDIS_PASSWORD"],
        db=C["REDIS_DATABASE"],
    )
    store.ping()

    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

import logging
import pidfile
import os
import sys

from web3 import Web3

import xlake.db
import xlake.store
from xlake.chain import Chain
from xlake.config import (
    CONFIG as C,
    MonitorConfig,
)
from xlake.event import EventHandlerToken
from xlake.runner import Runner
from xlake.trace import TraceClient
from xlake.util import timeit

log = logging.getLogger("main")

MIN_PYTHON = (3, 8)
if sys.version_info < MIN_PYTHON:
    sys.exit("Python {}.{} or later is required!".format(*MIN_PYTHON))

# USDC (Sepolia), replace to monitor another token
CONTRACT_ADDRESS = os.getenv("XL_CONTRACT_ADDRESS", "0x1c7d4b196cb0c7b01d743fbc6116a902379c7238")
WALLET_ADDRESS = os.getenv("XL_WALLET_ADDRESS", "0xe67ddd0ef25bc9d6a2a55b4b5946140b9e570121")
START_BLOCK = int(os.getenv("XL_START_BLOCK", 4567462))


@timeit
def main() -> int:
    """
    Example XLake configuration for an ERC20 wallet tracker, records are kept in postgres.

    :return:
    """
    logging.basicConfig(level=C["LOG_LEVEL"], format=C["LOG_FORMAT"], datefmt=C["LOG_DATE_FORMAT"])

    try:
        config = MonitorConfig(
            id="ERC20-WALLET",
            chain=Chain.ETH_SEPOLIA,
            contract_address=CONTRACT_ADDRESS,
            start_block=START_BLOCK,
            wallet_address=WALLET_ADDRESS,
        )
    except ValueError as e:
        log.error(e)
        return 1

    w3 = Web3(Web3.HTTPProvider(endpoint_uri=C["API_URL"], request_kwargs={"timeout": 30}))

    trace = TraceClient(
        api_url=C["TRACE_API_URL"],
        api_key=C["TRACE_API_KEY"],
        timeout=C["TRACE_TIMEOUT"],
        retries=C["TRACE_RETRIES"],
    )

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
    db.create_all()

    store = xlake.store.Store_SQL(tables=EventHandlerToken.tables, db=db, namespace=config.id)

    handler = EventHandlerToken(w3=w3, store=store, config=config, trace=trace)

    runner = Runner(w3=w3, store=store, handler=handler, chunk_size=C["XL_CHUNK_SIZE"], chain=config.chain)
    runner.scan(end_block="latest")

    for key, allowance in store.items("allowances"):
        log.info(f"Allowance '{key}': {allowance['allowance']}")

    return 0


if __name__ == "__main__":
    try:
        with pidfile.PIDFile("xlake.erc20.pid"):
            sys.exit(main())
    except pidfile.AlreadyRunningError:
        print("Already running. Exiting.")
        sys.exit(1)

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

import logging
import pidfile
import sys

from web3 import Web3

import xlake.contract
import xlake.store
from xlake.chain import Chain
from xlake.config import (
    CONFIG as C,
    MonitorConfig,
)
from xlake.event import EventHandlerWrappedToken
from xlake.runner import Runner
from xlake.trace import TraceClient
from xlake.util import timeit

log = logging.getLogger("main")

MIN_PYTHON = (3, 8)
if sys.version_info < MIN_PYTHON:
    sys.exit("Python {}.{} or later is required!".format(*MIN_PYTHON))

# The wallet that should be monitored for transfers, approvals and deposits
WALLET_ADDRESS = "0xe67ddd0ef25bc9d6a2a55b4b5946140b9e570121"


# Basic XLake program flow
# 1) Runner: resume from the saved state, fetch event logs chunk by chunk (eth_getLogs)
# 2) EventHandler: dispatch every event by topic, decode it against the contract ABI
# 3) TokenLedger: update balance/allowance records, resolve transferFrom callers via the trace API
# 4) Store: persist records and runner state (redis)

@timeit
def main() -> int:
    """
    Example XLake configuration for a wallet holding WETH on Sepolia.

    :return:
    """
    logging.basicConfig(level=C["LOG_LEVEL"], format=C["LOG_FORMAT"], datefmt=C["LOG_DATE_FORMAT"])

    weth = xlake.contract.weth
    config = MonitorConfig(
        id="WETH-WALLET",
        chain=Chain.ETH_SEPOLIA,
        contract_address=weth.address,
        start_block=weth.from_block,
        wallet_address=WALLET_ADDRESS,
    )

    try:
        w3 = Web3(Web3.HTTPProvider(endpoint_uri=C["API_URL"], request_kwargs={"timeout": 30}))
    except Exception as e:
        log.error(e)
        return 1

    trace = TraceClient(
        api_url=C["TRACE_API_URL"],
        api_key=C["TRACE_API_KEY"],
        timeout=C["TRACE_TIMEOUT"],
        retries=C["TRACE_RETRIES"],
    )

    store = xlake.store.Store_Redis(
        tables=EventHandlerWrappedToken.tables,
        host=C["REDIS_HOST"],
        port=C["REDIS_PORT"],
        password=C["REDIS_PASSWORD"],
        db=C["REDIS_DATABASE"],
        namespace=config.id,
    )

    # ensure the service is running
    store.ping()

    handler = EventHandlerWrappedToken(w3=w3, store=store, config=config, trace=trace)

    runner = Runner(w3=w3, store=store, handler=handler, chunk_size=C["XL_CHUNK_SIZE"], chain=config.chain)
    runner.scan(end_block="latest")

    balance = store.get("balances", WALLET_ADDRESS.lower())
    log.info(f"Balance of '{WALLET_ADDRESS}': {balance['balance'] if balance else 0}")

    return 0


if __name__ == "__main__":
    try:
        with pidfile.PIDFile("xlake.weth.pid"):
            sys.exit(main())
    except pidfile.AlreadyRunningError:
        print("Already running. Exiting.")
        sys.exit(1)

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
from xlake.event import EventHandlerVoting
from xlake.runner import Runner
from xlake.util import timeit

log = logging.getLogger("main")

MIN_PYTHON = (3, 8)
if sys.version_info < MIN_PYTHON:
    sys.exit("Python {}.{} or later is required!".format(*MIN_PYTHON))


@timeit
def main() -> int:
    """
    Example XLake configuration for the voting contract on Sepolia.

    :return:
    """
    logging.basicConfig(level=C["LOG_LEVEL"], format=C["LOG_FORMAT"], datefmt=C["LOG_DATE_FORMAT"])

    voting = xlake.contract.voting
    config = MonitorConfig(
        id="VOTING",
        chain=Chain.ETH_SEPOLIA,
        contract_address=voting.address,
        start_block=voting.from_block,
    )

    try:
        w3 = Web3(Web3.HTTPProvider(endpoint_uri=C["API_URL"], request_kwargs={"timeout": 30}))
    except Exception as e:
        log.error(e)
        return 1

    store = xlake.store.Store_Redis(
        tables=EventHandlerVoting.tables,
        host=C["REDIS_HOST"],
        port=C["REDIS_PORT"],
        password=C["REDIS_PASSWORD"],
        db=C["REDIS_DATABASE"],
        namespace=config.id,
    )

    # ensure the service is running
    store.ping()

    handler = EventHandlerVoting(w3=w3, store=store, config=config)

    runner = Runner(w3=w3, store=store, handler=handler, chunk_size=C["XL_CHUNK_SIZE"], chain=config.chain)
    runner.scan(end_block="latest")

    candidates = sorted((c for _, c in store.items("candidates")), key=lambda c: c["num_votes"], reverse=True)
    for candidate in candidates:
        log.info(f"Candidate {candidate['candidate_id']} '{candidate['name']}': {candidate['num_votes']} votes")

    return 0


if __name__ == "__main__":
    try:
        with pidfile.PIDFile("xlake.voting.pid"):
            sys.exit(main())
    except pidfile.AlreadyRunningError:
        print("Already running. Exiting.")
        sys.exit(1)

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import (
    Dict,
    List,
)

import logging
import pytest

from web3 import Web3

import xlake.db
import xlake.store
from xlake.chain import Chain
from xlake.config import (
    CONFIG as C,
    MonitorConfig,
)
from xlake.event import (
    EventHandlerToken,
    EventHandlerVoting,
    EventHandlerWrappedToken,
)
from xlake.trace import CallFrame

from .load import (
    VOTING,
    WALLET,
    WETH,
)

log = logging.getLogger(__name__)

def pytest_configure(config):
    logging.basicConfig(level=C["LOG_LEVEL"], format=C["LOG_FORMAT"], datefmt=C["LOG_DATE_FORMAT"])

class FakeTrace(object):
    """
    Trace client returning predefined call frames per transaction
    """

    def __init__(self, calls: Dict[str, List[CallFrame]] = None) -> None:
        self.calls = dict(calls or {})
        self.requests = []

    def get_transaction_calls(self, tx_hash: str) -> List[CallFrame]:
        self.requests.append(tx_hash)
        return self.calls.get(tx_hash, [])

@pytest.fixture(scope="session")
def w3() -> Web3:
    # only the ABI codec is used, no provider calls are made
    return Web3()

@pytest.fixture
def trace() -> FakeTrace:
    return FakeTrace()

@pytest.fixture
def token_config() -> MonitorConfig:
    return MonitorConfig(
        id="TEST-WETH",
        chain=Chain.ETH_SEPOLIA,
        contract_address=WETH,
        start_block=4567462,
        wallet_address=WALLET,
    )

@pytest.fixture
def token_store() -> xlake.store.Store:
    return xlake.store.Store_Memory(EventHandlerWrappedToken.tables)

@pytest.fixture
def weth_handler(w3: Web3, token_store: xlake.store.Store, token_config: MonitorConfig, trace: FakeTrace) -> EventHandlerWrappedToken:
    return EventHandlerWrappedToken(w3=w3, store=token_store, config=token_config, trace=trace)

@pytest.fixture
def erc20_handler(w3: Web3, token_store: xlake.store.Store, token_config: MonitorConfig, trace: FakeTrace) -> EventHandlerToken:
    return EventHandlerToken(w3=w3, store=token_store, config=token_config, trace=trace)

@pytest.fixture
def voting_store() -> xlake.store.Store:
    return xlake.store.Store_Memory(EventHandlerVoting.tables)

@pytest.fixture
def voting_handler(w3: Web3, voting_store: xlake.store.Store) -> EventHandlerVoting:
    config = MonitorConfig(
        id="TEST-VOTING",
        chain=Chain.ETH_SEPOLIA,
        contract_address=VOTING,
        start_block=4274183,
    )
    return EventHandlerVoting(w3=w3, store=voting_store, config=config)

@pytest.fixture
def dbm() -> xlake.db.FusionSQL:
    """
    In-memory SQlite database for testing
    """
    db = xlake.db.FusionSQL(
        conn="sqlite:///:memory:",
        verbose=C["DB_DEBUG"],
    )
    db.create_all()
    return db

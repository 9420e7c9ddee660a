#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import (
    List,
    Optional,
)

import random

import pytest

from web3 import Web3
from web3.datastructures import AttributeDict

import xlake.store
from xlake.chain import Chain
from xlake.event import EventHandler
from xlake.runner import Runner
from xlake.types import (
    Block,
    Event,
    LogFilter,
    Properties,
)

from .load import (
    WALLET,
    WETH,
    load_logs,
)

LOGS = "WETH_sepolia_logs.json"
START = 4567462


class FakeEth(object):
    """
    Minimal ``w3.eth`` serving event logs from memory
    """

    def __init__(self, logs: List[AttributeDict], block_number: int, chain_id: int = int(Chain.ETH_SEPOLIA)) -> None:
        self.logs = logs
        self.block_number = block_number
        self.chain_id = chain_id
        self.requests = []

    def get_block_number(self) -> int:
        return self.block_number

    def get_logs(self, params: dict) -> List[AttributeDict]:
        self.requests.append(params)
        a, b = int(params["fromBlock"], 16), int(params["toBlock"], 16)
        return [
            entry for entry in self.logs
            if a <= entry["blockNumber"] <= b
            and entry["address"] in params["address"]
            and Web3.to_hex(entry["topics"][0]) in params["topics"][0]
        ]


class FakeWeb3(object):

    def __init__(self, eth: FakeEth) -> None:
        self.eth = eth


class RecordingHandler(EventHandler):
    """
    Records every callback
    """

    tables = frozenset({"seen"})

    def __init__(self, topics: Optional[List[str]] = None) -> None:
        self.topics = topics
        self.filters = []
        self.events = []
        self.blocks = []
        self.drops = []

    def properties(self) -> Properties:
        return Properties(id="TEST-RECORDER", initial_block=START)

    def filter_for(self, block: Block) -> LogFilter:
        self.filters.append(block.number)
        if self.topics is None:
            return LogFilter(
                contract=[Web3.to_checksum_address(WETH)],
                topic_0=[Web3.to_hex(entry["topics"][0]) for entry in load_logs(LOGS)],
            )
        return LogFilter(contract=[Web3.to_checksum_address(WETH)], topic_0=self.topics)

    def handle(self, event: Event) -> None:
        self.events.append((event.block_number, event.log_index))

    def on_block_end(self, block: Block) -> None:
        self.blocks.append(block.number)

    def on_block_drop_before(self, block: Block) -> None:
        self.drops.append(("before", block.number))

    def on_block_drop_after(self, block: Block) -> None:
        self.drops.append(("after", block.number))


@pytest.fixture
def store() -> xlake.store.Store:
    return xlake.store.Store_Memory(RecordingHandler.tables)


def shuffled_logs() -> List[AttributeDict]:
    logs = load_logs(LOGS)
    random.Random(42).shuffle(logs)
    return logs


def test_runner_scan(store) -> None:
    eth = FakeEth(shuffled_logs(), block_number=4567500)
    handler = RecordingHandler()
    runner = Runner(FakeWeb3(eth), store, handler, chunk_size=10)

    assert runner.scan() == 4567500

    # chain order across and within chunks
    assert handler.events == [(4567470, 3), (4567480, 7), (4567490, 0), (4567490, 1)]
    assert handler.blocks == list(range(START, 4567501))
    assert handler.filters == [4567462, 4567472, 4567482, 4567492]
    assert len(eth.requests) == 4

    assert runner.load_state() == {"block_number": 4567500, "block_hash": None}


def test_runner_resume(store) -> None:
    eth = FakeEth(shuffled_logs(), block_number=4567475)
    handler = RecordingHandler()
    runner = Runner(FakeWeb3(eth), store, handler, chunk_size=1000)

    assert runner.scan() == 4567475
    assert handler.events == [(4567470, 3)]

    # up to date
    assert runner.scan() is None
    assert runner.scan(end_block=4567470) is None

    eth.block_number = 4567490
    assert runner.scan() == 4567490
    assert handler.events == [(4567470, 3), (4567480, 7), (4567490, 0), (4567490, 1)]
    assert handler.filters == [START, 4567476]

    state = runner.load_state()
    assert state["block_number"] == 4567490
    assert state["block_hash"] == "0xb10c00000000000000000000000000000000000000000000000000000045b1c2"


def test_runner_removed_logs(store) -> None:
    logs = load_logs(LOGS)
    logs[1] = AttributeDict({**logs[1], "removed": True})

    handler = RecordingHandler()
    runner = Runner(FakeWeb3(FakeEth(logs, block_number=4567500)), store, handler)
    runner.scan()

    assert (4567480, 7) not in handler.events
    assert len(handler.events) == 3


def test_runner_empty_filter(store) -> None:
    eth = FakeEth(load_logs(LOGS), block_number=4567500)
    handler = RecordingHandler(topics=[])
    runner = Runner(FakeWeb3(eth), store, handler)

    assert runner.scan() == 4567500
    assert eth.requests == []
    assert handler.events == []
    assert handler.blocks[-1] == 4567500


def test_runner_chain(store) -> None:
    eth = FakeEth([], block_number=4567500)

    runner = Runner(FakeWeb3(eth), store, RecordingHandler(), chain=Chain.ETH)
    with pytest.raises(ValueError):
        runner.scan()

    runner = Runner(FakeWeb3(eth), store, RecordingHandler(), chain=Chain.ETH_SEPOLIA)
    assert runner.scan() == 4567500


def test_runner_missing_tables() -> None:
    eth = FakeEth([], block_number=0)
    store = xlake.store.Store_Memory(["balances"])

    with pytest.raises(ValueError):
        Runner(FakeWeb3(eth), store, RecordingHandler())


def test_runner_drop_blocks(store) -> None:
    eth = FakeEth(shuffled_logs(), block_number=4567500)
    handler = RecordingHandler()
    runner = Runner(FakeWeb3(eth), store, handler)
    runner.scan()

    runner.drop_blocks(4567485)
    assert handler.drops == [("before", 4567485), ("after", 4567485)]
    assert runner.load_state()["block_number"] == 4567484

    # dropped blocks are processed again
    handler.events.clear()
    assert runner.scan() == 4567500
    assert handler.events == [(4567490, 0), (4567490, 1)]


def test_runner_weth(weth_handler, token_store, trace) -> None:
    eth = FakeEth(shuffled_logs(), block_number=4567500)
    runner = Runner(FakeWeb3(eth), token_store, weth_handler, chunk_size=16)

    assert runner.scan() == 4567500

    assert token_store.get("balances", WALLET)["balance"] == 10 ** 15 - 40
    assert token_store.get("allowances", f"{WALLET}_0x3fc91a3afd70395cd496c647d5a6cc9d4b2b7fad")["allowance"] == 100
    assert runner.load_state()["block_number"] == 4567500

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

import dataclasses

import pytest

from eth_utils import function_abi_to_4byte_selector

from web3 import Web3
from web3.exceptions import (
    LogTopicError,
    MismatchedABI,
)

import xlake.contract
from xlake.event import EventDecoder
from xlake.types import to_hexstr

from .load import (
    OTHER,
    SPENDER,
    WALLET,
    load_events,
)


def test_decoder_topics(w3: Web3) -> None:
    weth = EventDecoder(w3, xlake.contract.weth.abi)
    assert weth.topic("Transfer") == "0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef"
    assert weth.topic("Approval") == "0x8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925"
    assert weth.topic("Deposit") == "0xe1fffcc4923d04b559f4d29a8bfc6cda04eb5b0d3c460751c2402c5c5cc9109c"
    assert len(weth.topics) == 4  # includes Withdrawal

    # same signatures, different parameter names
    erc20 = EventDecoder(w3, xlake.contract.erc20.abi)
    assert erc20.topic("Transfer") == weth.topic("Transfer")
    assert erc20.topic("Approval") == weth.topic("Approval")

    with pytest.raises(KeyError):
        erc20.topic("Deposit")


def test_decoder_transfer_from_selector() -> None:
    for info in [xlake.contract.weth, xlake.contract.erc20]:
        selector = function_abi_to_4byte_selector(info.function("transferFrom"))
        assert to_hexstr(selector) == "0x23b872dd"


def test_decoder_decode(w3: Web3) -> None:
    decoder = EventDecoder(w3, xlake.contract.weth.abi)
    approval, transfer, deposit, _ = load_events("WETH_sepolia_logs.json")

    assert decoder.decode(approval, 3) == {
        "src": Web3.to_checksum_address(WALLET),
        "guy": Web3.to_checksum_address(SPENDER),
        "wad": 100,
    }

    assert decoder.decode(transfer, 3) == {
        "src": Web3.to_checksum_address(WALLET),
        "dst": Web3.to_checksum_address(OTHER),
        "wad": 40,
    }

    assert decoder.decode(deposit, 2) == {
        "dst": Web3.to_checksum_address(WALLET),
        "wad": 10 ** 15,
    }


def test_decoder_wrong_arity(w3: Web3) -> None:
    decoder = EventDecoder(w3, xlake.contract.weth.abi)
    approval, transfer, deposit, _ = load_events("WETH_sepolia_logs.json")

    # too few topics for an event with two indexed parameters
    with pytest.raises(LogTopicError):
        decoder.decode(transfer, 2)

    # too many topics for an event with a single indexed parameter
    with pytest.raises(LogTopicError):
        decoder.decode(deposit, 3)


def test_decoder_unknown_topic(w3: Web3) -> None:
    decoder = EventDecoder(w3, xlake.contract.voting.abi)
    _, transfer, _, _ = load_events("WETH_sepolia_logs.json")

    with pytest.raises(MismatchedABI):
        decoder.decode(transfer, 3)

    with pytest.raises(MismatchedABI):
        decoder.decode(dataclasses.replace(transfer, topic_0=None), 3)

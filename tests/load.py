#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import (
    Any,
    Dict,
    List,
    Optional,
)

import json

from pathlib import Path

from eth_utils import (
    add_0x_prefix,
    event_abi_to_log_topic,
)
from hexbytes import HexBytes

from web3 import Web3
from web3.datastructures import AttributeDict

import xlake.contract
from xlake.types import Event

DATA_DIR = Path(__file__).parent / "data"

WALLET = "0xe67ddd0ef25bc9d6a2a55b4b5946140b9e570121"
SPENDER = "0x3fc91a3afd70395cd496c647d5a6cc9d4b2b7fad"
OTHER = "0x00000000000000000000000000000000000d0d0d"
WETH = "0xfff9976782d46cc05630d1f6ebab18b2324d6b14"
VOTING = "0x7ca293451a1131d67a7daaa0a852d5564366b7bf"

def load_logs(file: str, txids: Optional[list] = None) -> List[AttributeDict]:
    """
    Load raw event log entries in the format returned by ``eth_getLogs``.
    """
    with open(DATA_DIR / file, "r") as f:
        data = json.load(f)

    entries = []
    for entry in data["logs"]:
        entry = dict(entry)
        entry["topics"] = [HexBytes(t) for t in entry["topics"]]
        entry["data"] = HexBytes(entry["data"])
        entry["transactionHash"] = HexBytes(entry["transactionHash"])
        entry["blockHash"] = HexBytes(entry["blockHash"])
        entries.append(AttributeDict(entry))

    # only return logs from certain transactions
    if txids is not None:
        entries = [entry for entry in entries if Web3.to_hex(entry["transactionHash"]) in txids]

    return entries

def load_events(file: str, txids: Optional[list] = None) -> List[Event]:
    return [Event.from_log(entry) for entry in load_logs(file, txids)]

def encode_event(
    w3: Web3,
    info: xlake.contract.Info,
    name: str,
    values: Dict[str, Any],
    contract: str,
    tx_hash: str = "0x" + "ab" * 32,
    block_number: int = 1,
    log_index: int = 0,
) -> Event:
    """
    Build a raw event log for the ABI event ``name`` with the given argument values.
    """
    event_abi = info.event(name)

    topics = [add_0x_prefix(event_abi_to_log_topic(event_abi).hex())]
    data_types = []
    data_values = []
    for arg in event_abi["inputs"]:
        if arg["indexed"]:
            topics.append(add_0x_prefix(w3.codec.encode([arg["type"]], [values[arg["name"]]]).hex()))
        else:
            data_types.append(arg["type"])
            data_values.append(values[arg["name"]])

    topics += [None] * (4 - len(topics))

    return Event(
        contract=Web3.to_checksum_address(contract),
        topic_0=topics[0],
        topic_1=topics[1],
        topic_2=topics[2],
        topic_3=topics[3],
        log_data=add_0x_prefix(w3.codec.encode(data_types, data_values).hex()),
        tx_hash=tx_hash,
        block_number=block_number,
        block_hash="0x" + "cd" * 32,
        log_index=log_index,
    )

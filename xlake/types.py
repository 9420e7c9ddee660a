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
    Union,
)

from dataclasses import (
    dataclass,
    field,
)

from eth_typing import HexStr
from web3 import Web3
from web3.types import LogReceipt

TRecord = Dict[str, Any]


def to_hexstr(value: Union[bytes, str, None]) -> Optional[HexStr]:
    """
    Normalize a hex value (``HexBytes``, ``bytes`` or hex string) to a lower-cased ``0x`` prefixed string.

    :param value: hex value
    :return:
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return HexStr(Web3.to_hex(value))
    value = value.lower()
    return HexStr(value if value.startswith("0x") else f"0x{value}")


@dataclass(frozen=True)
class Block(object):
    """
    Minimal block information passed to handler hooks.

    Attributes:
        number: block height
        hash: block hash, if known
    """
    number: int
    hash: Optional[HexStr] = None


@dataclass(frozen=True)
class Event(object):
    """
    A raw event log entry as delivered by the event stream.

    The topic slots mirror the EVM log layout: ``topic_0`` is the event signature hash,
    ``topic_1`` to ``topic_3`` hold the indexed event parameters (if any).

    Example:
        Event(
            contract='0xfFf9976782d46CC05630D1f6eBAb18b2324d6B14',
            topic_0='0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef',
            topic_1='0x000000000000000000000000e67ddd0ef25bc9d6a2a55b4b5946140b9e570121',
            topic_2='0x0000000000000000000000003fc91a3afd70395cd496c647d5a6cc9d4b2b7fad',
            topic_3=None,
            log_data='0x00000000000000000000000000000000000000000000000000038d7ea4c68000',
            tx_hash='0x5e5e0ba5d0b5e8b8eb0b7c7f8f5b7d9d3b8c1e1f0a0e6b5c9d0f1a2b3c4d5e6f',
            block_number=4567470,
            block_hash='0x9c1d0d3d3b1f4a7a6f6c5b4a3d2e1f0a9b8c7d6e5f4a3b2c1d0e9f8a7b6c5d4e',
            log_index=12,
            tx_index=3,
        )
    """
    contract: str
    topic_0: Optional[HexStr]
    topic_1: Optional[HexStr] = None
    topic_2: Optional[HexStr] = None
    topic_3: Optional[HexStr] = None
    log_data: HexStr = HexStr("0x")
    tx_hash: Optional[HexStr] = None
    block_number: int = 0
    block_hash: Optional[HexStr] = None
    log_index: int = 0
    tx_index: int = 0

    @property
    def topics(self) -> List[Optional[HexStr]]:
        return [self.topic_0, self.topic_1, self.topic_2, self.topic_3]

    @classmethod
    def from_log(cls, entry: LogReceipt) -> "Event":
        """
        Convert a web3 log entry (as returned by ``eth_getLogs``) to an event.

        :param entry: event log entry
        :return:
        """
        topics = [to_hexstr(t) for t in entry["topics"]]
        assert len(topics) <= 4
        topics += [None] * (4 - len(topics))

        return cls(
            contract=Web3.to_checksum_address(entry["address"]),
            topic_0=topics[0],
            topic_1=topics[1],
            topic_2=topics[2],
            topic_3=topics[3],
            log_data=to_hexstr(entry["data"]),
            tx_hash=to_hexstr(entry["transactionHash"]),
            block_number=entry["blockNumber"],
            block_hash=to_hexstr(entry["blockHash"]),
            log_index=entry["logIndex"],
            tx_index=entry["transactionIndex"],
        )


@dataclass(frozen=True)
class LogFilter(object):
    """
    Contract addresses and event signature hashes of interest.

    Attributes:
        contract: contract addresses emitting the events
        topic_0: event signature hashes (any of)
    """
    contract: List[str] = field(default_factory=list)
    topic_0: List[HexStr] = field(default_factory=list)

    def params(self, from_block: int, to_block: int) -> dict:
        """
        Render the ``eth_getLogs`` filter parameters for a block interval.

        :param from_block: first block (included)
        :param to_block: last block (included)
        :return:
        """
        assert from_block <= to_block
        return {
            "fromBlock": hex(from_block),
            "toBlock": hex(to_block),
            "address": list(self.contract),
            "topics": [list(self.topic_0)],
        }


@dataclass(frozen=True)
class Properties(object):
    """
    Static properties of a datalake handler.

    Attributes:
        id: unique identifier
        initial_block: the earliest block the handler will ever process
    """
    id: str
    initial_block: int

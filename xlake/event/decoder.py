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
)

import logging

from eth_typing import (
    ABI,
    ABIEvent,
    HexStr,
)
from eth_utils import event_abi_to_log_topic
from hexbytes import HexBytes

from web3 import Web3
from web3.datastructures import AttributeDict
from web3.exceptions import (
    LogTopicError,
    MismatchedABI,
)

# Currently this method is not exposed over the official web3 API
from web3._utils.events import get_event_data

from xlake.types import (
    Event,
    to_hexstr,
)

log = logging.getLogger(__name__)


class EventDecoder(object):

    def __init__(self, w3: Web3, abi: ABI) -> None:
        """
        Wraps a contract ABI to decode raw event logs.

        :param w3: web3 provider (only the ABI codec is used)
        :param abi: contract ABI
        """
        self.w3 = w3

        # generate topics from events
        self._abis: Dict[HexStr, ABIEvent] = {}
        self._topics: Dict[str, HexStr] = {}
        for event_abi in abi:
            if event_abi["type"] != "event" or event_abi.get("anonymous"):
                continue

            topic = to_hexstr(event_abi_to_log_topic(event_abi))
            self._abis[topic] = event_abi
            self._topics[event_abi["name"]] = topic

            log.debug(f"Event(name={event_abi['name']}, topic={topic})")

    @property
    def topics(self) -> List[HexStr]:
        return list(self._topics.values())

    def topic(self, name: str) -> HexStr:
        """
        Return the signature hash (topic 0) of an event

        :param name: event name
        :return:
        """
        return self._topics[name]

    def decode(self, event: Event, num_topics: int) -> Dict[str, Any]:
        """
        Decode the event arguments of a raw event log.

        The number of topics has to match the event signature exactly (signature hash plus one
        topic for each indexed parameter), e.g. 3 for ``Transfer(address indexed, address indexed, uint256)``.

        Note: Errors are not handled here, a mismatching event raises ``MismatchedABI`` or ``LogTopicError``.

        :param event: raw event log
        :param num_topics: number of topics used by the event (including topic 0)
        :return: decoded event arguments
        """
        assert 1 <= num_topics <= 4

        topic = to_hexstr(event.topic_0)
        if topic not in self._abis:
            raise MismatchedABI(f"Unknown event topic '{topic}' (tx '{event.tx_hash}')")

        topics = event.topics[:num_topics]
        if any(t is None for t in topics):
            raise LogTopicError(f"Expected {num_topics} topics for event topic '{topic}' (tx '{event.tx_hash}')")

        entry = AttributeDict({
            "address": event.contract,
            "topics": [HexBytes(t) for t in topics],
            "data": HexBytes(event.log_data),
            "logIndex": event.log_index,
            "transactionIndex": event.tx_index,
            "transactionHash": event.tx_hash,
            "blockHash": event.block_hash,
            "blockNumber": event.block_number,
        })

        data = get_event_data(self.w3.codec, self._abis[topic], entry)
        return dict(data["args"])

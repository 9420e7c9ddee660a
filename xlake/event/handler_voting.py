#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

import logging

from web3 import Web3

import xlake.contract
from xlake.config import MonitorConfig
from xlake.store import Store
from xlake.types import (
    Block,
    Event,
    LogFilter,
    Properties,
)
from .decoder import EventDecoder
from .handler import (
    EventHandler,
    TopicDispatcher,
)
from .ledger import (
    TABLE_CANDIDATES,
    add_vote,
    create_candidate,
)

log = logging.getLogger(__name__)


class EventHandlerVoting(EventHandler):
    """
    Vote tally of a simple voting contract

    Events:
      - NewCandidate(uint256 indexed _candidateId, string _name)
      - VoteEvent(uint256 indexed _candidateId)
    """

    tables = frozenset({TABLE_CANDIDATES})

    def __init__(
        self,
        w3: Web3,
        store: Store,
        config: MonitorConfig,
        info: xlake.contract.Info = xlake.contract.voting,
    ) -> None:
        self._config = config
        self._store = store
        self._decoder = EventDecoder(w3, info.abi)

        self._dispatch = TopicDispatcher({
            self._decoder.topic("NewCandidate"): self._process_new_candidate,
            self._decoder.topic("VoteEvent"): self._process_vote,
        })

    def properties(self) -> Properties:
        return Properties(id=self._config.id, initial_block=self._config.start_block)

    def filter_for(self, block: Block) -> LogFilter:
        return LogFilter(
            contract=[self._config.contract_address],
            topic_0=self._dispatch.topics,
        )

    def handle(self, event: Event) -> None:
        self._dispatch(event)

    def _process_new_candidate(self, event: Event) -> None:
        decoded = self._decoder.decode(event, 2)
        log.info(f"NewCandidate(id={decoded['_candidateId']}, name={decoded['_name']!r}) in tx '{event.tx_hash}'")
        create_candidate(self._store, decoded["_candidateId"], decoded["_name"])

    def _process_vote(self, event: Event) -> None:
        decoded = self._decoder.decode(event, 2)
        add_vote(self._store, decoded["_candidateId"])

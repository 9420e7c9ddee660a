#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import (
    List,
    Optional,
    Union,
)

import logging
import operator

from eth_typing import HexStr
from web3 import Web3

from xlake.chain import Chain
from xlake.event import EventHandler
from xlake.store import (
    TABLE_STATE,
    Store,
)
from xlake.types import (
    Block,
    Event,
    LogFilter,
    TRecord,
)
from xlake.util import (
    bundled,
    intervaled,
)

log = logging.getLogger(__name__)


class Runner(object):
    """
    Drives a single event handler block by block.

    Program flow per chunk of blocks:
    1) EventHandler: generate the event filter
    2) Runner: fetch matching event logs (eth_getLogs), sort them by (blockNumber, logIndex)
    3) EventHandler: process events one at a time, in order
    4) EventHandler: end of block hook for every block of the chunk
    5) Runner: persist the state (last processed block)

    Note: Chain reorganisations are not detected. ``drop_blocks()`` rewinds the state, but
    records written by the handler are not rolled back.
    """

    def __init__(
        self,
        w3: Web3,
        store: Store,
        handler: EventHandler,
        chunk_size: int = 1024,
        chain: Optional[Chain] = None,
    ) -> None:
        """
        :param w3: web3 provider
        :param store: key-value store shared with the handler
        :param handler: event handler
        :param chunk_size: number of blocks that should be requested at once
        :param chain: expected chain (verified against the provider before scanning)
        """
        assert chunk_size > 0

        self._w3 = w3
        self._store = store
        self._handler = handler
        self._chunk_size = chunk_size
        self._chain = chain

        missing = set(handler.tables) - set(store.tables)
        if missing:
            raise ValueError(f"Store is missing tables {sorted(missing)} required by '{handler.properties().id}'")

    @property
    def state_key(self) -> str:
        return self._handler.properties().id

    def load_state(self) -> Optional[TRecord]:
        return self._store.get(TABLE_STATE, self.state_key)

    def _save_state(self, block_number: int, block_hash: Optional[HexStr] = None) -> None:
        self._store.set(TABLE_STATE, self.state_key, {
            "block_number": block_number,
            "block_hash": block_hash,
        })

    def _check_chain(self) -> None:
        if self._chain is None:
            return

        chain_id = self._w3.eth.chain_id
        if chain_id != int(self._chain):
            raise ValueError(f"Provider is connected to chain {chain_id}, expected {self._chain!r}")

    def _fetch_events(self, filter_: LogFilter, from_block: int, to_block: int) -> List[Event]:
        # an empty filter would match every log
        if not filter_.contract or not filter_.topic_0:
            return []

        entries = self._w3.eth.get_logs(filter_.params(from_block, to_block))
        entries = [entry for entry in entries if not entry.get("removed", False)]
        entries = sorted(entries, key=operator.itemgetter("blockNumber", "logIndex"))
        return [Event.from_log(entry) for entry in entries]

    def _process_chunk(self, from_block: int, to_block: int) -> Optional[HexStr]:
        filter_ = self._handler.filter_for(Block(number=from_block))
        events = self._fetch_events(filter_, from_block, to_block)

        bundles = {
            bundle[0].block_number: bundle
            for bundle in bundled(events, key=operator.attrgetter("block_number"))
        }

        block_hash = None
        for number in range(from_block, to_block + 1):
            bundle = bundles.get(number, [])
            for event in bundle:
                self._handler.handle(event)

            block_hash = bundle[0].block_hash if bundle else None
            self._handler.on_block_end(Block(number=number, hash=block_hash))

        log.info(f"Processed blocks {from_block}-{to_block} ({len(events)} events)")
        return block_hash

    def scan(self, end_block: Union[int, str] = "latest") -> Optional[int]:
        """
        Process all blocks from the last saved state (or the handler's initial block) up to ``end_block``.

        :param end_block: last block (included) or 'latest'
        :return: last processed block or None if there was nothing to do
        """
        self._check_chain()

        if end_block == "latest":
            end_block = self._w3.eth.get_block_number()
        assert isinstance(end_block, int)

        start_block = self._handler.properties().initial_block
        state = self.load_state()
        if state is not None:
            start_block = max(start_block, state["block_number"] + 1)

        if start_block > end_block:
            log.info(f"Nothing to do, '{self.state_key}' is up to date (block {start_block - 1})")
            return None

        log.info(f"Scanning blocks {start_block}-{end_block} for '{self.state_key}'")

        for a, b in intervaled(start_block, end_block, self._chunk_size):
            block_hash = self._process_chunk(a, b)
            self._save_state(b, block_hash)

        return end_block

    def drop_blocks(self, block_number: int) -> None:
        """
        Drop all blocks starting at ``block_number`` (e.g. after a reorganisation was detected),
        they will be processed again by the next scan.

        :param block_number: first dropped block
        :return:
        """
        block = Block(number=block_number)

        self._handler.on_block_drop_before(block)
        self._save_state(block_number - 1)
        self._handler.on_block_drop_after(block)

        log.warning(f"Dropped blocks from {block_number} for '{self.state_key}' (records are not rolled back)")

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import (
    Callable,
    Dict,
    FrozenSet,
)

import abc
import logging

from eth_typing import HexStr

from xlake.types import (
    Block,
    Event,
    LogFilter,
    Properties,
    to_hexstr,
)

log = logging.getLogger(__name__)


class EventHandler(abc.ABC):
    """
    Event handler interface

    Responsible for:
    - name the contract events of interest (filter)
    - dispatch each delivered event to its processing routine (keyed by topic 0)
    - decode the event and update the derived key-value tables

    The runner delivers events one at a time, in chain order (blockNumber, logIndex) and
    waits for ``handle()`` to return before delivering the next one.

    Note: Reorganisations are handled by the runner/store. The block hooks are part of the
    interface, but most handlers have no use for them.
    """

    # names of the store tables written by the handler
    tables: FrozenSet[str] = frozenset()

    @abc.abstractmethod
    def properties(self) -> Properties:
        """
        Static handler properties (identifier, first block to process)

        :return:
        """
        raise NotImplementedError

    @abc.abstractmethod
    def filter_for(self, block: Block) -> LogFilter:
        """
        Generate the event filter used to retrieve events starting at ``block``.

        The filter may change from block to block.

        :param block: first block the filter applies to
        :return:
        """
        raise NotImplementedError

    @abc.abstractmethod
    def handle(self, event: Event) -> None:
        """
        Process a single event.

        :param event: raw event log
        :return:
        """
        raise NotImplementedError

    def on_block_end(self, block: Block) -> None:
        """
        Called after the last event of a block was handled (and for blocks without events).
        """
        pass

    def on_block_drop_before(self, block: Block) -> None:
        """
        Called before blocks starting at ``block`` are dropped.
        """
        pass

    def on_block_drop_after(self, block: Block) -> None:
        """
        Called after blocks starting at ``block`` were dropped.
        """
        pass


class TopicDispatcher(object):
    """
    Maps event signature hashes (topic 0) to processing routines.

    Events with an unknown topic are ignored.
    """

    def __init__(self, routes: Dict[HexStr, Callable[[Event], None]]) -> None:
        self._routes = {to_hexstr(topic): fn for topic, fn in routes.items()}

    @property
    def topics(self):
        return list(self._routes.keys())

    def __call__(self, event: Event) -> bool:
        """
        Invoke the routine matching ``event.topic_0``

        :param event: raw event log
        :return: True if a routine was invoked
        """
        fn = self._routes.get(to_hexstr(event.topic_0))
        if fn is None:
            log.debug(f"Ignoring event with unknown topic '{event.topic_0}' (tx '{event.tx_hash}')")
            return False

        fn(event)
        return True

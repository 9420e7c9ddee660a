#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import Optional

import logging

from eth_utils import function_abi_to_4byte_selector

from web3 import Web3

import xlake.contract
from xlake.config import MonitorConfig
from xlake.store import Store
from xlake.trace import TraceClient
from xlake.types import (
    Block,
    Event,
    LogFilter,
    Properties,
    to_hexstr,
)
from .decoder import EventDecoder
from .handler import (
    EventHandler,
    TopicDispatcher,
)
from .ledger import TokenLedger

log = logging.getLogger(__name__)


def _make_ledger(store: Store, config: MonitorConfig, info: xlake.contract.Info, trace: Optional[TraceClient]) -> TokenLedger:
    if config.wallet_address is None:
        raise ValueError(f"Datalake '{config.id}' requires a wallet address")

    selector = to_hexstr(function_abi_to_4byte_selector(info.function("transferFrom")))
    return TokenLedger(
        store=store,
        wallet_address=config.wallet_address,
        contract_address=config.contract_address,
        transfer_from_selector=selector,
        trace=trace,
    )


class EventHandlerWrappedToken(EventHandler):
    """
    Wallet tracker for a wrapped native token (WETH9 like)

    Events:
      - Transfer(address indexed src, address indexed dst, uint256 wad)
      - Approval(address indexed src, address indexed guy, uint256 wad)
      - Deposit(address indexed dst, uint256 wad)
    """

    tables = TokenLedger.tables

    def __init__(
        self,
        w3: Web3,
        store: Store,
        config: MonitorConfig,
        trace: Optional[TraceClient] = None,
        info: xlake.contract.Info = xlake.contract.weth,
    ) -> None:
        """
        :param w3: web3 provider
        :param store: key-value store
        :param config: datalake configuration (requires a wallet address)
        :param trace: trace API client, allowances are not decremented without it
        :param info: contract information (ABI)
        """
        self._config = config
        self._decoder = EventDecoder(w3, info.abi)
        self._ledger = _make_ledger(store, config, info, trace)

        self._dispatch = TopicDispatcher({
            self._decoder.topic("Transfer"): self._process_transfer,  # 0xddf252ad1be2c89b69c2b068fc378daa952ba7f163c4a11628f55a4df523b3ef
            self._decoder.topic("Approval"): self._process_approval,  # 0x8c5be1e5ebec7d5bd14f71427d1e84f3dd0314c0f7b2291e5b200ac8c7c3b925
            self._decoder.topic("Deposit"): self._process_deposit,  # 0xe1fffcc4923d04b559f4d29a8bfc6cda04eb5b0d3c460751c2402c5c5cc9109c
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

    def _process_transfer(self, event: Event) -> None:
        decoded = self._decoder.decode(event, 3)
        log.debug(f"Decoded {decoded}")
        self._ledger.transfer(event, decoded["src"], decoded["dst"], decoded["wad"])

    def _process_approval(self, event: Event) -> None:
        decoded = self._decoder.decode(event, 3)
        log.debug(f"Decoded {decoded}")
        self._ledger.approval(event, decoded["src"], decoded["guy"], decoded["wad"])

    def _process_deposit(self, event: Event) -> None:
        decoded = self._decoder.decode(event, 2)
        log.debug(f"Decoded {decoded}")
        self._ledger.deposit(event, decoded["dst"], decoded["wad"])


class EventHandlerToken(EventHandler):
    """
    Wallet tracker for a standard ERC20 token

    Events:
      - Transfer(address indexed from, address indexed to, uint256 value)
      - Approval(address indexed owner, address indexed spender, uint256 value)
    """

    tables = TokenLedger.tables

    def __init__(
        self,
        w3: Web3,
        store: Store,
        config: MonitorConfig,
        trace: Optional[TraceClient] = None,
        info: xlake.contract.Info = xlake.contract.erc20,
    ) -> None:
        self._config = config
        self._decoder = EventDecoder(w3, info.abi)
        self._ledger = _make_ledger(store, config, info, trace)

        self._dispatch = TopicDispatcher({
            self._decoder.topic("Transfer"): self._process_transfer,
            self._decoder.topic("Approval"): self._process_approval,
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

    def _process_transfer(self, event: Event) -> None:
        decoded = self._decoder.decode(event, 3)
        self._ledger.transfer(event, decoded["from"], decoded["to"], decoded["value"])

    def _process_approval(self, event: Event) -> None:
        decoded = self._decoder.decode(event, 3)
        self._ledger.approval(event, decoded["owner"], decoded["spender"], decoded["value"])

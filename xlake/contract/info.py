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

import json

from pathlib import Path

from eth_typing import (
    ABI,
    ABIEvent,
    ABIFunction,
)

CONTRACT_DIR = Path(__file__).parent


class Info(object):
    """
    Temporary hard code contract information for the sake of simplicity.
    This will eventually be replaced/complemented with a more dynamic config file.
    """

    def __init__(self, address: Optional[str], abi_file: str, from_block: Optional[int]) -> None:
        """
        Contract information

        :param address: contract address
        :param abi_file: json file (relative to the contract directory) containing list of event/function interfaces
        :param from_block: block height of contract deployment (used to filter events)
        """
        self.address = address

        with open(CONTRACT_DIR / abi_file, "r", encoding="utf-8") as f:
            data = json.load(f)
            self.abi: ABI = data["abi"]

        self.from_block = from_block

    def events(self) -> List[ABIEvent]:
        return [entry for entry in self.abi if entry["type"] == "event"]

    def event(self, name: str) -> ABIEvent:
        for entry in self.events():
            if entry["name"] == name:
                return entry
        raise KeyError(f"Unknown event '{name}' in {self}")

    def function(self, name: str) -> ABIFunction:
        for entry in self.abi:
            if entry["type"] == "function" and entry["name"] == name:
                return entry
        raise KeyError(f"Unknown function '{name}' in {self}")

    def __repr__(self):
        return f"Info <address={self.address} from_block={self.from_block}>"


erc20 = Info(
    address=None,
    abi_file="ERC20.json",
    from_block=None,
)

# Sepolia (wallet monitoring start)
weth = Info(
    address="0xfFf9976782d46CC05630D1f6eBAb18b2324d6B14",
    abi_file="WETH9.json",
    from_block=4567462,
)

# Sepolia (deployment at 4274183)
voting = Info(
    address="0x7ca293451a1131d67a7daaa0a852d5564366b7bf",
    abi_file="VotingSystem.json",
    from_block=4274183,
)

#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import Optional

import os
import logging

from dataclasses import dataclass

from web3 import Web3

from xlake.chain import Chain


DEFAULT = {
    # Logging settings
    "LOG_LEVEL": logging.INFO,
    "LOG_FORMAT": "%(asctime)s.%(msecs)04d %(levelname)-5s [%(threadName)-10s %(process)5d] %(name)s: %(message)s",
    "LOG_DATE_FORMAT": "%H:%M:%S",

    # Database settings (used by the sql store)
    "DB_DRIVER": "postgresql",
    "DB_HOST": os.getenv("DB_HOST", "localhost"),
    "DB_PORT": os.getenv("DB_PORT", 5432),
    "DB_USERNAME": os.getenv("DB_USERNAME", "root"),
    "DB_PASSWORD": os.getenv("DB_PASSWORD", "password"),
    "DB_DATABASE": os.getenv("DB_DATABASE", "debug"),
    "DB_SCHEMA": os.getenv("DB_SCHEMA", None),

    "DB_DEBUG": False,

    # Redis store settings
    "REDIS_HOST": os.getenv("REDIS_HOST", "localhost"),
    "REDIS_PORT": os.getenv("REDIS_PORT", 6379),
    "REDIS_PASSWORD": os.getenv("REDIS_PASSWORD", "password"),
    "REDIS_DATABASE": os.getenv("REDIS_DATABASE", 0),

    # Runner settings
    "XL_CHUNK_SIZE": int(os.getenv("XL_CHUNK_SIZE", 1024)),

    # web3 provider RPC url
    "API_URL": os.getenv("API_URL", "http://localhost:8545/"),
    # "API_URL": os.getenv("API_URL", "https://rpc.sepolia.org/"),  # ETH Sepolia

    # Transaction trace API (used to resolve the caller of transferFrom)
    "TRACE_API_URL": os.getenv("TRACE_API_URL", "http://localhost:8080/v1/eth/sepolia"),
    "TRACE_API_KEY": os.getenv("TRACE_API_KEY", None),
    "TRACE_TIMEOUT": int(os.getenv("TRACE_TIMEOUT", 30)),
    "TRACE_RETRIES": int(os.getenv("TRACE_RETRIES", 5)),
}

CONFIG = dict(DEFAULT)


@dataclass(frozen=True)
class MonitorConfig(object):
    """
    Configuration of a single datalake handler.

    Attributes:
        id: unique identifier of the datalake (also used as runner state key)
        chain: network the contract lives on
        contract_address: monitored contract address
        start_block: first block that should be processed
        wallet_address: monitored wallet address (token handlers only)
    """
    id: str
    chain: Chain
    contract_address: str
    start_block: int
    wallet_address: Optional[str] = None

    def __post_init__(self) -> None:
        if not Web3.is_address(self.contract_address):
            raise ValueError(f"Invalid contract address '{self.contract_address}'")

        if self.wallet_address is not None and not Web3.is_address(self.wallet_address):
            raise ValueError(f"Invalid wallet address '{self.wallet_address}'")

        if self.start_block < 0:
            raise ValueError(f"Invalid start block {self.start_block}")

        # normalize (frozen dataclass)
        object.__setattr__(self, "contract_address", Web3.to_checksum_address(self.contract_address))
        if self.wallet_address is not None:
            object.__setattr__(self, "wallet_address", Web3.to_checksum_address(self.wallet_address))

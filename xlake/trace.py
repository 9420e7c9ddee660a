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

import logging

from dataclasses import dataclass

import orjson
import requests

from eth_typing import HexStr

from xlake.middleware import http_backoff_retry_request
from xlake.types import to_hexstr

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallFrame(object):
    """
    A single call frame of a transaction trace.

    Attributes:
        op_code: EVM opcode of the frame (e.g. ``CALL``, ``DELEGATECALL``, ``STATICCALL``)
        contract: address of the called contract (lower-cased)
        sig_hash: 4 byte function selector (e.g. ``0x23b872dd``)
        sender: ``msg.sender`` of the frame (lower-cased)
    """
    op_code: str
    contract: str
    sig_hash: Optional[str]
    sender: str

    @classmethod
    def from_dict(cls, data: dict) -> "CallFrame":
        return cls(
            op_code=str(data.get("op_code", "")).upper(),
            contract=str(data.get("contract", "")).lower(),
            sig_hash=data["sig_hash"].lower() if data.get("sig_hash") else None,
            sender=str(data.get("sender", "")).lower(),
        )


class TraceClient(object):
    """
    Client for a live transaction trace API.

    Only a single endpoint is used:
      GET {api_url}/transactions/{tx_hash}

    Example response:
    {
        "hash": "0x6a7c...",
        "logs": [
            {
                "op_code": "CALL",
                "contract": "0xfff9976782d46cc05630d1f6ebab18b2324d6b14",
                "sig_hash": "0x23b872dd",
                "sender": "0x3fc91a3afd70395cd496c647d5a6cc9d4b2b7fad",
                ...
            },
            ...
        ]
    }
    """

    def __init__(
        self,
        api_url: str,
        api_key: Optional[str] = None,
        timeout: int = 30,
        retries: int = 5,
        max_delay: int = 60,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        :param api_url: base url of the network specific API
        :param api_key: optional API key (sent as ``X-API-KEY`` header)
        :param timeout: request timeout in seconds
        :param retries: max number of attempts per request
        :param max_delay: max backoff delay in seconds
        :param session: requests session (a new one is created if omitted)
        """
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._session = session if session is not None else requests.Session()

        if api_key:
            self._session.headers.update({"X-API-KEY": api_key})

        self._get = http_backoff_retry_request(self._request, retries=retries, max_delay=max_delay)

    def _request(self, url: str) -> dict:
        r = self._session.get(url, timeout=self._timeout)
        r.raise_for_status()
        return orjson.loads(r.content)

    def get_transaction_calls(self, tx_hash: HexStr) -> List[CallFrame]:
        """
        Fetch the call frames of a transaction.

        :param tx_hash: transaction hash
        :return:
        """
        tx_hash = to_hexstr(tx_hash)
        log.debug(f"Getting trace of tx '{tx_hash}'")

        data = self._get(f"{self._api_url}/transactions/{tx_hash}")
        return [CallFrame.from_dict(entry) for entry in (data.get("logs") or [])]

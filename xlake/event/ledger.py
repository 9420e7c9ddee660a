#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# Copyright (C) 2022-2022 Riku Block
# All rights reserved.
#
# This file is part of XLake.

from typing import Optional

import logging

from eth_typing import HexStr
from web3 import Web3

from xlake.store import Store
from xlake.trace import TraceClient
from xlake.types import (
    Event,
    TRecord,
)

log = logging.getLogger(__name__)

# An approval of the max uint256 value is treated as unlimited and never decremented
MAX_UINT256 = 2 ** 256 - 1

TABLE_BALANCES = "balances"
TABLE_ALLOWANCES = "allowances"
TABLE_TRANSFERS = "transfers"
TABLE_TRANSFER_FROMS = "transfer_froms"
TABLE_APPROVALS = "approvals"
TABLE_DEPOSITS = "deposits"
TABLE_CANDIDATES = "candidates"


def balance_key(address: str) -> str:
    return address.lower()


def allowance_key(owner: str, spender: str) -> str:
    return f"{owner}_{spender}".lower()


def add_balance(store: Store, address: str, delta: int) -> TRecord:
    """
    Add ``delta`` (may be negative) to the balance of ``address``, create the record if necessary.

    :param store: key-value store
    :param address: account address
    :param delta: signed amount
    :return: updated balance record
    """
    assert isinstance(delta, int)

    key = balance_key(address)
    balance = store.get(TABLE_BALANCES, key)
    if balance is not None:
        balance["balance"] = int(balance["balance"]) + delta
    else:
        balance = {"address": key, "balance": delta}

    store.set(TABLE_BALANCES, key, balance)
    return balance


def set_allowance(store: Store, owner: str, spender: str, value: int) -> TRecord:
    """
    Replace the allowance of (``owner``, ``spender``) with ``value``.

    :param store: key-value store
    :param owner: token owner
    :param spender: approved spender
    :param value: approved amount
    :return: updated allowance record
    """
    key = allowance_key(owner, spender)
    allowance = store.get(TABLE_ALLOWANCES, key)
    if allowance is not None:
        allowance["allowance"] = value
    else:
        allowance = {"owner_spender": key, "allowance": value}

    store.set(TABLE_ALLOWANCES, key, allowance)
    return allowance


def spend_allowance(store: Store, owner: str, spender: str, value: int) -> Optional[TRecord]:
    """
    Decrement the allowance of (``owner``, ``spender``) by ``value``.

    Unknown allowances are left untouched, unlimited (max uint256) allowances are never decremented.

    :param store: key-value store
    :param owner: token owner
    :param spender: approved spender
    :param value: spent amount
    :return: updated allowance record or None if nothing changed
    """
    key = allowance_key(owner, spender)
    allowance = store.get(TABLE_ALLOWANCES, key)
    if allowance is None:
        log.debug(f"No allowance recorded for '{key}'")
        return None

    if int(allowance["allowance"]) == MAX_UINT256:
        return None

    allowance["allowance"] = int(allowance["allowance"]) - value
    store.set(TABLE_ALLOWANCES, key, allowance)
    return allowance


def create_candidate(store: Store, candidate_id: int, name: str) -> TRecord:
    candidate = {"candidate_id": candidate_id, "name": name, "num_votes": 0}
    store.set(TABLE_CANDIDATES, str(candidate_id), candidate)
    return candidate


def add_vote(store: Store, candidate_id: int) -> Optional[TRecord]:
    """
    Count a single vote, votes for unknown candidates are ignored.

    :param store: key-value store
    :param candidate_id: candidate identifier
    :return: updated candidate record or None if the candidate is unknown
    """
    candidate = store.get(TABLE_CANDIDATES, str(candidate_id))
    if candidate is None:
        log.warning(f"Ignoring vote for unknown candidate {candidate_id}")
        return None

    candidate["num_votes"] += 1
    store.set(TABLE_CANDIDATES, str(candidate_id), candidate)
    return candidate


class TokenLedger(object):
    """
    Tracks balance, allowances and raw transfer/approval/deposit logs of a single wallet
    for a single token contract.
    """

    tables = frozenset({
        TABLE_BALANCES,
        TABLE_ALLOWANCES,
        TABLE_TRANSFERS,
        TABLE_TRANSFER_FROMS,
        TABLE_APPROVALS,
        TABLE_DEPOSITS,
    })

    def __init__(
        self,
        store: Store,
        wallet_address: str,
        contract_address: str,
        transfer_from_selector: HexStr,
        trace: Optional[TraceClient] = None,
    ) -> None:
        """
        :param store: key-value store
        :param wallet_address: monitored wallet
        :param contract_address: monitored token contract
        :param transfer_from_selector: 4 byte selector of the contract's ``transferFrom`` function
        :param trace: trace API client used to find the caller of ``transferFrom``
        """
        self._store = store
        self.wallet_address = Web3.to_checksum_address(wallet_address)
        self.contract_address = Web3.to_checksum_address(contract_address)
        self._transfer_from_selector = transfer_from_selector.lower()
        self._trace = trace

    def is_wallet(self, address: str) -> bool:
        return Web3.to_checksum_address(address) == self.wallet_address

    def resolve_spender(self, tx_hash: HexStr) -> Optional[str]:
        """
        Find the ``msg.sender`` of the token's ``transferFrom`` call within a transaction.

        :param tx_hash: transaction hash
        :return: spender address or None if the transaction doesn't call ``transferFrom``
        """
        contract = self.contract_address.lower()
        for call in self._trace.get_transaction_calls(tx_hash):
            if call.op_code == "CALL" and call.contract == contract and call.sig_hash == self._transfer_from_selector:
                return Web3.to_checksum_address(call.sender)
        return None

    def transfer(self, event: Event, sender: str, receiver: str, value: int) -> None:
        """
        Process a token transfer.

        :param event: raw event log
        :param sender: decoded sender address
        :param receiver: decoded receiver address
        :param value: transferred amount
        :return:
        """
        is_sender = self.is_wallet(sender)
        if not (is_sender or self.is_wallet(receiver)):
            return

        log.info(f"Transfer(from={sender}, to={receiver}, value={value}) in tx '{event.tx_hash}'")

        self._store.set(TABLE_TRANSFERS, event.tx_hash, {
            "from": sender,
            "to": receiver,
            "value": value,
        })

        add_balance(self._store, self.wallet_address, -value if is_sender else value)

        if not is_sender:
            return

        if self._trace is None:
            log.warning(f"No trace client configured, skipping allowance update for tx '{event.tx_hash}'")
            return

        spender = self.resolve_spender(event.tx_hash)
        if spender is None:
            return

        self._store.set(TABLE_TRANSFER_FROMS, event.tx_hash, {
            "owner": sender,
            "spender": spender,
            "value": value,
        })

        spend_allowance(self._store, sender, spender, value)

    def approval(self, event: Event, owner: str, spender: str, value: int) -> None:
        """
        Process a token approval.

        :param event: raw event log
        :param owner: decoded owner address
        :param spender: decoded spender address
        :param value: approved amount
        :return:
        """
        if not self.is_wallet(owner):
            return

        log.info(f"Approval(owner={owner}, spender={spender}, value={value}) in tx '{event.tx_hash}'")

        self._store.set(TABLE_APPROVALS, event.tx_hash, {
            "owner": owner,
            "spender": spender,
            "value": value,
        })

        set_allowance(self._store, owner, spender, value)

    def deposit(self, event: Event, receiver: str, value: int) -> None:
        """
        Process a deposit (mint of wrapped native tokens).

        :param event: raw event log
        :param receiver: decoded receiver address
        :param value: deposited amount
        :return:
        """
        if not self.is_wallet(receiver):
            return

        log.info(f"Deposit(to={receiver}, value={value}) in tx '{event.tx_hash}'")

        self._store.set(TABLE_DEPOSITS, event.tx_hash, {
            "to": receiver,
            "value": value,
        })

        add_balance(self._store, self.wallet_address, value)

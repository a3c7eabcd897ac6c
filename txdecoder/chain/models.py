"""
Data models for raw transactions returned by the aggregation service.

Mirror the transactionV2 envelope shape (transaction.account.message.*) and
keep instruction payloads exactly as received so they can be echoed back
as rawData.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class RawInstruction:
    """One compiled instruction: program index, account indexes, raw payload."""

    program_id_index: int
    account_indexes: list[int]
    data: Any  # list[int], {"type": "Buffer", "data": [...]} or base58 str

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> "RawInstruction":
        """Build from one message.instructions item."""
        return cls(
            program_id_index=int(item["programIdIndex"]),
            account_indexes=[int(i) for i in item.get("accountIndexes") or []],
            data=item.get("data"),
        )


@dataclass(frozen=True)
class AddressTableLookup:
    """Reference to an address lookup table and the indexes loaded from it."""

    account_key: str
    writable_indexes: list[int] = field(default_factory=list)
    readonly_indexes: list[int] = field(default_factory=list)

    @classmethod
    def from_api_item(cls, item: dict[str, Any]) -> "AddressTableLookup":
        """Build from one message.addressTableLookups item."""
        return cls(
            account_key=_key_to_str(item["accountKey"]),
            writable_indexes=[int(i) for i in item.get("writableIndexes") or []],
            readonly_indexes=[int(i) for i in item.get("readonlyIndexes") or []],
        )


@dataclass(frozen=True)
class RawTransaction:
    """Message contents and memo of one transaction envelope."""

    account_keys: list[str]
    instructions: list[RawInstruction]
    address_table_lookups: list[AddressTableLookup]
    memo: Any = None

    @classmethod
    def from_envelope(cls, envelope: dict[str, Any]) -> "RawTransaction":
        """
        Build from a transactionV2 response body.

        Raises KeyError / TypeError / ValueError when transaction.account.message
        is missing or malformed.
        """
        tx = envelope["transaction"]
        message = tx["account"]["message"]
        metadata = tx.get("metadata") or {}
        info = metadata.get("info") or {} if isinstance(metadata, dict) else {}
        return cls(
            account_keys=[_key_to_str(k) for k in message.get("accountKeys") or []],
            instructions=[
                RawInstruction.from_api_item(ix) for ix in message.get("instructions") or []
            ],
            address_table_lookups=[
                AddressTableLookup.from_api_item(lk)
                for lk in message.get("addressTableLookups") or []
            ],
            memo=info.get("memo") if isinstance(info, dict) else None,
        )


def _key_to_str(key: Any) -> str:
    """Account keys arrive as base58 strings or {"pubkey": ...} objects."""
    if isinstance(key, dict):
        return str(key.get("pubkey", ""))
    return str(key)


def extract_memo(raw: Any) -> str:
    """
    Memo field is usually a JSON string like '{"memo": "hello"}'.

    Falls back to the raw string form when it is not JSON or has no memo
    member; absent memo gives "".
    """
    if raw is None or raw == "":
        return ""
    try:
        parsed = json.loads(raw)
    except (TypeError, ValueError):
        return str(raw)
    if isinstance(parsed, dict) and "memo" in parsed:
        memo = parsed["memo"]
        return "" if memo is None else str(memo)
    return str(raw)

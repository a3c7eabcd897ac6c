"""
Address lookup table retrieval and account key resolution.

Versioned transactions reference extra accounts through lookup tables; the
resolved key list is the message's static keys followed by, per lookup in
declaration order, the writable then readonly addresses loaded from the table.
Instruction account indexes point into that resolved list.
"""

from __future__ import annotations

import base64
from typing import Any, Sequence

import httpx
from solders.address_lookup_table_account import ADDRESS_LOOKUP_TABLE_ID, AddressLookupTable

from txdecoder.chain.models import AddressTableLookup
from txdecoder.core.exceptions import ChainRpcError, LookupTableNotFound
from txdecoder.decoder_logging import get_logger

logger = get_logger(__name__)

ADDRESS_LOOKUP_TABLE_PROGRAM_ID = str(ADDRESS_LOOKUP_TABLE_ID)

# JSON-RPC request id counter
_request_id = 0


def _next_id() -> int:
    global _request_id
    _request_id += 1
    return _request_id


def _build_rpc_body(address: str) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": _next_id(),
        "method": "getAccountInfo",
        "params": [address, {"encoding": "base64"}],
    }


def parse_lookup_table_addresses(data: bytes) -> list[str]:
    """Decode the address list from raw lookup table account data."""
    try:
        table = AddressLookupTable.deserialize(data)
    except Exception as e:
        raise ValueError(f"malformed lookup table data ({len(data)} bytes): {e}") from e
    return [str(address) for address in table.addresses]


class LookupTableClient:
    """Reads address lookup tables from the chain-state JSON-RPC endpoint."""

    def __init__(self, client: httpx.AsyncClient, rpc_url: str) -> None:
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        self._client = client
        self._rpc_url = rpc_url

    async def get_addresses(self, table_address: str) -> list[str]:
        """
        Return the table's full address list in index order.

        Raises LookupTableNotFound when the account does not exist or is not a
        lookup table, ChainRpcError on RPC errors, httpx.HTTPError on transport
        errors, and ValueError on malformed account data.
        """
        body = _build_rpc_body(table_address)
        resp = await self._client.post(self._rpc_url, json=body)
        resp.raise_for_status()
        data = resp.json()
        if not isinstance(data, dict):
            raise ChainRpcError("Solana RPC returned a non-object body")
        if "error" in data:
            err = data["error"]
            if not isinstance(err, dict):
                raise ChainRpcError(f"Solana RPC error: {err}")
            raise ChainRpcError(
                f"Solana RPC error: {err.get('message', err)} (code={err.get('code')})"
            )
        result = data.get("result")
        if not isinstance(result, dict):
            raise ChainRpcError("Solana RPC returned no result")
        value = result.get("value")
        if not value or value.get("owner") != ADDRESS_LOOKUP_TABLE_PROGRAM_ID:
            raise LookupTableNotFound(table_address)
        encoded = value.get("data")
        if isinstance(encoded, list):
            encoded = encoded[0] if encoded else ""
        return parse_lookup_table_addresses(base64.b64decode(encoded or ""))


async def fetch_table_addresses(tables: LookupTableClient, table_address: str) -> list[str]:
    """Table addresses, or [] when the table cannot be read."""
    try:
        return await tables.get_addresses(table_address)
    except (LookupTableNotFound, ChainRpcError, httpx.HTTPError, ValueError) as e:
        logger.warning(
            "lookup_table_unavailable",
            table_address=table_address,
            error=str(e) or type(e).__name__,
        )
        return []


async def resolve_account_keys(
    base_keys: Sequence[str],
    lookups: Sequence[AddressTableLookup],
    tables: LookupTableClient,
) -> list[str]:
    """
    Expand base_keys with addresses loaded from lookup tables.

    One table fetch per lookup. Indexes outside a table are skipped; an
    unreadable table contributes nothing.
    """
    resolved = list(base_keys)
    for lookup in lookups:
        table = await fetch_table_addresses(tables, lookup.account_key)
        for index in [*lookup.writable_indexes, *lookup.readonly_indexes]:
            if 0 <= index < len(table) and table[index]:
                resolved.append(table[index])
    return resolved

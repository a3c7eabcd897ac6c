"""
Pytest fixtures for decoder tests.

All HTTP collaborators (aggregation service, Solana RPC, IDL hosting) are served
by an httpx.MockTransport; IDL decoding uses FakeIdlDecoder so no network or
real IDL is needed.
"""

from __future__ import annotations

import base64
import json
from typing import Any

import httpx
import pytest
from solders.pubkey import Pubkey

from txdecoder.chain.lookup_tables import (
    ADDRESS_LOOKUP_TABLE_PROGRAM_ID,
    LookupTableClient,
)
from txdecoder.chain.upstream import UpstreamClient
from txdecoder.config.programs import PROGRAM_MAPPINGS
from txdecoder.decoder.coder_factory import CoderFactory, DecodedPayload
from txdecoder.decoder.instruction import InstructionDecoder
from txdecoder.decoder.schema_store import SchemaStore
from txdecoder.decoder.transaction import TransactionDecoder

UPSTREAM_URL = "https://upstream.test"
RPC_URL = "https://rpc.test"

LENDING_PROGRAM_ID = "jup3YeL8QhtSx1e253b2FDvsMNC87fDrgQZivbrndc9"
VAULTS_PROGRAM_ID = "jupr81YtYssSyPt8jbnGuiWon5f6x9TcDEFxYe3Bdzi"
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"

SIGNER = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
TOKEN_ACCOUNT = "7F1WzVNQ1Qpurqxxdyv3UrFQR3uoNepULVW9A4bAJ5nZ"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDT_MINT = "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB"
WSOL_MINT = "So11111111111111111111111111111111111111112"

DEPOSIT_DISCRIMINATOR = [242, 35, 198, 137, 82, 225, 242, 182]
WITHDRAW_DISCRIMINATOR = [183, 18, 70, 156, 148, 109, 161, 34]

LENDING_IDL: dict[str, Any] = {
    "address": LENDING_PROGRAM_ID,
    "metadata": {"name": "lending", "version": "0.1.0", "spec": "0.1.0"},
    "instructions": [
        {
            "name": "deposit",
            "discriminator": DEPOSIT_DISCRIMINATOR,
            "accounts": [
                {"name": "signer", "writable": True, "signer": True},
                {"name": "depositor_token_account", "writable": True},
                {"name": "mint"},
            ],
            "args": [{"name": "assets", "type": "u64"}],
        },
        {
            "name": "withdraw",
            "discriminator": WITHDRAW_DISCRIMINATOR,
            "accounts": [{"name": "signer", "writable": True, "signer": True}],
            "args": [{"name": "assets", "type": "u64"}],
        },
    ],
}


class FakeIdlDecoder:
    """Decodes instructions whose args are a single little-endian u64 named 'assets'."""

    def __init__(self, document: dict[str, Any]) -> None:
        instructions = document.get("instructions")
        if not instructions:
            raise ValueError("IDL has no instructions")
        self._names = {bytes(ix["discriminator"]): ix["name"] for ix in instructions}
        self._accounts = {
            ix["name"]: [a["name"] for a in ix.get("accounts", [])] for ix in instructions
        }

    def decode(self, data: bytes) -> DecodedPayload | None:
        name = self._names.get(bytes(data[:8]))
        if name is None:
            return None
        if len(data) < 16:
            raise ValueError("buffer too short for u64")
        return DecodedPayload(name=name, data={"assets": int.from_bytes(data[8:16], "little")})

    def account_names(self, instruction_name: str) -> list[str]:
        return list(self._accounts.get(instruction_name, []))


def deposit_data(assets: int) -> list[int]:
    return DEPOSIT_DISCRIMINATOR + list(assets.to_bytes(8, "little"))


# ProgramState::LookupTable tag, deactivation_slot = u64::MAX (active),
# last_extended_slot, start index, authority None; padded to the 56-byte meta
LOOKUP_TABLE_HEADER = (
    (1).to_bytes(4, "little") + (2**64 - 1).to_bytes(8, "little") + bytes(8) + b"\x00" + b"\x00"
).ljust(56, b"\x00")


def lookup_table_data(addresses: list[str]) -> bytes:
    """Raw lookup table account data: metadata header + 32-byte addresses."""
    return LOOKUP_TABLE_HEADER + b"".join(
        bytes(Pubkey.from_string(a)) for a in addresses
    )


def envelope(
    instructions: list[dict[str, Any]],
    account_keys: list[str],
    lookups: list[dict[str, Any]] | None = None,
    memo: Any = None,
) -> dict[str, Any]:
    """transactionV2 response body."""
    message: dict[str, Any] = {"instructions": instructions, "accountKeys": account_keys}
    if lookups is not None:
        message["addressTableLookups"] = lookups
    tx: dict[str, Any] = {"account": {"message": message}}
    if memo is not None:
        tx["metadata"] = {"info": {"memo": memo}}
    return {"transaction": tx}


class FakeNetwork:
    """
    Routes MockTransport requests to in-memory upstream, RPC and IDL fixtures.

    Records every request URL in calls so tests can count network hits.
    """

    def __init__(self) -> None:
        self.transactions: dict[str, Any] = {}
        self.tables: dict[str, bytes] = {}
        self.idls: dict[str, Any] = {}
        self.failing_idls: set[str] = set()
        self.calls: list[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.calls.append(url)
        if url.startswith(f"{UPSTREAM_URL}/transactionV2/"):
            tx_id = url.rsplit("/", 1)[-1]
            if tx_id not in self.transactions:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json=self.transactions[tx_id])
        if url.startswith(RPC_URL):
            body = json.loads(request.content)
            address = body["params"][0]
            data = self.tables.get(address)
            value = None
            if data is not None:
                value = {
                    "data": [base64.b64encode(data).decode(), "base64"],
                    "owner": ADDRESS_LOOKUP_TABLE_PROGRAM_ID,
                    "lamports": 1,
                    "executable": False,
                }
            return httpx.Response(
                200, json={"jsonrpc": "2.0", "id": body["id"], "result": {"context": {"slot": 1}, "value": value}}
            )
        if url in self.failing_idls:
            return httpx.Response(503, text="unavailable")
        if url in self.idls:
            return httpx.Response(200, json=self.idls[url])
        return httpx.Response(404, text="no route")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def count(self, prefix: str) -> int:
        return sum(1 for c in self.calls if c.startswith(prefix))


@pytest.fixture
def network() -> FakeNetwork:
    net = FakeNetwork()
    net.idls[PROGRAM_MAPPINGS[LENDING_PROGRAM_ID].idl_url] = LENDING_IDL
    return net


@pytest.fixture
def http_client(network):
    return network.client()


@pytest.fixture
def schema_store(http_client) -> SchemaStore:
    return SchemaStore(http_client)


@pytest.fixture
def coder_factory(schema_store) -> CoderFactory:
    return CoderFactory(schema_store, builder=FakeIdlDecoder)


@pytest.fixture
def instruction_decoder(coder_factory) -> InstructionDecoder:
    return InstructionDecoder(coder_factory)


@pytest.fixture
def transaction_decoder(http_client, instruction_decoder) -> TransactionDecoder:
    return TransactionDecoder(
        upstream=UpstreamClient(http_client, UPSTREAM_URL),
        tables=LookupTableClient(http_client, RPC_URL),
        instructions=instruction_decoder,
    )

"""
Pytest tests for the decode API (FastAPI TestClient).

The app-scoped decoder is replaced through dependency_overrides with one wired
to the MockTransport network from conftest.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from conftest import LENDING_PROGRAM_ID, SIGNER, deposit_data, envelope
from txdecoder.api_server.server import app, get_transaction_decoder
from txdecoder.decoder.models import DecodedInstruction, DecodeResult

TX_ID = "3nVq9P1sXsEodGZ5sLBGxE5bKXkQyBLVBZnbMRvWU5d1"


@pytest.fixture
def client(transaction_decoder):
    app.dependency_overrides[get_transaction_decoder] = lambda: transaction_decoder
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_decode_ok(client, network):
    network.transactions[TX_ID] = envelope(
        instructions=[{"programIdIndex": 1, "accountIndexes": [0], "data": deposit_data(42)}],
        account_keys=[SIGNER, LENDING_PROGRAM_ID],
        memo='{"memo":"hello"}',
    )
    r = client.get(f"/api/decode/{TX_ID}")
    assert r.status_code == 200
    data = r.json()
    assert data["transactionId"] == TX_ID
    assert data["memo"] == "hello"
    [ix] = data["instructions"]
    assert ix["programId"] == LENDING_PROGRAM_ID
    assert ix["programName"] == "LENDING_PROGRAM"
    assert ix["instructionName"] == "deposit"
    assert ix["accounts"] == [{"name": "signer", "address": SIGNER, "index": 0}]
    assert ix["decodedData"] == {"assets": "42"}
    assert ix["rawData"] == deposit_data(42)


def test_decode_empty_transaction(client, network):
    network.transactions[TX_ID] = envelope([], [SIGNER])
    r = client.get(f"/api/decode/{TX_ID}")
    assert r.status_code == 200
    assert r.json() == {"transactionId": TX_ID, "memo": "", "instructions": []}


def test_missing_tx_id(client):
    r = client.get("/api/decode")
    assert r.status_code == 400
    assert r.json() == {"error": "Missing txId"}


def test_blank_tx_id(client):
    r = client.get("/api/decode/%20")
    assert r.status_code == 400
    assert r.json() == {"error": "Missing txId"}


def test_upstream_failure_is_500(client):
    r = client.get("/api/decode/unknown-tx")
    assert r.status_code == 500
    assert "Failed to fetch transaction unknown-tx" in r.json()["error"]


class _UnrenderableDecoder:
    async def decode_transaction(self, tx_id: str) -> DecodeResult:
        ix = DecodedInstruction(
            program_id=LENDING_PROGRAM_ID,
            program_name="LENDING_PROGRAM",
            instruction_name="deposit",
            accounts=[],
            decoded_data={"side": object()},
            raw_data=[],
        )
        return DecodeResult(transaction_id=tx_id, memo="", instructions=[ix])


def test_unrenderable_result_is_500_error_body():
    app.dependency_overrides[get_transaction_decoder] = lambda: _UnrenderableDecoder()
    try:
        r = TestClient(app).get(f"/api/decode/{TX_ID}")
    finally:
        app.dependency_overrides.clear()
    assert r.status_code == 500
    assert set(r.json()) == {"error"}

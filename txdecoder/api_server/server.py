"""
FastAPI server — transaction decode API.

Exposes GET /api/decode/{tx_id} returning the decoded transaction. One shared
httpx.AsyncClient and one TransactionDecoder (with its IDL/decoder caches) live
for the app lifetime. Config via env (see txdecoder.config.env).
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field

from txdecoder import __version__
from txdecoder.config import env
from txdecoder.decoder import TransactionDecoder
from txdecoder.decoder_logging import get_logger

logger = get_logger(__name__)

MISSING_TX_ID_ERROR = "Missing txId"


# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------

class AccountResponse(BaseModel):
    name: str = Field(..., description="IDL account name, or account_<i> when unnamed")
    address: str = Field(..., description="Base58 address or UNKNOWN_ACCOUNT_<index>")
    index: int = Field(..., description="Index into the resolved account key list")


class InstructionResponse(BaseModel):
    programId: str | None = Field(None, description="Owning program ID (base58)")
    programName: str = Field(..., description="Display name, or UNKNOWN_PROGRAM")
    instructionName: str = Field(..., description="IDL instruction name, unknown or decode_error")
    accounts: list[AccountResponse] = Field(default_factory=list)
    decodedData: Any = Field(None, description="Normalized arguments, or an error payload")
    rawData: Any = Field(None, description="Instruction payload as received from upstream")


class DecodeResponse(BaseModel):
    """GET /api/decode/{tx_id} response."""

    transactionId: str = Field(..., description="Requested transaction ID")
    memo: str = Field("", description="Memo extracted from transaction metadata")
    instructions: list[InstructionResponse] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str


# -----------------------------------------------------------------------------
# Lifespan and dependency
# -----------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared HTTP client and build the decoder; close the client on shutdown."""
    client = httpx.AsyncClient(timeout=httpx.Timeout(env.get_http_timeout_sec()))
    app.state.decoder = TransactionDecoder.from_env(client)
    logger.info(
        "api_decoder_ready",
        upstream_api_url=env.get_upstream_api_url(),
        rpc_url=env.get_solana_rpc_url(),
    )
    try:
        yield
    finally:
        await client.aclose()
        logger.info("api_http_client_closed")


def get_transaction_decoder(request: Request) -> TransactionDecoder:
    """Dependency: app-scoped TransactionDecoder built in lifespan."""
    return request.app.state.decoder


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

app = FastAPI(
    title="Transaction Decoder API",
    description="Decodes Solana transaction instructions of allow-listed programs using their Anchor IDLs.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=env.get_cors_allow_origins(),
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/decode", response_model=ErrorResponse, status_code=400)
async def decode_missing_tx_id():
    return JSONResponse(status_code=400, content={"error": MISSING_TX_ID_ERROR})


@app.get(
    "/api/decode/{tx_id}",
    response_model=DecodeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def decode_transaction(
    tx_id: str,
    decoder: TransactionDecoder = Depends(get_transaction_decoder),
):
    """
    Decode every instruction of tx_id.

    400 when tx_id is blank; 500 with {"error": message} on any failure,
    including the transaction not being retrievable upstream or a decoded
    value that cannot be rendered as JSON.
    """
    tx_id = tx_id.strip()
    if not tx_id:
        return JSONResponse(status_code=400, content={"error": MISSING_TX_ID_ERROR})
    try:
        result = await decoder.decode_transaction(tx_id)
        response = JSONResponse(content=jsonable_encoder(result.to_dict()))
    except Exception as e:
        logger.exception("decode_request_failed", tx_id=tx_id, error=str(e))
        return JSONResponse(status_code=500, content={"error": str(e) or type(e).__name__})
    return response


_frontend_dir = env.get_frontend_dir()
if _frontend_dir is not None:
    app.mount("/", StaticFiles(directory=str(_frontend_dir), html=True), name="frontend")

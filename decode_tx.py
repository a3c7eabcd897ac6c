#!/usr/bin/env python3
"""
Decode one transaction from the command line and print the result as JSON.

Usage: python decode_tx.py <tx_id> [--indent 2]
Uses the same env config as the API (UPSTREAM_API_URL, SOLANA_RPC_URL, HTTP_TIMEOUT_SEC).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys

import httpx

from txdecoder.config import env
from txdecoder.core.exceptions import UpstreamFetchError
from txdecoder.decoder import DecodeResult, TransactionDecoder


async def _decode(tx_id: str) -> DecodeResult:
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(env.get_http_timeout_sec())
    ) as client:
        return await TransactionDecoder.from_env(client).decode_transaction(tx_id)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Decode a Solana transaction's instructions")
    parser.add_argument("tx_id", help="Transaction ID (signature)")
    parser.add_argument("--indent", type=int, default=2, help="JSON indent (default 2)")
    args = parser.parse_args(argv)

    tx_id = args.tx_id.strip()
    if not tx_id:
        print("[decode_tx] Missing txId", file=sys.stderr)
        return 2
    try:
        result = asyncio.run(_decode(tx_id))
    except UpstreamFetchError as e:
        print(f"[decode_tx] {e}", file=sys.stderr)
        return 1
    print(json.dumps(result.to_dict(), indent=args.indent, default=str))
    return 0


if __name__ == "__main__":
    sys.exit(main())

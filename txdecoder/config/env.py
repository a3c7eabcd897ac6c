"""
Environment variable loading for the decoder service.

- UPSTREAM_API_URL: transaction aggregation service base URL
- SOLANA_RPC_URL: chain-state JSON-RPC endpoint (address lookup tables)
- HTTP_TIMEOUT_SEC: timeout for every outbound HTTP request
- API_HOST / PORT: HTTP listen address
- CORS_ALLOW_ORIGINS: comma-separated origins (default *)
- FRONTEND_DIR: optional static frontend directory mounted at /
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is txdecoder/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_UPSTREAM_API_URL = "https://v4-api.squads.so"
DEFAULT_SOLANA_RPC_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_HTTP_TIMEOUT_SEC = 30.0
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_PORT = 5173


def load_decoder_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH)


def get_upstream_api_url() -> str:
    """Return UPSTREAM_API_URL without trailing slash."""
    load_decoder_env()
    url = (os.getenv("UPSTREAM_API_URL") or "").strip() or DEFAULT_UPSTREAM_API_URL
    return url.rstrip("/")


def get_solana_rpc_url() -> str:
    """Return SOLANA_RPC_URL, falling back to public mainnet-beta."""
    load_decoder_env()
    return (os.getenv("SOLANA_RPC_URL") or "").strip() or DEFAULT_SOLANA_RPC_URL


def get_http_timeout_sec() -> float:
    load_decoder_env()
    raw = (os.getenv("HTTP_TIMEOUT_SEC") or "").strip()
    if not raw:
        return DEFAULT_HTTP_TIMEOUT_SEC
    try:
        value = float(raw)
    except ValueError:
        return DEFAULT_HTTP_TIMEOUT_SEC
    return value if value > 0 else DEFAULT_HTTP_TIMEOUT_SEC


def get_api_host() -> str:
    load_decoder_env()
    return (os.getenv("API_HOST") or "").strip() or DEFAULT_API_HOST


def get_port() -> int:
    """Return PORT from env; default 5173."""
    load_decoder_env()
    raw = (os.getenv("PORT") or "").strip()
    try:
        return int(raw) if raw else DEFAULT_PORT
    except ValueError:
        return DEFAULT_PORT


def get_cors_allow_origins() -> list[str]:
    load_decoder_env()
    raw = (os.getenv("CORS_ALLOW_ORIGINS") or "*").strip() or "*"
    return [o.strip() for o in raw.split(",") if o.strip()]


def get_frontend_dir() -> Path | None:
    """Return FRONTEND_DIR when it names an existing directory, else None."""
    load_decoder_env()
    raw = (os.getenv("FRONTEND_DIR") or "").strip()
    if not raw:
        return None
    path = Path(raw)
    return path if path.is_dir() else None

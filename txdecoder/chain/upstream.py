"""
Aggregation service client — GET /transactionV2/{tx_id}.

Single attempt per call; every failure is reported as UpstreamFetchError so the
caller can fail the whole request.
"""

from __future__ import annotations

from typing import Any

import httpx

from txdecoder.chain.models import RawTransaction
from txdecoder.core.exceptions import UpstreamFetchError
from txdecoder.decoder_logging import get_logger

logger = get_logger(__name__)


class UpstreamClient:
    """Fetches transaction envelopes from the aggregation service."""

    def __init__(self, client: httpx.AsyncClient, base_url: str) -> None:
        if not base_url.strip():
            raise ValueError("base_url must be non-empty")
        self._client = client
        self._base_url = base_url.rstrip("/")

    async def fetch_envelope(self, tx_id: str) -> dict[str, Any]:
        """Return the raw JSON body for tx_id; raise UpstreamFetchError on any failure."""
        url = f"{self._base_url}/transactionV2/{tx_id}"
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchError(tx_id, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UpstreamFetchError(tx_id, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise UpstreamFetchError(tx_id, f"invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise UpstreamFetchError(tx_id, "response body is not a JSON object")
        return data

    async def fetch_transaction(self, tx_id: str) -> RawTransaction:
        """Fetch and parse the envelope into a RawTransaction."""
        envelope = await self.fetch_envelope(tx_id)
        try:
            raw = RawTransaction.from_envelope(envelope)
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamFetchError(tx_id, f"malformed transaction envelope: {e!r}") from e
        logger.debug(
            "upstream_transaction_fetched",
            tx_id=tx_id,
            instruction_count=len(raw.instructions),
            lookup_count=len(raw.address_table_lookups),
        )
        return raw

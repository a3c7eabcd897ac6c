"""
IDL document store — fetch once per program, keep for the process lifetime.
"""

from __future__ import annotations

from typing import Any, Mapping

import httpx

from txdecoder.config.programs import PROGRAM_MAPPINGS, ProgramInfo
from txdecoder.core.cache import ProcessCache
from txdecoder.core.exceptions import SchemaFetchError, UnknownProgram
from txdecoder.decoder_logging import get_logger

logger = get_logger(__name__)


class SchemaStore:
    """
    Fetches and memoizes Anchor IDL documents keyed by program ID.

    Failed fetches are not cached, so the next call retries.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        programs: Mapping[str, ProgramInfo] = PROGRAM_MAPPINGS,
        cache: ProcessCache[str, dict[str, Any]] | None = None,
    ) -> None:
        self._client = client
        self._programs = programs
        self._cache: ProcessCache[str, dict[str, Any]] = (
            cache if cache is not None else ProcessCache("idl")
        )

    @property
    def cache(self) -> ProcessCache[str, dict[str, Any]]:
        return self._cache

    async def fetch(self, program_id: str) -> dict[str, Any]:
        """Return the IDL for program_id; raise UnknownProgram or SchemaFetchError."""
        program = self._programs.get(program_id)
        if program is None:
            raise UnknownProgram(program_id)
        cached = self._cache.get(program_id)
        if cached is not None:
            return cached

        url = program.idl_url
        try:
            resp = await self._client.get(url)
            resp.raise_for_status()
            document = resp.json()
        except httpx.HTTPStatusError as e:
            raise SchemaFetchError(program_id, url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise SchemaFetchError(program_id, url, str(e) or type(e).__name__) from e
        except ValueError as e:
            raise SchemaFetchError(program_id, url, f"invalid JSON: {e}") from e
        if not isinstance(document, dict):
            raise SchemaFetchError(program_id, url, "IDL is not a JSON object")

        logger.info(
            "schema_fetched",
            program_id=program_id,
            program_name=program.name,
            instruction_count=len(document.get("instructions") or []),
        )
        return self._cache.put(program_id, document)

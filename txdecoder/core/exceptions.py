"""
Application-level exceptions.

Request-fatal errors (UpstreamFetchError) surface to the API/CLI caller.
Everything else is raised by a single component and absorbed by its caller
into a degraded result (instruction-local error payload or empty lookup table).
"""

from __future__ import annotations


class TxDecoderError(Exception):
    """Base class for all decoder errors."""


class UnknownProgram(TxDecoderError):
    """Program ID is not in the allow-list."""

    def __init__(self, program_id: str | None) -> None:
        super().__init__(f"Unknown program ID: {program_id}")
        self.program_id = program_id


class SchemaFetchError(TxDecoderError):
    """IDL document could not be fetched or parsed."""

    def __init__(self, program_id: str, url: str, reason: str) -> None:
        super().__init__(f"Failed to fetch IDL for {program_id} from {url}: {reason}")
        self.program_id = program_id
        self.url = url


class DecoderBuildError(TxDecoderError):
    """IDL document is not usable to build an instruction decoder."""

    def __init__(self, program_id: str, reason: str) -> None:
        super().__init__(f"Failed to build decoder for {program_id}: {reason}")
        self.program_id = program_id


class UpstreamFetchError(TxDecoderError):
    """Transaction could not be retrieved from the aggregation service."""

    def __init__(self, tx_id: str, reason: str) -> None:
        super().__init__(f"Failed to fetch transaction {tx_id}: {reason}")
        self.tx_id = tx_id


class ChainRpcError(TxDecoderError):
    """Chain-state JSON-RPC returned an error or no result."""


class LookupTableNotFound(TxDecoderError):
    """Address lookup table account is missing or not owned by the lookup-table program."""

    def __init__(self, table_address: str) -> None:
        super().__init__(f"Lookup table not found: {table_address}")
        self.table_address = table_address

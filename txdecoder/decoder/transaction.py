"""
Transaction decode orchestration.

fetch envelope -> extract memo -> resolve account keys -> decode every
instruction in order. Only the upstream fetch can fail the whole request.
"""

from __future__ import annotations

import httpx

from txdecoder.chain.lookup_tables import LookupTableClient, resolve_account_keys
from txdecoder.chain.models import extract_memo
from txdecoder.chain.upstream import UpstreamClient
from txdecoder.config import env
from txdecoder.decoder.coder_factory import CoderFactory
from txdecoder.decoder.instruction import InstructionDecoder, key_at
from txdecoder.decoder.models import DecodeResult
from txdecoder.decoder.schema_store import SchemaStore
from txdecoder.decoder_logging import get_logger, instruction_context, transaction_context

logger = get_logger(__name__)


class TransactionDecoder:
    """Decodes whole transactions; holds the process-scoped IDL and decoder caches."""

    def __init__(
        self,
        upstream: UpstreamClient,
        tables: LookupTableClient,
        instructions: InstructionDecoder,
    ) -> None:
        self._upstream = upstream
        self._tables = tables
        self._instructions = instructions

    @classmethod
    def from_env(cls, client: httpx.AsyncClient) -> "TransactionDecoder":
        """Wire all components over one shared HTTP client using env config."""
        schemas = SchemaStore(client)
        return cls(
            upstream=UpstreamClient(client, env.get_upstream_api_url()),
            tables=LookupTableClient(client, env.get_solana_rpc_url()),
            instructions=InstructionDecoder(CoderFactory(schemas)),
        )

    async def decode_transaction(self, tx_id: str) -> DecodeResult:
        """Decode tx_id; raises UpstreamFetchError when the transaction cannot be fetched."""
        with transaction_context(tx_id):
            raw = await self._upstream.fetch_transaction(tx_id)
            memo = extract_memo(raw.memo)
            resolved_keys = await resolve_account_keys(
                raw.account_keys, raw.address_table_lookups, self._tables
            )
            decoded = []
            for index, instruction in enumerate(raw.instructions):
                program_id = key_at(resolved_keys, instruction.program_id_index)
                with instruction_context(program_id, index):
                    decoded.append(await self._instructions.decode(instruction, resolved_keys))
            result = DecodeResult(transaction_id=tx_id, memo=memo, instructions=decoded)
            logger.info(
                "transaction_decoded",
                instruction_count=len(decoded),
                degraded_count=result.degraded_count,
                resolved_key_count=len(resolved_keys),
            )
        return result

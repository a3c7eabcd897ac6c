"""
Single-instruction decoding with best-effort fallbacks.

decode() never raises: unknown programs, undecodable payloads and any failure
along the way (IDL fetch, decoder build, payload parse) come back as a
DecodedInstruction whose decodedData carries an "error" entry and whose
rawData is the original payload.
"""

from __future__ import annotations

from typing import Any, Mapping, Sequence

import base58

from txdecoder.chain.models import RawInstruction
from txdecoder.config.programs import PROGRAM_MAPPINGS, ProgramInfo
from txdecoder.decoder.coder_factory import DISCRIMINATOR_LEN, CoderFactory
from txdecoder.decoder.models import (
    DECODE_ERROR_INSTRUCTION_NAME,
    UNKNOWN_INSTRUCTION_NAME,
    UNKNOWN_PROGRAM_NAME,
    DecodedAccount,
    DecodedInstruction,
)
from txdecoder.decoder.normalizer import normalize
from txdecoder.decoder_logging import get_logger

logger = get_logger(__name__)

UNKNOWN_PROGRAM_ERROR = "Unknown program ID"
UNDECODABLE_ERROR = "Could not decode instruction with the program IDL"
RAW_DATA_NOTE = "Raw instruction data available in rawData field"


def key_at(resolved_keys: Sequence[str], index: int) -> str | None:
    if 0 <= index < len(resolved_keys):
        return resolved_keys[index] or None
    return None


def account_address(resolved_keys: Sequence[str], index: int) -> str:
    """Resolved address at index, or the UNKNOWN_ACCOUNT_<index> placeholder."""
    return key_at(resolved_keys, index) or f"UNKNOWN_ACCOUNT_{index}"


def build_accounts(
    account_indexes: Sequence[int],
    resolved_keys: Sequence[str],
    names: Sequence[str] = (),
) -> list[DecodedAccount]:
    """Pair each account index with its address and IDL name (account_<i> when missing)."""
    return [
        DecodedAccount(
            name=(names[i] if i < len(names) and names[i] else f"account_{i}"),
            address=account_address(resolved_keys, idx),
            index=idx,
        )
        for i, idx in enumerate(account_indexes)
    ]


def payload_bytes(data: Any) -> bytes:
    """
    Convert a raw instruction payload to bytes.

    Accepts a list of byte values, a serialized Buffer ({"type": "Buffer",
    "data": [...]}) or a base58 string.
    """
    if isinstance(data, (bytes, bytearray)):
        return bytes(data)
    if isinstance(data, Mapping) and isinstance(data.get("data"), list):
        return bytes(data["data"])
    if isinstance(data, list):
        return bytes(data)
    if isinstance(data, str):
        return base58.b58decode(data)
    raise TypeError(f"unsupported instruction data type: {type(data).__name__}")


def discriminator_hint(data: Any) -> Any:
    """First 8 items of the raw payload, in its original representation."""
    if isinstance(data, Mapping) and isinstance(data.get("data"), list):
        return data["data"][:DISCRIMINATOR_LEN]
    if isinstance(data, (list, str)):
        return data[:DISCRIMINATOR_LEN]
    if isinstance(data, (bytes, bytearray)):
        return list(data[:DISCRIMINATOR_LEN])
    return None


class InstructionDecoder:
    """Decodes instructions of the allow-listed programs."""

    def __init__(
        self,
        coders: CoderFactory,
        *,
        programs: Mapping[str, ProgramInfo] = PROGRAM_MAPPINGS,
    ) -> None:
        self._coders = coders
        self._programs = programs

    async def decode(
        self,
        instruction: RawInstruction,
        resolved_keys: Sequence[str],
    ) -> DecodedInstruction:
        program_id = key_at(resolved_keys, instruction.program_id_index)
        program = self._programs.get(program_id) if program_id else None
        if program is None:
            return DecodedInstruction(
                program_id=program_id,
                program_name=UNKNOWN_PROGRAM_NAME,
                instruction_name=UNKNOWN_INSTRUCTION_NAME,
                accounts=build_accounts(instruction.account_indexes, resolved_keys),
                decoded_data={"error": UNKNOWN_PROGRAM_ERROR},
                raw_data=instruction.data,
            )

        try:
            decoder = await self._coders.get_decoder(program_id)
            decoded = decoder.decode(payload_bytes(instruction.data))
            if decoded is None:
                return DecodedInstruction(
                    program_id=program_id,
                    program_name=program.name,
                    instruction_name=UNKNOWN_INSTRUCTION_NAME,
                    accounts=build_accounts(instruction.account_indexes, resolved_keys),
                    decoded_data={"error": UNDECODABLE_ERROR},
                    raw_data=instruction.data,
                )
            names = decoder.account_names(decoded.name)
            return DecodedInstruction(
                program_id=program_id,
                program_name=program.name,
                instruction_name=decoded.name,
                accounts=build_accounts(instruction.account_indexes, resolved_keys, names),
                decoded_data=normalize(decoded.data),
                raw_data=instruction.data,
            )
        except Exception as e:
            logger.warning(
                "instruction_decode_failed",
                program_id=program_id,
                program_name=program.name,
                error=str(e) or type(e).__name__,
            )
            return DecodedInstruction(
                program_id=program_id,
                program_name=program.name,
                instruction_name=DECODE_ERROR_INSTRUCTION_NAME,
                accounts=build_accounts(instruction.account_indexes, resolved_keys),
                decoded_data={
                    "error": f"Decode failed: {e}",
                    "discriminator": discriminator_hint(instruction.data),
                    "note": RAW_DATA_NOTE,
                },
                raw_data=instruction.data,
            )

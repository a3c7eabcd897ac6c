"""
Decode output models.

to_dict() produces the camelCase JSON shape returned by the API:
DecodeResult {transactionId, memo, instructions: [DecodedInstruction]}.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

UNKNOWN_PROGRAM_NAME = "UNKNOWN_PROGRAM"
UNKNOWN_INSTRUCTION_NAME = "unknown"
DECODE_ERROR_INSTRUCTION_NAME = "decode_error"


@dataclass(frozen=True)
class DecodedAccount:
    """One instruction account: IDL name (or account_<i>), address, key index."""

    name: str
    address: str
    index: int

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "address": self.address, "index": self.index}


@dataclass(frozen=True)
class DecodedInstruction:
    """
    Decoded form of one transaction instruction.

    Produced on every path; error paths carry {"error": ...} in decoded_data
    and report degraded=True.
    """

    program_id: str | None
    program_name: str
    instruction_name: str
    accounts: list[DecodedAccount]
    decoded_data: dict[str, Any] | Any
    raw_data: Any

    @property
    def degraded(self) -> bool:
        """True when the instruction could not be fully decoded."""
        if self.instruction_name in (UNKNOWN_INSTRUCTION_NAME, DECODE_ERROR_INSTRUCTION_NAME):
            return True
        return isinstance(self.decoded_data, dict) and "error" in self.decoded_data

    def to_dict(self) -> dict[str, Any]:
        return {
            "programId": self.program_id,
            "programName": self.program_name,
            "instructionName": self.instruction_name,
            "accounts": [a.to_dict() for a in self.accounts],
            "decodedData": self.decoded_data,
            "rawData": self.raw_data,
        }


@dataclass(frozen=True)
class DecodeResult:
    """Decoded transaction returned to the caller; not persisted."""

    transaction_id: str
    memo: str
    instructions: list[DecodedInstruction] = field(default_factory=list)

    @property
    def degraded_count(self) -> int:
        return sum(1 for ix in self.instructions if ix.degraded)

    def to_dict(self) -> dict[str, Any]:
        return {
            "transactionId": self.transaction_id,
            "memo": self.memo,
            "instructions": [ix.to_dict() for ix in self.instructions],
        }

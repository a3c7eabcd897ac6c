"""
Instruction decoding pipeline.

SchemaStore (IDL fetch) -> CoderFactory (decoder per program) ->
InstructionDecoder (one instruction) -> TransactionDecoder (whole transaction),
with normalize() applied to decoded argument values.
"""

from txdecoder.decoder.coder_factory import AnchorIdlDecoder, CoderFactory, DecodedPayload
from txdecoder.decoder.instruction import InstructionDecoder
from txdecoder.decoder.models import DecodedAccount, DecodedInstruction, DecodeResult
from txdecoder.decoder.normalizer import normalize
from txdecoder.decoder.schema_store import SchemaStore
from txdecoder.decoder.transaction import TransactionDecoder

__all__ = [
    "AnchorIdlDecoder",
    "CoderFactory",
    "DecodeResult",
    "DecodedAccount",
    "DecodedInstruction",
    "DecodedPayload",
    "InstructionDecoder",
    "SchemaStore",
    "TransactionDecoder",
    "normalize",
]

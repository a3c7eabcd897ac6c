"""
Instruction decoders built from Anchor IDL documents.

AnchorIdlDecoder maps the leading 8-byte discriminator to an instruction of the
IDL and parses the Borsh-encoded arguments with layouts built from the IDL.
CoderFactory builds one decoder per program and keeps it for the process
lifetime.
"""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass
from typing import Any, Callable, Protocol

from construct import Construct

from txdecoder.core.cache import ProcessCache
from txdecoder.core.exceptions import DecoderBuildError
from txdecoder.decoder.idl_layout import IdlLayouts
from txdecoder.decoder.schema_store import SchemaStore
from txdecoder.decoder_logging import get_logger

logger = get_logger(__name__)

DISCRIMINATOR_LEN = 8

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


@dataclass(frozen=True)
class DecodedPayload:
    """Instruction name (as spelled in the IDL) and its parsed arguments."""

    name: str
    data: Any


class InstructionDecoderLike(Protocol):
    def decode(self, data: bytes) -> DecodedPayload | None: ...

    def account_names(self, instruction_name: str) -> list[str]: ...


DecoderBuilder = Callable[[dict[str, Any]], InstructionDecoderLike]


def snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def instruction_discriminator(ix: dict[str, Any]) -> bytes:
    """Explicit discriminator (Anchor >= 0.30 IDL) or sha256("global:<name>")[:8]."""
    explicit = ix.get("discriminator")
    if explicit:
        return bytes(explicit)
    preimage = f"global:{snake_case(ix['name'])}".encode()
    return hashlib.sha256(preimage).digest()[:DISCRIMINATOR_LEN]


def _flatten_account_names(accounts: list[dict[str, Any]]) -> list[str]:
    names: list[str] = []
    for acc in accounts:
        nested = acc.get("accounts")
        if isinstance(nested, list):
            names.extend(_flatten_account_names(nested))
        else:
            names.append(str(acc.get("name", "")))
    return names


class AnchorIdlDecoder:
    """Stateless decoder for every instruction of one IDL document."""

    def __init__(self, document: dict[str, Any]) -> None:
        instructions = document.get("instructions")
        if not isinstance(instructions, list) or not instructions:
            raise ValueError("IDL has no instructions")
        layouts = IdlLayouts(document.get("types"))
        self._names_by_discriminator: dict[bytes, str] = {}
        self._account_names: dict[str, list[str]] = {}
        self._layouts: dict[str, Construct] = {}
        # instructions whose args use a type we cannot lay out fail on decode only
        self._layout_errors: dict[str, str] = {}
        for ix in instructions:
            name = ix["name"]
            self._names_by_discriminator[instruction_discriminator(ix)] = name
            self._account_names[name] = _flatten_account_names(ix.get("accounts") or [])
            try:
                self._layouts[name] = layouts.args_layout(ix.get("args") or [])
            except (KeyError, TypeError, ValueError) as e:
                self._layout_errors[name] = str(e) or type(e).__name__
                logger.warning("instruction_layout_unsupported", instruction=name, error=self._layout_errors[name])

    @property
    def instruction_names(self) -> list[str]:
        return list(self._account_names)

    def decode(self, data: bytes) -> DecodedPayload | None:
        """Parse data; None when its discriminator matches no instruction."""
        if len(data) < DISCRIMINATOR_LEN:
            return None
        name = self._names_by_discriminator.get(bytes(data[:DISCRIMINATOR_LEN]))
        if name is None:
            return None
        if name in self._layout_errors:
            raise ValueError(f"cannot decode {name} arguments: {self._layout_errors[name]}")
        parsed = self._layouts[name].parse(bytes(data[DISCRIMINATOR_LEN:]))
        return DecodedPayload(name=name, data=parsed)

    def account_names(self, instruction_name: str) -> list[str]:
        return list(self._account_names.get(instruction_name, []))


class CoderFactory:
    """Builds and memoizes one instruction decoder per program ID."""

    def __init__(
        self,
        schemas: SchemaStore,
        *,
        builder: DecoderBuilder = AnchorIdlDecoder,
        cache: ProcessCache[str, InstructionDecoderLike] | None = None,
    ) -> None:
        self._schemas = schemas
        self._builder = builder
        self._cache: ProcessCache[str, InstructionDecoderLike] = (
            cache if cache is not None else ProcessCache("decoder")
        )

    @property
    def cache(self) -> ProcessCache[str, InstructionDecoderLike]:
        return self._cache

    async def get_decoder(self, program_id: str) -> InstructionDecoderLike:
        """
        Return the decoder for program_id.

        Propagates UnknownProgram / SchemaFetchError from the schema store;
        raises DecoderBuildError when the IDL cannot be turned into a decoder.
        """
        cached = self._cache.get(program_id)
        if cached is not None:
            return cached
        document = await self._schemas.fetch(program_id)
        try:
            decoder = self._builder(document)
        except Exception as e:
            raise DecoderBuildError(program_id, str(e) or type(e).__name__) from e
        logger.info("decoder_built", program_id=program_id)
        return self._cache.put(program_id, decoder)

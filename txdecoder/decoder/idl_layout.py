"""
Borsh layouts for Anchor IDL instruction arguments.

Both IDL generations are read: Anchor >= 0.30 ("pubkey",
{"defined": {"name": ...}}, tuple fields as bare types) and the legacy format
("publicKey", {"defined": "Name"}). Enums decode to a one-key dict
{variant_name: fields} so the result stays plain data.
"""

from __future__ import annotations

from typing import Any

from anchorpy.borsh_extension import BorshPubkey
from borsh_construct import (
    F32,
    F64,
    I8,
    I16,
    I32,
    I64,
    I128,
    U8,
    U16,
    U32,
    U64,
    U128,
    Bool,
    Bytes,
    CStruct,
    Option,
    String,
    Vec,
)
from construct import Adapter, Array, BytesInteger, Construct, Error, Pass, Sequence, Struct, Switch, this

PRIMITIVES: dict[str, Construct] = {
    "bool": Bool,
    "u8": U8,
    "i8": I8,
    "u16": U16,
    "i16": I16,
    "u32": U32,
    "i32": I32,
    "u64": U64,
    "i64": I64,
    "u128": U128,
    "i128": I128,
    "u256": BytesInteger(32, signed=False, swapped=True),
    "i256": BytesInteger(32, signed=True, swapped=True),
    "f32": F32,
    "f64": F64,
    "string": String,
    "bytes": Bytes,
    "pubkey": BorshPubkey,
    "publicKey": BorshPubkey,
}


class BorshEnum(Adapter):
    """u8 variant index followed by that variant's fields."""

    def __init__(self, variants: list[tuple[str, Construct | None]]) -> None:
        cases = {i: (sub if sub is not None else Pass) for i, (_, sub) in enumerate(variants)}
        super().__init__(Struct("index" / U8, "fields" / Switch(this.index, cases, default=Error)))
        self.variant_names = [name for name, _ in variants]

    def _decode(self, obj, context, path):
        fields = obj["fields"]
        return {self.variant_names[obj["index"]]: {} if fields is None else fields}

    def _encode(self, obj, context, path):
        [(name, fields)] = obj.items()
        return {"index": self.variant_names.index(name), "fields": fields or None}


def defined_type_name(ref: Any) -> str:
    if isinstance(ref, dict):
        return str(ref["name"])
    return str(ref)


def _is_named(fields: list[Any]) -> bool:
    return all(isinstance(f, dict) and "name" in f and "type" in f for f in fields)


class IdlLayouts:
    """Builds argument layouts against the `types` section of one IDL."""

    def __init__(self, types: list[dict[str, Any]] | None) -> None:
        self._type_defs = {t["name"]: t["type"] for t in types or [] if "name" in t and "type" in t}
        self._built: dict[str, Construct] = {}
        self._building: set[str] = set()

    def args_layout(self, args: list[dict[str, Any]]) -> Construct:
        return CStruct(*(self._field(arg) for arg in args))

    def layout(self, idl_type: Any) -> Construct:
        if isinstance(idl_type, str):
            if idl_type not in PRIMITIVES:
                raise ValueError(f"unsupported IDL type: {idl_type}")
            return PRIMITIVES[idl_type]
        if isinstance(idl_type, dict):
            if "option" in idl_type:
                return Option(self.layout(idl_type["option"]))
            if "vec" in idl_type:
                return Vec(self.layout(idl_type["vec"]))
            if "array" in idl_type:
                inner, length = idl_type["array"]
                if not isinstance(length, int):
                    raise ValueError(f"unsupported array length: {length!r}")
                return Array(length, self.layout(inner))
            if "defined" in idl_type:
                return self._defined(defined_type_name(idl_type["defined"]))
        raise ValueError(f"unsupported IDL type: {idl_type!r}")

    def _field(self, field: dict[str, Any]) -> Construct:
        return field["name"] / self.layout(field["type"])

    def _fields(self, fields: list[Any]) -> Construct:
        if _is_named(fields):
            return CStruct(*(self._field(f) for f in fields))
        return Sequence(*(self.layout(f) for f in fields))

    def _defined(self, name: str) -> Construct:
        if name in self._built:
            return self._built[name]
        if name not in self._type_defs:
            raise ValueError(f"undefined IDL type: {name}")
        if name in self._building:
            raise ValueError(f"recursive IDL type: {name}")
        self._building.add(name)
        try:
            built = self._type_def_layout(self._type_defs[name])
        finally:
            self._building.discard(name)
        self._built[name] = built
        return built

    def _type_def_layout(self, type_def: dict[str, Any]) -> Construct:
        kind = type_def.get("kind")
        if kind == "struct":
            return self._fields(type_def.get("fields") or [])
        if kind == "enum":
            return BorshEnum([
                (v["name"], self._fields(v["fields"]) if v.get("fields") else None)
                for v in type_def.get("variants") or []
            ])
        if kind == "type":
            return self.layout(type_def["alias"])
        raise ValueError(f"unsupported IDL type kind: {kind!r}")

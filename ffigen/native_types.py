"""
Native Types: the ABI vocabulary of the Deno FFI.

  • NativePrimitive: u8 … i64, f64, pointer, void
  • NativeStruct:    an aggregate, an ordered tuple of native types

Aggregates carry no name: each use site gets its own inline copy of the
field list.
"""

from enum import Enum
from dataclasses import dataclass
from typing import Tuple, Union


class NativePrimitive(str, Enum):
    U8 = "u8"
    I8 = "i8"
    U16 = "u16"
    I16 = "i16"
    U32 = "u32"
    I32 = "i32"
    U64 = "u64"
    I64 = "i64"
    F64 = "f64"
    POINTER = "pointer"
    VOID = "void"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class NativeStruct:
    """An aggregate laid out as its fields, in declaration order."""
    fields: Tuple["NativeType", ...]

    def __repr__(self):
        inner = ", ".join(str(to_wire(f)) for f in self.fields)
        return f"struct({inner})"


NativeType = Union[NativePrimitive, NativeStruct]


def to_wire(native: NativeType):
    """Return the JSON-ready form: ``"u32"`` or ``{"struct": [...]}``."""
    if isinstance(native, NativeStruct):
        return {"struct": [to_wire(f) for f in native.fields]}
    return native.value


def is_void(native: NativeType) -> bool:
    return native is NativePrimitive.VOID

"""
Type Mapper: C type descriptors to Deno FFI native types.

Resolution order for a non-aggregate tag:
  1. The fixed primitive table (PRIMITIVE_TYPES)
  2. The resolved-typedef table of the ResolverContext

Aggregates (``struct`` / ``:struct``) are mapped field by field by the
struct resolver half of this module; a struct with any unmappable field
has no mapping at all.

``None`` means "no mapping yet".  It is a normal result, not an error.
"""

import logging
from typing import Dict, Optional

from ffigen.context import ResolverContext
from ffigen.declarations import CType
from ffigen.native_types import NativePrimitive, NativeStruct, NativeType

logger = logging.getLogger(__name__)

P = NativePrimitive

# c2ffi tag → native type.  Width assumptions follow LP64.
PRIMITIVE_TYPES: Dict[str, NativePrimitive] = {
    # sized integer typedefs from <bits/types.h>
    "__uint8_t": P.U8,
    "__int8_t": P.I8,
    "__uint16_t": P.U16,
    "__int16_t": P.I16,
    "__uint32_t": P.U32,
    "__int32_t": P.I32,
    "__uint64_t": P.U64,
    "__int64_t": P.I64,
    # builtin integers
    ":char": P.U8,
    ":signed-char": P.I8,
    ":unsigned-char": P.U8,
    ":short": P.I16,
    ":unsigned-short": P.U16,
    ":int": P.I32,
    ":unsigned-int": P.U32,
    ":unsigned": P.U32,
    ":long": P.I64,
    ":unsigned-long": P.U64,
    ":long-long": P.I64,
    ":unsigned-long-long": P.U64,
    # floating point; long double loses precision, there is no f80/f128
    ":double": P.F64,
    ":long-double": P.F64,
    # indirections
    ":pointer": P.POINTER,
    ":function-pointer": P.POINTER,
    ":void": P.VOID,
}

AGGREGATE_TAGS = ("struct", ":struct")


class TypeMapper:
    """Map CType descriptors to NativeType using a shared ResolverContext."""

    def __init__(self, context: ResolverContext):
        self.context = context

    def map_type(self, ctype: CType, hint: Optional[str] = None) -> Optional[NativeType]:
        """Return the NativeType for ``ctype``, or None if it has no mapping.

        ``hint`` names the entity being mapped and is only used in
        diagnostics (e.g. the typedef a struct is registered under).
        """
        if ctype.tag in AGGREGATE_TAGS:
            return self.map_struct(ctype, hint)

        native = PRIMITIVE_TYPES.get(ctype.tag)
        if native is not None:
            return native
        return self.context.lookup_typedef(ctype.tag)

    # ────────────────────────────────────────────────────────────────
    #  Struct resolver
    # ────────────────────────────────────────────────────────────────

    def map_struct(self, ctype: CType, hint: Optional[str] = None) -> Optional[NativeStruct]:
        """Map an aggregate all-or-nothing, preserving field order."""
        if ctype.fields is None:
            return None

        mapped = [self.map_type(f.type) for f in ctype.fields]
        if None in mapped:
            missing = ctype.fields[mapped.index(None)]
            self.context.skip(
                "struct",
                hint or "struct",
                f"field {missing.describe()} has no mapping",
            )
            return None

        return NativeStruct(fields=tuple(mapped))

"""
Function Signature Builder

Turns a function definition into a SymbolEntry, or skips it:

  • inline / variadic functions cannot be bound through a fixed ABI
  • a parameter or return type with no mapping skips the function

A parameter that is not tagged "parameter", or that maps to void, means
the declaration stream itself is broken and aborts the run.
"""

from typing import Optional

from ffigen.context import SymbolEntry
from ffigen.declarations import FunctionDefinition, Parameter
from ffigen.errors import InputFormatError
from ffigen.native_types import NativeType, is_void
from ffigen.type_mapper import TypeMapper


PARAMETER_TAG = "parameter"


class FunctionSignatureBuilder:
    def __init__(self, mapper: TypeMapper):
        self.mapper = mapper
        self.context = mapper.context

    def build(self, fn: FunctionDefinition) -> Optional[SymbolEntry]:
        """Map ``fn`` and register it in the symbol table on success."""
        stats = self.context.stats
        stats.functions_total += 1

        if fn.inline or fn.variadic:
            self.context.skip("function", fn.name, "inline" if fn.inline else "variadic")
            return None

        parameters = [self._map_parameter(fn, p) for p in fn.parameters]
        if None in parameters:
            missing = fn.parameters[parameters.index(None)]
            self.context.skip(
                "function", fn.name, f"parameter {missing.describe()} has no mapping"
            )
            return None

        result = self.mapper.map_type(fn.return_type)
        if result is None:
            self.context.skip(
                "function", fn.name, f"return type {fn.return_type.describe()} has no mapping"
            )
            return None

        entry = SymbolEntry(
            parameters=parameters,
            result=result,
            doc=f"{fn.name} @ {fn.location}",
        )
        self.context.register_symbol(fn.name, entry)
        stats.functions_generated += 1
        return entry

    def _map_parameter(self, fn: FunctionDefinition, param: Parameter) -> Optional[NativeType]:
        if param.tag != PARAMETER_TAG:
            raise InputFormatError(
                f"unexpected parameter tag {param.tag!r} in {fn.name} @ {fn.location}"
            )

        native = self.mapper.map_type(param.type)
        if native is not None and is_void(native):
            raise InputFormatError(
                f"unexpected void parameter {param.name!r} in {fn.name} @ {fn.location}"
            )
        return native

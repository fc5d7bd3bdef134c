"""
Code Generator & Run Reporter

render_module() writes the TypeScript module that binds the symbol table
through ``Deno.dlopen``.  Struct types are written inline at every use
site as ``{"struct":[...]}``; identical structs are not shared.

format_summary() produces the diagnostics block printed after a run.
"""

import json
from typing import Dict, List

from ffigen.context import GenerationStats, SymbolEntry
from ffigen.native_types import to_wire

HEADER = "// Generated by ffigen"


def _js(value) -> str:
    # JSON.stringify layout: no whitespace between tokens
    return json.dumps(value, separators=(",", ":"))


def render_symbol(name: str, entry: SymbolEntry) -> str:
    parameters = [to_wire(p) for p in entry.parameters]
    return (
        f"  // {entry.doc}\n"
        f"  {name}: {{\n"
        f"    parameters: {_js(parameters)},\n"
        f"    result: {_js(to_wire(entry.result))},\n"
        f"  }}"
    )


def render_module(symbols: Dict[str, SymbolEntry], library: str) -> str:
    """Render the binding module for ``library`` (path or soname)."""
    body = ",\n".join(render_symbol(name, entry) for name, entry in symbols.items())
    return (
        f"{HEADER}\n"
        f"const _ = {{\n"
        f"{body}\n"
        f"}} as const;\n"
        f"\n"
        f"const {{ symbols }} = Deno.dlopen({_js(library)}, _);\n"
        f"\n"
        f"export default symbols;\n"
    )


def format_summary(stats: GenerationStats) -> List[str]:
    unknowns = ", ".join(f"{tag}: {count}" for tag, count in stats.unknown_tags.items())
    return [
        "=== GENERATED ===",
        f"unknowns  => {unknowns}",
        f"functions => total: {stats.functions_total}, "
        f"generated: {stats.functions_generated}, skipped: {stats.functions_skipped}",
        f"typedefs  => total: {stats.typedefs_total}, "
        f"generated: {stats.typedefs_generated}, skipped: {stats.typedefs_skipped}",
    ]

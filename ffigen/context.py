"""
Resolver Context: the working state of one generation run.

Threaded explicitly through the mapper, resolvers and builder:

  • typedefs: resolved-typedef table (name → NativeType), grows only
  • symbols:  symbol table (function name → SymbolEntry), insertion-ordered
  • stats:    run counters for the summary block
  • skipped:  every skip event, in the order it happened
"""

import logging
from typing import Dict, List, Optional
from dataclasses import dataclass, field

from ffigen.native_types import NativeType

logger = logging.getLogger(__name__)


@dataclass
class SymbolEntry:
    """The binding descriptor of one foreign function."""
    parameters: List[NativeType]
    result: NativeType
    doc: str                # "<name> @ <location>"


@dataclass
class SkipRecord:
    kind: str               # "function", "typedef", "struct"
    name: str
    reason: str


@dataclass
class GenerationStats:
    functions_total: int = 0
    functions_generated: int = 0
    typedefs_total: int = 0
    typedefs_generated: int = 0
    unknown_tags: Dict[str, int] = field(default_factory=dict)

    @property
    def functions_skipped(self) -> int:
        return self.functions_total - self.functions_generated

    @property
    def typedefs_skipped(self) -> int:
        return self.typedefs_total - self.typedefs_generated

    def count_unknown(self, tag: str):
        self.unknown_tags[tag] = self.unknown_tags.get(tag, 0) + 1


class ResolverContext:
    def __init__(self):
        self.typedefs: Dict[str, NativeType] = {}
        self.symbols: Dict[str, SymbolEntry] = {}
        self.stats = GenerationStats()
        self.skipped: List[SkipRecord] = []

    # ────────────────────────────────────────────────────────────────
    #  Resolved-typedef table
    # ────────────────────────────────────────────────────────────────

    def lookup_typedef(self, name: str) -> Optional[NativeType]:
        return self.typedefs.get(name)

    def register_typedef(self, name: str, native: NativeType) -> NativeType:
        """Record a resolution.  The first registration of a name wins.

        Returns the NativeType the name is bound to after the call.
        """
        existing = self.typedefs.get(name)
        if existing is not None:
            if existing != native:
                logger.debug(
                    "typedef %s already resolved to %r, ignoring %r", name, existing, native
                )
            return existing
        self.typedefs[name] = native
        return native

    # ────────────────────────────────────────────────────────────────
    #  Symbol table
    # ────────────────────────────────────────────────────────────────

    def register_symbol(self, name: str, entry: SymbolEntry):
        if name in self.symbols:
            logger.debug("function %s declared again, keeping first binding", name)
            return
        self.symbols[name] = entry

    # ────────────────────────────────────────────────────────────────
    #  Skip log
    # ────────────────────────────────────────────────────────────────

    def skip(self, kind: str, name: str, reason: str):
        """Record a skipped entity and emit its one-line diagnostic."""
        self.skipped.append(SkipRecord(kind, name, reason))
        logger.warning("skipping %s. reason: %s", name, reason)

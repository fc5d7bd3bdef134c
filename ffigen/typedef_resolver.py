"""
Typedef Resolver

Resolves typedef declarations in input order against the live
resolved-typedef table.  When a typedef's underlying type does not map
directly, one lookahead hop is tried: typedefs anywhere in the definition
list whose name equals the underlying tag.

Only one hop is taken.  ``A -> B -> C`` with all three declared after
their users leaves ``A`` unresolved; this keeps skip counts stable across
runs of the same input and avoids building a dependency graph.
"""

import logging
from typing import Dict, List, Optional, Sequence

from ffigen.declarations import Definition, TypedefDefinition
from ffigen.native_types import NativeType
from ffigen.type_mapper import TypeMapper

logger = logging.getLogger(__name__)


class TypedefResolver:
    def __init__(self, mapper: TypeMapper, definitions: Sequence[Definition]):
        self.mapper = mapper
        self.context = mapper.context
        # name -> typedefs declaring it, in input order
        self._by_name: Dict[str, List[TypedefDefinition]] = {}
        for d in definitions:
            if isinstance(d, TypedefDefinition):
                self._by_name.setdefault(d.name, []).append(d)

    def resolve(self, typedef: TypedefDefinition) -> Optional[NativeType]:
        """Resolve and register one typedef.  Counts it either way."""
        stats = self.context.stats
        stats.typedefs_total += 1

        result = self.mapper.map_type(typedef.type, typedef.name)
        if result is None:
            result = self._lookahead(typedef)

        if result is None:
            self.context.skip(
                "typedef",
                typedef.name,
                f"type {typedef.type.tag} has no mapping",
            )
            return None

        stats.typedefs_generated += 1
        return self.context.register_typedef(typedef.name, result)

    def _lookahead(self, typedef: TypedefDefinition) -> Optional[NativeType]:
        """Map through a typedef named by the underlying tag (one hop)."""
        for target in self._by_name.get(typedef.type.tag, ()):
            if target is typedef:
                continue
            result = self.mapper.map_type(target.type, typedef.name)
            if result is not None:
                logger.debug(
                    "typedef %s resolved through forward reference %s",
                    typedef.name, target.name,
                )
                return result
        return None

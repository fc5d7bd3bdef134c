"""
Binding Pipeline: one sequential pass over the definition list.

Each definition is dispatched on its variant:

  • TypedefDefinition  → TypedefResolver
  • StructDefinition   → converted with as_typedef(), then TypedefResolver
  • FunctionDefinition → FunctionSignatureBuilder
  • UnknownDefinition  → tallied and ignored

The ResolverContext produced by run() holds everything the code
generator needs.
"""

import logging
from typing import Optional, Sequence

from ffigen.context import ResolverContext
from ffigen.declarations import (
    Definition, FunctionDefinition, StructDefinition, TypedefDefinition, UnknownDefinition,
)
from ffigen.function_builder import FunctionSignatureBuilder
from ffigen.type_mapper import TypeMapper
from ffigen.typedef_resolver import TypedefResolver

logger = logging.getLogger(__name__)


class BindingPipeline:
    def __init__(self, definitions: Sequence[Definition], context: Optional[ResolverContext] = None):
        self.definitions = definitions
        self.context = context or ResolverContext()
        self.mapper = TypeMapper(self.context)
        self.typedefs = TypedefResolver(self.mapper, definitions)
        self.functions = FunctionSignatureBuilder(self.mapper)

    def run(self) -> ResolverContext:
        """Process every definition in input order.

        Raises InputFormatError if a function breaks the parameter contract;
        every other failure is skipped and counted.
        """
        for definition in self.definitions:
            self.process(definition)

        stats = self.context.stats
        logger.info(
            "Processed %d definitions: %d/%d functions, %d/%d typedefs",
            len(self.definitions),
            stats.functions_generated, stats.functions_total,
            stats.typedefs_generated, stats.typedefs_total,
        )
        return self.context

    def process(self, definition: Definition):
        if isinstance(definition, TypedefDefinition):
            self.typedefs.resolve(definition)
        elif isinstance(definition, StructDefinition):
            self.typedefs.resolve(definition.as_typedef())
        elif isinstance(definition, FunctionDefinition):
            self.functions.build(definition)
        elif isinstance(definition, UnknownDefinition):
            self.context.stats.count_unknown(definition.tag)
            logger.warning("unknown tag %s", definition.tag)
        else:
            raise TypeError(f"not a definition: {definition!r}")


def generate(definitions: Sequence[Definition]) -> ResolverContext:
    """Run a fresh pipeline over ``definitions``."""
    return BindingPipeline(definitions).run()

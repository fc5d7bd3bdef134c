"""
Declaration Model & Decoder

Parses the JSON declaration stream emitted by a header-introspection tool
(c2ffi).  The stream is a JSON array; each record is tagged with one of:

  • "typedef":   a named alias for a nested Type
  • "struct":    an aggregate carrying its own ordered field list
  • "function":  parameters, return type and variadic/inline flags

Any other tag (enum, union, extern, const, …) decodes into an
UnknownDefinition so the pipeline can tally it.  The model is closed:
every decoded record is exactly one of these four variants.
"""

import json
import logging
from typing import Annotated, Dict, IO, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from ffigen.errors import DecodeError

logger = logging.getLogger(__name__)

KNOWN_TAGS = ("typedef", "struct", "function")

_MODEL_CONFIG = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


# ═══════════════════════════════════════════════════════════════════════
#  Types
# ═══════════════════════════════════════════════════════════════════════

class CType(BaseModel):
    """A C type descriptor as c2ffi writes it (``{"tag": ":int", ...}``)."""
    model_config = _MODEL_CONFIG

    tag: str
    name: Optional[str] = None
    bit_size: Optional[int] = Field(default=None, alias="bit-size")
    bit_alignment: Optional[int] = Field(default=None, alias="bit-alignment")
    fields: Optional[List["StructField"]] = None      # aggregates
    type: Optional["CType"] = None                   # indirections

    def describe(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class StructField(BaseModel):
    model_config = _MODEL_CONFIG

    tag: str = "field"
    name: str = ""
    bit_offset: Optional[int] = Field(default=None, alias="bit-offset")
    bit_size: Optional[int] = Field(default=None, alias="bit-size")
    bit_alignment: Optional[int] = Field(default=None, alias="bit-alignment")
    type: CType

    def describe(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


class Parameter(BaseModel):
    model_config = _MODEL_CONFIG

    tag: str
    name: str = ""
    type: CType

    def describe(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


CType.model_rebuild()


# ═══════════════════════════════════════════════════════════════════════
#  Definitions
# ═══════════════════════════════════════════════════════════════════════

class _DefinitionBase(BaseModel):
    model_config = _MODEL_CONFIG

    name: str
    location: str = ""
    ns: int = 0


class TypedefDefinition(_DefinitionBase):
    tag: Literal["typedef"] = "typedef"
    type: CType


class StructDefinition(_DefinitionBase):
    tag: Literal["struct"] = "struct"
    bit_size: Optional[int] = Field(default=None, alias="bit-size")
    bit_alignment: Optional[int] = Field(default=None, alias="bit-alignment")
    fields: Optional[List[StructField]] = None

    def as_typedef(self) -> TypedefDefinition:
        """A struct definition also names a typedef for its own aggregate."""
        return TypedefDefinition(
            name=self.name,
            location=self.location,
            ns=self.ns,
            type=CType(
                tag="struct",
                name=self.name,
                bit_size=self.bit_size,
                bit_alignment=self.bit_alignment,
                fields=self.fields,
            ),
        )


class FunctionDefinition(_DefinitionBase):
    tag: Literal["function"] = "function"
    parameters: List[Parameter] = Field(default_factory=list)
    return_type: CType = Field(alias="return-type")
    variadic: bool = False
    inline: bool = False
    storage_class: Optional[str] = Field(default=None, alias="storage-class")


class UnknownDefinition(BaseModel):
    """A record whose tag is none of typedef/struct/function."""
    model_config = _MODEL_CONFIG

    tag: str
    name: Optional[str] = None
    location: str = ""


KnownDefinition = Annotated[
    Union[TypedefDefinition, StructDefinition, FunctionDefinition],
    Field(discriminator="tag"),
]
Definition = Union[TypedefDefinition, StructDefinition, FunctionDefinition, UnknownDefinition]

_KNOWN_ADAPTER = TypeAdapter(KnownDefinition)


# ═══════════════════════════════════════════════════════════════════════
#  Decoder
# ═══════════════════════════════════════════════════════════════════════

class DeclarationDecoder:
    """Decode a whole declaration stream into Definition records."""

    def __init__(self):
        self.definitions: List[Definition] = []

    def read(self, stream: IO) -> List[Definition]:
        """Read the stream to EOF, then decode it."""
        try:
            text = stream.read()
        except UnicodeDecodeError as e:
            raise DecodeError(f"declaration stream is not UTF-8 text: {e}") from e
        return self.decode(text)

    def decode(self, text: Union[str, bytes]) -> List[Definition]:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(f"declaration stream is not valid JSON: {e}") from e
        except UnicodeDecodeError as e:
            raise DecodeError(f"declaration stream is not UTF-8 text: {e}") from e

        if not isinstance(data, list):
            raise DecodeError(
                f"declaration stream must be a JSON array, got {type(data).__name__}"
            )

        self.definitions = [self._decode_record(i, item) for i, item in enumerate(data)]
        logger.debug("Decoded %d definitions", len(self.definitions))
        return self.definitions

    @staticmethod
    def _decode_record(index: int, item) -> Definition:
        if not isinstance(item, dict) or not isinstance(item.get("tag"), str):
            raise DecodeError(f"record #{index} is not a tagged object: {item!r}")

        tag = item["tag"]
        try:
            if tag in KNOWN_TAGS:
                return _KNOWN_ADAPTER.validate_python(item)
            return UnknownDefinition.model_validate(item)
        except ValidationError as e:
            name = item.get("name", "<anonymous>")
            raise DecodeError(f"record #{index} ({tag} {name}) is malformed: {e}") from e

    def get_summary(self) -> Dict[str, int]:
        """Count decoded records by tag."""
        tags: Dict[str, int] = {}
        for d in self.definitions:
            tags[d.tag] = tags.get(d.tag, 0) + 1
        return tags

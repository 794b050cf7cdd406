"""Patch document schema and TOML parsing.

A patch document names one source and an ordered list of edits:

    [source]
    text = "Hello!"

    [[patch]]
    do = "insert"
    way = "post"
    spot = 5
    source = { text = ", World" }

Sources are unresolved here; the resolver turns them into bytes.
"""

from __future__ import annotations

import tomllib
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationError,
    field_validator,
    model_validator,
)

from stablepatch.core.errors import DocumentError
from stablepatch.patch.models import Direction, Insert, Remove

Offset = Annotated[StrictInt, Field(ge=0)]
Byte = Annotated[StrictInt, Field(ge=0, le=255)]


class SourceKind(str, Enum):
    """Where the bytes of a source come from."""

    BYTES = "bytes"
    TEXT = "text"
    FILE = "file"
    URL = "url"
    PATCH_FILE = "patch-file"
    PATCH_URL = "patch-url"


class SourceSpec(BaseModel):
    """A source table: exactly one key naming where bytes come from."""

    model_config = ConfigDict(
        extra="forbid", populate_by_name=True, frozen=True
    )

    raw: list[Byte] | None = Field(default=None, alias="bytes")
    text: str | None = None
    file: str | None = None
    url: str | None = None
    patch_file: str | None = Field(default=None, alias="patch-file")
    patch_url: str | None = Field(default=None, alias="patch-url")

    @model_validator(mode="after")
    def _exactly_one_kind(self) -> SourceSpec:
        given = [
            name for name in self.__class__.model_fields
            if getattr(self, name) is not None
        ]
        if len(given) != 1:
            choices = ", ".join(kind.value for kind in SourceKind)
            raise ValueError(f"source needs exactly one of: {choices}")
        return self

    def _selected(self) -> tuple[SourceKind, Any]:
        for name, info in self.__class__.model_fields.items():
            value = getattr(self, name)
            if value is not None:
                return SourceKind(info.alias or name), value
        raise AssertionError("validated source has no kind")

    @property
    def kind(self) -> SourceKind:
        return self._selected()[0]

    @property
    def value(self) -> Any:
        return self._selected()[1]


class InsertSpec(BaseModel):
    """`do = "insert"` entry."""

    model_config = ConfigDict(frozen=True)

    do: Literal["insert"]
    way: Direction
    spot: Offset
    source: SourceSpec

    def to_edit(self, payload: bytes) -> Insert:
        return Insert(self.way, self.spot, payload)


class RemoveSpec(BaseModel):
    """`do = "remove"` entry."""

    model_config = ConfigDict(frozen=True)

    do: Literal["remove"]
    way: Direction
    spot: Offset
    count: Offset

    def to_edit(self) -> Remove:
        return Remove(self.way, self.spot, self.count)


PatchSpec = Annotated[InsertSpec | RemoveSpec, Field(discriminator="do")]


class PatchDocument(BaseModel):
    """A parsed patch document."""

    source: SourceSpec
    patch: list[PatchSpec] = Field(default_factory=list)

    @field_validator("patch", mode="before")
    @classmethod
    def _normalize_action(cls, value: Any) -> Any:
        """Accept `do` in any letter case ("INSERT", "Remove", ...)."""
        if not isinstance(value, list):
            return value
        normalized = []
        for entry in value:
            if isinstance(entry, dict) and isinstance(entry.get("do"), str):
                entry = {**entry, "do": entry["do"].lower()}
            normalized.append(entry)
        return normalized

    @property
    def sources(self) -> list[SourceSpec]:
        """The document source followed by every insert payload source."""
        return [self.source] + [
            spec.source for spec in self.patch
            if isinstance(spec, InsertSpec)
        ]


def parse_document(
    text: str, location: str | None = None
) -> PatchDocument:
    """Parse and validate a TOML patch document.

    Args:
        text: Document contents
        location: Where the text came from, used in error messages

    Returns:
        Validated PatchDocument

    Raises:
        DocumentError: If the text is not TOML or breaks the schema
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise DocumentError(f"invalid TOML: {e}", location) from e

    try:
        return PatchDocument.model_validate(data)
    except ValidationError as e:
        raise DocumentError(_describe(e), location) from e


def _describe(error: ValidationError) -> str:
    problems = []
    for detail in error.errors():
        where = ".".join(str(part) for part in detail["loc"])
        message = detail["msg"]
        problems.append(f"{where}: {message}" if where else message)
    return "invalid patch document: " + "; ".join(problems)


__all__ = [
    "InsertSpec",
    "PatchDocument",
    "PatchSpec",
    "RemoveSpec",
    "SourceKind",
    "SourceSpec",
    "parse_document",
]

"""Patch documents and the resolver that turns them into bytes."""

from stablepatch.resolve.document import (
    InsertSpec,
    PatchDocument,
    RemoveSpec,
    SourceKind,
    SourceSpec,
    parse_document,
)
from stablepatch.resolve.resolver import STDIN, LoadedDocument, Resolver

__all__ = [
    "InsertSpec",
    "LoadedDocument",
    "PatchDocument",
    "RemoveSpec",
    "Resolver",
    "STDIN",
    "SourceKind",
    "SourceSpec",
    "parse_document",
]

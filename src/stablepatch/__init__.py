"""stablepatch - apply byte edits addressed by offsets into the original."""

from stablepatch.core.errors import (
    DocumentError,
    InvalidRemoveRange,
    OutOfBounds,
    PatchError,
    ResolveError,
    StablePatchError,
)
from stablepatch.patch import Direction, Edit, Insert, Remove, apply
from stablepatch.resolve.document import PatchDocument, parse_document

__all__ = [
    "Direction",
    "DocumentError",
    "Edit",
    "Insert",
    "InvalidRemoveRange",
    "OutOfBounds",
    "PatchDocument",
    "PatchError",
    "Remove",
    "ResolveError",
    "StablePatchError",
    "apply",
    "parse_document",
]

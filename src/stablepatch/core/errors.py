"""Exception hierarchy for stablepatch.

PatchError and its subclasses come from the engine and are fatal to a
single apply() call. DocumentError and ResolveError come from the
resolution layer that feeds the engine.
"""

from __future__ import annotations


class StablePatchError(Exception):
    """Base class for every error stablepatch raises on purpose."""


# ============================================================
# ENGINE ERRORS
# ============================================================

class PatchError(StablePatchError):
    """An edit could not be applied to the buffer."""


class OutOfBounds(PatchError):
    """A spot does not name an offset of the original source."""

    def __init__(self, spot: int, original_length: int):
        self.spot = spot
        self.original_length = original_length
        super().__init__(
            f"spot {spot} is outside the original source "
            f"(valid spots: 0..{original_length})"
        )


class InvalidRemoveRange(PatchError):
    """A remove would reach past the start or end of the buffer."""

    def __init__(self, start: int, count: int, length: int):
        self.start = start
        self.count = count
        self.length = length
        super().__init__(
            f"cannot remove {count} byte(s) starting at buffer position "
            f"{start}: buffer holds {length} byte(s)"
        )


# ============================================================
# RESOLUTION ERRORS
# ============================================================

class DocumentError(StablePatchError):
    """A patch document is not valid TOML or violates the schema."""

    def __init__(self, message: str, location: str | None = None):
        self.location = location
        if location:
            message = f"{location}: {message}"
        super().__init__(message)


class ResolveError(StablePatchError):
    """A source could not be turned into bytes."""

    def __init__(self, message: str, location: str | None = None):
        self.location = location
        if location:
            message = f"{location}: {message}"
        super().__init__(message)


__all__ = [
    "StablePatchError",
    "PatchError",
    "OutOfBounds",
    "InvalidRemoveRange",
    "DocumentError",
    "ResolveError",
]

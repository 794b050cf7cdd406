"""Edit values consumed by the patch engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Direction(str, Enum):
    """Which side of a spot an edit works on."""

    PRE = "pre"
    POST = "post"


@dataclass(frozen=True)
class Insert:
    """Insert payload at the gap named by spot.

    PRE lands immediately before original byte `spot`; POST lands
    immediately after original byte `spot - 1`.
    """

    direction: Direction
    spot: int
    payload: bytes


@dataclass(frozen=True)
class Remove:
    """Remove count bytes next to original byte `spot`.

    PRE removes the count bytes in front of original byte `spot`;
    POST removes the count bytes after it, leaving byte `spot` in place.
    """

    direction: Direction
    spot: int
    count: int


Edit = Insert | Remove

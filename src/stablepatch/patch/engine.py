"""Offset-stable patch engine.

Every edit names its location by an offset into the original source.
The OffsetIndex keeps, for each position of the working buffer, the
original ids that position answers for, so spots keep resolving after
earlier edits have shifted, inserted or deleted bytes.

A spot S names the gap in front of original byte S:

    PRE  lands immediately before original byte S
    POST lands immediately after original byte S - 1

Removes count from the same anchors: PRE takes the count bytes in
front of original byte S, POST the count bytes after it.

When a run of bytes is removed, its ids collapse onto the gap the run
leaves behind and keep resolving there.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from stablepatch.core.errors import InvalidRemoveRange, OutOfBounds
from stablepatch.patch.models import Direction, Edit, Insert, Remove


@dataclass
class Slot:
    """Bookkeeping for one buffer position.

    Attributes:
        origin: Original id of the byte at this position, or None for
            a byte that was inserted and has no original identity
        collapsed: Ids of removed original bytes whose collapse point
            is the gap immediately before this position
    """

    origin: int | None
    collapsed: set[int] = field(default_factory=set)

    @property
    def origins(self) -> set[int]:
        """Every original id that resolves to this position."""
        if self.origin is None:
            return set(self.collapsed)
        return self.collapsed | {self.origin}


class OffsetIndex:
    """Maps original ids to current buffer positions.

    Holds one Slot per buffer byte plus a tail set for ids that
    collapsed past the last byte. The tail always holds the virtual id
    `original_length`, which is how a PRE edit at the end of the source
    resolves.
    """

    def __init__(self, original_length: int):
        self.original_length = original_length
        self._slots = [Slot(i) for i in range(original_length)]
        self._tail: set[int] = {original_length}

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, position: int) -> Slot:
        return self._slots[position]

    @property
    def tail(self) -> frozenset[int]:
        return frozenset(self._tail)

    def locate(self, origin: int) -> tuple[int, bool]:
        """Find the buffer position for an original id.

        Args:
            origin: Original id to look up

        Returns:
            (position, live): live is True when the original byte is
            still in the buffer at `position`; otherwise `position` is
            the collapse point the id was folded onto

        Raises:
            OutOfBounds: If no slot answers for the id
        """
        for position, slot in enumerate(self._slots):
            if slot.origin == origin:
                return position, True
            if origin in slot.collapsed:
                return position, False

        if origin in self._tail:
            return len(self._slots), False

        raise OutOfBounds(origin, self.original_length)

    def resolve(self, direction: Direction, spot: int) -> int:
        """Translate a spot into the buffer gap an edit works at.

        Args:
            direction: PRE or POST
            spot: Offset into the original source

        Returns:
            Buffer position of the gap (0..len(buffer))

        Raises:
            OutOfBounds: If spot is not an offset of the original source
        """
        self._check(spot)

        if direction is Direction.PRE:
            position, _live = self.locate(spot)
            return position

        if spot == 0:
            return 0
        return self.after(spot - 1)

    def after(self, spot: int) -> int:
        """Buffer position right after original byte `spot`.

        For a removed byte this is its collapse point; for
        `original_length` it is the end of the buffer.

        Raises:
            OutOfBounds: If spot is not an offset of the original source
        """
        self._check(spot)
        position, live = self.locate(spot)
        return position + 1 if live else position

    def _check(self, spot: int) -> None:
        if not 0 <= spot <= self.original_length:
            raise OutOfBounds(spot, self.original_length)

    def insert(self, position: int, count: int, spot: int) -> None:
        """Open `count` inserted slots at `position`.

        Collapsed ids sitting at `position` that belong in front of
        `spot` move onto the first new slot, so they stay on the left
        of the inserted bytes.
        """
        if count == 0:
            return

        new_slots = [Slot(None) for _ in range(count)]

        if position < len(self._slots):
            waiting = self._slots[position].collapsed
        else:
            waiting = self._tail
        ahead = {origin for origin in waiting if origin < spot}
        if ahead:
            waiting -= ahead
            new_slots[0].collapsed = ahead

        self._slots[position:position] = new_slots

    def remove(self, start: int, stop: int) -> None:
        """Drop slots [start, stop) and fold their ids onto the gap."""
        if start == stop:
            return

        folded: set[int] = set()
        for slot in self._slots[start:stop]:
            folded |= slot.origins
        del self._slots[start:stop]

        if start < len(self._slots):
            self._slots[start].collapsed |= folded
        else:
            self._tail |= folded


def apply(source: bytes, edits: Iterable[Edit]) -> bytes:
    """Apply edits, in order, to a copy of source.

    Args:
        source: Original bytes; every spot is an offset into these
        edits: Insert and Remove values, applied in the given order

    Returns:
        The patched bytes

    Raises:
        OutOfBounds: If a spot is not an offset of the original source
        InvalidRemoveRange: If a remove reaches past the buffer
    """
    buffer = bytearray(source)
    index = OffsetIndex(len(source))

    for edit in edits:
        if isinstance(edit, Insert):
            _insert(buffer, index, edit)
        elif isinstance(edit, Remove):
            _remove(buffer, index, edit)
        else:
            raise TypeError(f"not an edit: {edit!r}")

    return bytes(buffer)


def _insert(buffer: bytearray, index: OffsetIndex, edit: Insert) -> None:
    position = index.resolve(edit.direction, edit.spot)
    buffer[position:position] = edit.payload
    index.insert(position, len(edit.payload), edit.spot)


def _remove(buffer: bytearray, index: OffsetIndex, edit: Remove) -> None:
    if edit.direction is Direction.POST:
        start = index.after(edit.spot)
    else:
        start = index.resolve(Direction.PRE, edit.spot) - edit.count
    stop = start + edit.count

    if edit.count < 0 or start < 0 or stop > len(buffer):
        raise InvalidRemoveRange(start, edit.count, len(buffer))

    del buffer[start:stop]
    index.remove(start, stop)


__all__ = ["OffsetIndex", "Slot", "apply"]

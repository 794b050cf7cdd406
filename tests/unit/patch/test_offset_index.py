"""Tests for OffsetIndex bookkeeping."""

import random

import pytest

from stablepatch.core.errors import OutOfBounds
from stablepatch.patch import Direction, Insert, OffsetIndex, Remove
from stablepatch.patch.engine import _insert, _remove


def _all_origins(index):
    seen = []
    for position in range(len(index)):
        seen.extend(index[position].origins)
    seen.extend(index.tail)
    return seen


def test_initial_slots_are_singletons():
    index = OffsetIndex(4)

    assert len(index) == 4
    assert [index[i].origins for i in range(4)] == [{0}, {1}, {2}, {3}]
    assert index.tail == {4}


def test_inserted_slots_have_no_origin():
    index = OffsetIndex(2)
    index.insert(1, 3, spot=1)

    assert len(index) == 5
    assert [index[i].origin for i in range(5)] == [0, None, None, None, 1]
    assert index.locate(1) == (4, True)


def test_remove_folds_ids_onto_following_slot():
    index = OffsetIndex(5)
    index.remove(1, 3)

    assert len(index) == 3
    assert index[1].origin == 3
    assert index[1].origins == {1, 2, 3}
    assert index.locate(2) == (1, False)


def test_remove_at_end_folds_into_tail():
    index = OffsetIndex(3)
    index.remove(1, 3)

    assert len(index) == 1
    assert index.tail == {1, 2, 3}
    assert index.locate(2) == (1, False)


def test_resolve_directions():
    index = OffsetIndex(3)

    assert index.resolve(Direction.PRE, 0) == 0
    assert index.resolve(Direction.POST, 0) == 0
    assert index.resolve(Direction.PRE, 2) == 2
    assert index.resolve(Direction.POST, 2) == 2
    assert index.resolve(Direction.PRE, 3) == 3
    assert index.resolve(Direction.POST, 3) == 3


def test_after_steps_past_live_byte_or_stops_at_collapse_point():
    index = OffsetIndex(5)

    assert index.after(0) == 1
    assert index.after(4) == 5
    assert index.after(5) == 5

    index.remove(1, 3)

    assert index.after(1) == 1
    assert index.after(2) == 1
    assert index.after(3) == 2


@pytest.mark.parametrize("spot", [-1, 4, 100])
def test_resolve_rejects_spots_outside_source(spot):
    with pytest.raises(OutOfBounds):
        OffsetIndex(3).resolve(Direction.PRE, spot)


def test_lengths_stay_in_sync_under_random_edits():
    """Buffer and index lengths match, and every id resolves once."""
    rng = random.Random(42)

    for _ in range(200):
        length = rng.randint(0, 12)
        buffer = bytearray(rng.randbytes(length))
        index = OffsetIndex(length)

        for _ in range(rng.randint(1, 10)):
            direction = rng.choice(list(Direction))
            spot = rng.randint(0, length)
            if rng.random() < 0.5:
                payload = rng.randbytes(rng.randint(0, 3))
                _insert(buffer, index, Insert(direction, spot, payload))
            else:
                if direction is Direction.POST:
                    room = len(buffer) - index.after(spot)
                else:
                    room = index.resolve(direction, spot)
                edit = Remove(direction, spot, rng.randint(0, room))
                _remove(buffer, index, edit)

            assert len(index) == len(buffer)
            origins = _all_origins(index)
            assert sorted(origins) == list(range(length + 1))

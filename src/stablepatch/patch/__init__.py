"""Offset-stable patch engine and its edit values."""

from stablepatch.patch.engine import OffsetIndex, apply
from stablepatch.patch.models import Direction, Edit, Insert, Remove

__all__ = ["Direction", "Edit", "Insert", "OffsetIndex", "Remove", "apply"]

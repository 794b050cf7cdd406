"""Base classes for configuration and runtime state models.

- Closeable: protocol for anything with close()
- BaseCloseable: pydantic model that closes its closeable fields
- BaseConfig / BaseState: markers for config and runtime sections

Kept apart from config.py so log.py can build on them without a
circular import.
"""

from __future__ import annotations

import sys
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


@runtime_checkable
class Closeable(Protocol):
    """Protocol for objects that support close()."""

    def close(self) -> None:
        ...


class BaseCloseable(BaseModel):
    """Pydantic model that closes its children.

    close() walks the model's fields and closes every Closeable one,
    carrying on when a child fails. The model is also a context
    manager, so `with config:` closes the whole tree:
    Config.close() -> Logger.close() -> Sink.close().
    """

    def close(self):
        for field_name in self.__class__.model_fields:
            child = getattr(self, field_name, None)
            if child is None or not isinstance(child, Closeable):
                continue
            try:
                child.close()
            except Exception as e:
                print(
                    f"Warning: Error closing {field_name}: {e}",
                    file=sys.stderr,
                )

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):  # noqa: U100
        self.close()
        return False


class BaseConfig(BaseCloseable):
    """Configuration section (loaded from YAML/env/CLI)."""


class BaseState(BaseCloseable):
    """Runtime state section (mutated while a command runs)."""


__all__ = ["Closeable", "BaseCloseable", "BaseConfig", "BaseState"]

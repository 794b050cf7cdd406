"""CLI command modules for stablepatch."""

from stablepatch.command.apply import ApplyCommand
from stablepatch.command.init import InitCommand

__all__ = ["ApplyCommand", "InitCommand"]

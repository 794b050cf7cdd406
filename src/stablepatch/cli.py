#!/usr/bin/env python3
"""stablepatch CLI - apply byte edits addressed by original offsets."""

import asyncio

from pydantic_settings import CliApp, CliSubCommand, get_subcommand

from stablepatch.command.apply import ApplyCommand
from stablepatch.command.init import InitCommand
from stablepatch.core.config import State
from stablepatch.core.log import logger


class CliState(State):
    """Apply a TOML patch document whose edits are addressed by
    offsets into the original source.

    Without a subcommand, reads a patch document from standard input
    and writes the patched bytes to standard output:

        cat patch.toml | stablepatch > patched.bin

    Configuration sources (in priority order):
    1. Command-line arguments (--config.fetch.timeout 10)
    2. stablepatch.yaml in the current directory (plus --include files)
    3. .env file
    4. Environment variables (STABLEPATCH_CONFIG__FETCH__TIMEOUT=10)
    """

    apply: CliSubCommand[ApplyCommand]
    init: CliSubCommand[InitCommand]

    def cli_cmd(self):
        """Dispatch to the active subcommand, defaulting to apply."""
        subcommand = get_subcommand(self, is_required=False)
        if subcommand is None:
            subcommand = ApplyCommand()

        # Closing the logger on the way out flushes the file sink
        with logger:
            exit_code = asyncio.run(subcommand.run_workflow(self))
            raise SystemExit(exit_code)


def main():
    """Main entry point for CLI."""
    CliApp.run(CliState)


if __name__ == "__main__":
    main()

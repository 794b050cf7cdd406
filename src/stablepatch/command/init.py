"""Init command - write a starter patch document."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from stablepatch.core.log import logger

if TYPE_CHECKING:
    from stablepatch.core.config import State

STARTER_DOCUMENT = '''\
[source]
text = "Hello!"

[[patch]]
do = "insert"
way = "post"
spot = 5
source = { text = ", World" }
'''


class InitCommand(BaseModel):
    """Print a starter patch document, or create it as a new file."""

    output: Path | None = Field(
        default=None,
        description="Create this file instead of printing (never overwrites)",
    )

    async def run_workflow(self, state: State) -> int:  # noqa: ARG002
        """Write the starter document.

        Returns:
            Exit code (0=success, 1=the file already exists)
        """
        if self.output is None:
            sys.stdout.write(STARTER_DOCUMENT)
            sys.stdout.flush()
            return 0

        try:
            with open(self.output, "x", encoding="utf-8") as f:
                f.write(STARTER_DOCUMENT)
        except FileExistsError:
            logger.error(f"Refusing to overwrite {self.output}")
            return 1

        logger.info(f"Created {self.output}")
        return 0

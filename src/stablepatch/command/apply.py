"""Apply command - render a patch document."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field
from pydantic_graph import End

from stablepatch.core.errors import StablePatchError
from stablepatch.core.log import logger

if TYPE_CHECKING:
    from stablepatch.core.config import State


class ApplyCommand(BaseModel):
    """Apply a patch document and write the patched bytes.

    The document is read from a file, an http(s) URL, or standard
    input ("-"). The result goes to standard output unless --output
    names a file.
    """

    document: str = Field(
        default="-",
        description="Patch document: file path, http(s) URL, or - for stdin",
    )
    output: Path | None = Field(
        default=None,
        description="Write the patched bytes here instead of stdout",
    )

    async def run_workflow(self, state: State) -> int:
        """Run the Load → Render → Write workflow.

        Args:
            state: State instance

        Returns:
            Exit code (0=success, 1=failure)
        """
        state.runtime.apply.document = self.document
        state.runtime.apply.output = self.output

        from stablepatch.workflow.graph import create_workflow
        from stablepatch.workflow.nodes import Load

        workflow = create_workflow()

        try:
            async with workflow.iter(Load(), state=state) as run:
                async for node in run:
                    if isinstance(node, End):
                        logger.debug(f"Apply complete: {node.data} bytes")
                        return 0
        except (StablePatchError, OSError) as e:
            state.runtime.apply.status = "failed"
            logger.error(f"Apply failed: {e}")
            return 1

        logger.error("Apply failed - workflow ended unexpectedly")
        return 1

"""Write node - send the patched bytes to their destination."""

from __future__ import annotations

import sys
from dataclasses import dataclass

from pydantic_graph import BaseNode, End, GraphRunContext

from stablepatch.core.config import State
from stablepatch.core.log import logger


@dataclass
class Write(BaseNode[State, None, int]):
    """Write the result to runtime.apply.output, or to stdout."""

    async def run(self, ctx: GraphRunContext[State]) -> End[int]:
        """Write the patched bytes.

        Returns:
            End[int]: Number of bytes written
        """
        apply_state = ctx.state.runtime.apply
        result = apply_state.result
        if result is None:
            raise ValueError("No rendered result to write")

        if apply_state.output is None:
            sys.stdout.buffer.write(result)
            sys.stdout.buffer.flush()
        else:
            apply_state.output.parent.mkdir(parents=True, exist_ok=True)
            apply_state.output.write_bytes(result)
            logger.info(f"Wrote {len(result)} bytes to {apply_state.output}")

        apply_state.status = "complete"
        return End(len(result))

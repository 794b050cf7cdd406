"""Render node - resolve sources and apply the edits."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from stablepatch.core.config import State
from stablepatch.core.log import logger
from stablepatch.resolve.resolver import Resolver
from stablepatch.workflow.nodes.write import Write


@dataclass
class Render(BaseNode[State]):
    """Resolve every source of the loaded document and patch it."""

    async def run(self, ctx: GraphRunContext[State]) -> Write:
        apply_state = ctx.state.runtime.apply
        loaded = apply_state.loaded
        if loaded is None:
            raise ValueError("No document loaded to render")

        async with Resolver(ctx.state.config.fetch) as resolver:
            result = await resolver.render(
                loaded.document, loaded.base, (loaded.location,)
            )

        apply_state.result = result
        apply_state.status = "rendered"

        logger.debug("Rendered document", size=len(result))
        return Write()

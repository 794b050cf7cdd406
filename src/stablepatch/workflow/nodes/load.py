"""Load node - read and parse the patch document."""

from __future__ import annotations

from dataclasses import dataclass

from pydantic_graph import BaseNode, GraphRunContext

from stablepatch.core.config import State
from stablepatch.core.log import logger
from stablepatch.resolve.resolver import Resolver
from stablepatch.workflow.nodes.render import Render


@dataclass
class Load(BaseNode[State]):
    """Read the document named by runtime.apply.document and parse it."""

    async def run(self, ctx: GraphRunContext[State]) -> Render:
        apply_state = ctx.state.runtime.apply

        async with Resolver(ctx.state.config.fetch) as resolver:
            loaded = await resolver.load(apply_state.document)

        apply_state.loaded = loaded
        apply_state.status = "loaded"

        logger.info(
            f"Loaded {loaded.location} "
            f"({len(loaded.document.patch)} edit(s))"
        )
        return Render()

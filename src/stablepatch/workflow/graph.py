"""Graph workflow definition."""

from pydantic_graph import Graph

from stablepatch.core.config import State
from stablepatch.core.log import logger


def create_workflow():
    """Create the apply workflow graph.

    Load → Render → Write

    Returns:
        Graph workflow with State as state_type
    """
    logger.debug("Building workflow graph")

    from stablepatch.workflow.nodes import Load, Render, Write

    return Graph(nodes=(Load, Render, Write), state_type=State)

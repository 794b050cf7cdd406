"""Workflow nodes for the apply graph."""

from stablepatch.workflow.nodes.load import Load
from stablepatch.workflow.nodes.render import Render
from stablepatch.workflow.nodes.write import Write

__all__ = ["Load", "Render", "Write"]

"""Graph layer: DiagramGraph and the builders that feed it."""

from .kinds import DiagramKind, EdgeKind, NodeKind
from .diagram_graph import ControllerMethods, DiagramGraph, Edge, Node
from .builder import (
    build_controllers_diagram,
    build_diagram,
    build_models_diagram,
    build_states_diagram,
)

__all__ = [
    "DiagramKind",
    "EdgeKind",
    "NodeKind",
    "ControllerMethods",
    "DiagramGraph",
    "Edge",
    "Node",
    "build_controllers_diagram",
    "build_diagram",
    "build_models_diagram",
    "build_states_diagram",
]

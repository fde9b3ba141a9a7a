"""Builders that turn an Application into DiagramGraphs."""

import logging
import re

from ..config import DiagramOptions
from ..schema.models import Application, Association, ModelClass, StateMachine
from .diagram_graph import ControllerMethods, DiagramGraph, Edge, Node
from .kinds import DiagramKind, EdgeKind, NodeKind

logger = logging.getLogger(__name__)

# Bookkeeping columns added by the persistence framework
MAGIC_FIELDS = frozenset({
    "id",
    "type",
    "created_at",
    "created_on",
    "updated_at",
    "updated_on",
    "lock_version",
    "position",
    "parent_id",
    "lft",
    "rgt",
    "quote",
    "template",
})

# Superclasses that never get an inheritance edge
BASE_CLASSES = frozenset({
    "ApplicationRecord",
    "ActiveRecord::Base",
    "ActionController::Base",
    "Object",
})


def _underscore(name: str) -> str:
    """Convert a CamelCase class name to snake_case."""
    name = name.replace("::", "/")
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z\d])([A-Z])", r"\1_\2", name)
    return name.replace("-", "_").lower()


def _state_id(prefix: str, state: str) -> str:
    return re.sub(r"\W", "_", f"{prefix}_{state}")


def _new_graph(app: Application, diagram_type: str, options: DiagramOptions) -> DiagramGraph:
    migration_version = None
    if app.migration_version is not None:
        migration_version = lambda: app.migration_version  # noqa: E731

    graph = DiagramGraph(migration_version=migration_version)
    graph.diagram_type = diagram_type
    graph.show_label = options.label
    graph.alphabetize = options.alphabetize
    return graph


def _add_inheritance(graph: DiagramGraph, name: str, parent: str | None) -> None:
    if parent is None or parent in BASE_CLASSES:
        return
    graph.add_edge(Edge(EdgeKind.IS_A, parent, name))


# -----------------------------------------------------------------------------
# Models
# -----------------------------------------------------------------------------


def _attribute_labels(model: ModelClass, options: DiagramOptions) -> list[str]:
    labels = []
    for attr in model.attributes:
        if options.hide_magic and attr.name in MAGIC_FIELDS:
            continue
        if attr.type and not options.hide_types:
            labels.append(f"{attr.name} :{attr.type}")
        else:
            labels.append(attr.name)
    return labels


def _association_label(assoc: Association) -> str:
    """Label non-standard association names only."""
    if not assoc.name:
        return ""
    singular = _underscore(assoc.target.split("::")[-1])
    if assoc.name in (singular, f"{singular}s", f"{singular}es"):
        return ""
    return assoc.name


def _association_kind(assoc: Association) -> EdgeKind:
    if assoc.macro == "has_one":
        return EdgeKind.ONE_TO_ONE
    if assoc.macro == "belongs_to":
        return EdgeKind.BELONGS_TO
    if assoc.macro == "has_many" and not assoc.through:
        return EdgeKind.ONE_TO_MANY
    # has_and_belongs_to_many and has_many :through
    return EdgeKind.MANY_TO_MANY


def build_models_diagram(
    app: Application, options: DiagramOptions | None = None
) -> DiagramGraph:
    """Build the models diagram for an application.

    Args:
        app: The parsed application description.
        options: Diagram switches; defaults are used when omitted.

    Returns:
        A DiagramGraph with one node per model and one edge per association.
    """
    options = options or DiagramOptions()
    graph = _new_graph(app, "Models", options)

    shown: list[ModelClass] = []
    for model in app.models.values():
        if model.abstract and not options.all_classes:
            logger.debug("Skipping abstract model %s", model.name)
            continue
        shown.append(model)

        if options.brief:
            graph.add_node(Node(NodeKind.MODEL_BRIEF, model.name))
        else:
            graph.add_node(
                Node(NodeKind.MODEL, model.name, _attribute_labels(model, options))
            )

        if options.inheritance:
            _add_inheritance(graph, model.name, model.parent)

    if options.all_classes:
        for cls in app.classes.values():
            kind = NodeKind.CLASS_BRIEF if options.brief else NodeKind.CLASS
            graph.add_node(Node(kind, cls.name))
            if options.inheritance:
                _add_inheritance(graph, cls.name, cls.parent)

    if options.modules:
        for module in app.modules:
            graph.add_node(Node(NodeKind.MODULE, module))

    # Associations go after all nodes exist
    many_to_many: set[tuple[str, str]] = set()
    for model in shown:
        for assoc in model.associations:
            kind = _association_kind(assoc)

            if kind == EdgeKind.BELONGS_TO and not options.show_belongs_to:
                continue

            if kind == EdgeKind.MANY_TO_MANY:
                # Both sides declare the association; draw it once
                if (assoc.target, model.name) in many_to_many:
                    continue
                many_to_many.add((model.name, assoc.target))

            graph.add_edge(
                Edge(kind, model.name, assoc.target, _association_label(assoc))
            )

    return graph


# -----------------------------------------------------------------------------
# Controllers
# -----------------------------------------------------------------------------


def build_controllers_diagram(
    app: Application, options: DiagramOptions | None = None
) -> DiagramGraph:
    """Build the controllers diagram for an application."""
    options = options or DiagramOptions()
    graph = _new_graph(app, "Controllers", options)

    for controller in app.controllers.values():
        if options.brief:
            graph.add_node(Node(NodeKind.CONTROLLER_BRIEF, controller.name))
        else:
            methods = ControllerMethods(
                public=controller.public,
                protected=controller.protected,
                private=controller.private,
            )
            graph.add_node(Node(NodeKind.CONTROLLER, controller.name, methods))

        if options.inheritance:
            _add_inheritance(graph, controller.name, controller.parent)

    return graph


# -----------------------------------------------------------------------------
# State machines
# -----------------------------------------------------------------------------


def _state_machine_lines(machine: StateMachine) -> list[str]:
    """Format the body statements of a state machine cluster.

    State ids are prefixed with the machine name so several clusters can
    share one digraph.
    """
    prefix = machine.name.lower()
    lines = []

    initial = machine.initial_state
    if initial is not None:
        start = _state_id(prefix, "_initial")
        lines.append(f'{start} [label="", shape=point];')
        lines.append(f"{start} -> {_state_id(prefix, initial)};")

    for state in machine.states:
        shape = "doublecircle" if state.final else "ellipse"
        lines.append(
            f'{_state_id(prefix, state.name)} [label="{state.name}", shape={shape}];'
        )

    for event in machine.events:
        for from_state in event.from_states:
            lines.append(
                f"{_state_id(prefix, from_state)} -> {_state_id(prefix, event.to)}"
                f' [label="{event.name}"];'
            )

    return lines


def build_states_diagram(
    app: Application, options: DiagramOptions | None = None
) -> DiagramGraph:
    """Build the state machines diagram, one cluster per state machine."""
    options = options or DiagramOptions()
    graph = _new_graph(app, "States", options)

    for machine in app.state_machines.values():
        graph.add_node(
            Node(NodeKind.STATE_CLUSTER, machine.name, _state_machine_lines(machine))
        )

    return graph


_BUILDERS = {
    DiagramKind.MODELS: build_models_diagram,
    DiagramKind.CONTROLLERS: build_controllers_diagram,
    DiagramKind.STATES: build_states_diagram,
}


def build_diagram(
    app: Application, kind: DiagramKind | str, options: DiagramOptions | None = None
) -> DiagramGraph:
    """Build the diagram of the given kind."""
    return _BUILDERS[DiagramKind(kind)](app, options)

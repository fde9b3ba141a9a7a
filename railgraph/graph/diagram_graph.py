"""DiagramGraph: collects typed nodes and edges and renders them as DOT."""

import logging
import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Mapping, NamedTuple, Sequence

import click

from .. import APP_HUMAN_NAME, APP_URL, __version__
from .kinds import EdgeKind, NodeKind

logger = logging.getLogger(__name__)

# DOT escape for a left-justified line break inside a label
LINE_BREAK = "\\l"

MigrationVersionProvider = Callable[[], Any]


@dataclass
class ControllerMethods:
    """Controller method names partitioned by visibility."""

    public: list[str] = field(default_factory=list)
    protected: list[str] = field(default_factory=list)
    private: list[str] = field(default_factory=list)

    @classmethod
    def coerce(cls, value: Any) -> "ControllerMethods":
        """Accept a ControllerMethods, a mapping keyed by visibility, a
        (public, protected, private) sequence, or None."""
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            return cls(
                public=list(value.get("public") or []),
                protected=list(value.get("protected") or []),
                private=list(value.get("private") or []),
            )
        if (
            isinstance(value, Sequence)
            and not isinstance(value, str)
            and len(value) == 3
        ):
            public, protected, private = value
            return cls(
                public=list(public or []),
                protected=list(protected or []),
                private=list(private or []),
            )
        if value is not None:
            logger.debug("Unrecognized controller methods %r", value)
        return cls()


class Node(NamedTuple):
    """A node record as produced by a diagram builder."""

    kind: str
    name: str
    attributes: Any = None
    custom_options: str = ""


class Edge(NamedTuple):
    """An edge record as produced by a diagram builder."""

    kind: str
    from_name: str
    to_name: str
    label: str = ""


def quote(name: Any) -> str:
    """Wrap a node identifier in double quotes, verbatim."""
    return '"' + str(name) + '"'


class DiagramGraph:
    """An append-only graph of diagram nodes and edges.

    Nodes and edges are rendered in insertion order. Configuration lives in
    plain attributes (``diagram_type``, ``show_label``, ``alphabetize``) which
    are read once at the start of each render.

    Args:
        app_name: Application name shown in the diagram label.
        app_version: Application version shown in the diagram label.
        project_url: URL shown as the last label line.
        migration_version: Optional callable returning the schema migration
            version. The label line is omitted when it is absent or returns None.
        rng: Random source for edge colors.
        clock: Callable returning the timestamp shown in the label.
    """

    def __init__(
        self,
        app_name: str = APP_HUMAN_NAME,
        app_version: str = __version__,
        project_url: str = APP_URL,
        migration_version: MigrationVersionProvider | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.diagram_type = ""
        self.show_label = False
        self.alphabetize = False
        self.app_name = app_name
        self.app_version = app_version
        self.project_url = project_url
        self.migration_version = migration_version
        self.rng = rng or random.Random()
        self.clock = clock
        self._nodes: list[Node] = []
        self._edges: list[Edge] = []

    @property
    def nodes(self) -> tuple[Node, ...]:
        """Nodes in insertion order."""
        return tuple(self._nodes)

    @property
    def edges(self) -> tuple[Edge, ...]:
        """Edges in insertion order."""
        return tuple(self._edges)

    # -------------------------------------------------------------------------
    # Building
    # -------------------------------------------------------------------------

    def add_node(self, node: Sequence[Any]) -> None:
        """Append a node, given as a Node or any (kind, name, attrs, options) sequence."""
        self._nodes.append(Node(*node))

    def add_edge(self, edge: Sequence[Any]) -> None:
        """Append an edge, given as an Edge or any (kind, from, to, label) sequence."""
        self._edges.append(Edge(*edge))

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def to_dot(self) -> str:
        """Render the whole graph as DOT text."""
        settings = _RenderSettings(
            diagram_type=self.diagram_type,
            show_label=self.show_label,
            alphabetize=self.alphabetize,
        )
        return (
            self._dot_header(settings)
            + "".join(self._dot_node(node, settings) for node in self._nodes)
            + "".join(self._dot_edge(edge) for edge in self._edges)
            + self._dot_footer()
        )

    def to_xmi(self) -> str:
        """XMI output is not available; report it and return nothing."""
        click.echo("Sorry. XMI output not yet implemented.\n", err=True)
        return ""

    def _dot_header(self, settings: "_RenderSettings") -> str:
        result = (
            f"digraph {settings.diagram_type.lower()}_diagram {{\n"
            '\tgraph[overlap=false, splines=true, bgcolor="none"]\n'
        )
        if settings.show_label:
            result += self._dot_label(settings)
        return result

    def _dot_footer(self) -> str:
        return "}\n"

    def _dot_label(self, settings: "_RenderSettings") -> str:
        lines = [
            f"{settings.diagram_type} diagram",
            f"Date: {self.clock().strftime('%b %d %Y - %H:%M')}",
        ]
        version = self.migration_version() if self.migration_version else None
        if version is not None:
            lines.append(f"Migration version: {version}")
        lines.append(f"Generated by {self.app_name} {self.app_version}")
        lines.append(self.project_url)

        label = "".join(line + LINE_BREAK for line in lines)
        return f'\t_diagram_info [shape="plaintext", label="{label}", fontsize=13]\n'

    def _dot_node(self, node: Node, settings: "_RenderSettings") -> str:
        try:
            kind = NodeKind(node.kind)
        except ValueError:
            logger.debug("Unknown node kind %r for %r", node.kind, node.name)
            kind = None

        if kind == NodeKind.STATE_CLUSTER:
            return _state_cluster(node)

        renderer = _NODE_OPTIONS.get(kind)
        options = renderer(node, settings) if renderer else ""
        joined = ", ".join(o for o in (options, node.custom_options) if o)
        return f"\t{quote(node.name)} [{joined}]\n"

    def _dot_edge(self, edge: Edge) -> str:
        try:
            kind = EdgeKind(edge.kind)
        except ValueError:
            logger.debug("Unknown edge kind %r from %r", edge.kind, edge.from_name)
            kind = None

        glyph, style = _EDGE_STYLES.get(kind, ("--", ""))
        if kind in _COLORED_EDGES:
            style += f", dir=both color={self._edge_color()}"

        options = [f'label="{edge.label}"'] if edge.label else []
        if style:
            options.append(style)
        return (
            f"\t{quote(edge.from_name)} {glyph} {quote(edge.to_name)}"
            f" [{', '.join(options)}]\n"
        )

    def _edge_color(self) -> str:
        return '"#%02X%02X%02X"' % (
            self.rng.randint(0, 255),
            self.rng.randint(0, 255),
            self.rng.randint(0, 255),
        )


@dataclass(frozen=True)
class _RenderSettings:
    """Configuration captured at the start of a render."""

    diagram_type: str
    show_label: bool
    alphabetize: bool

    def order(self, items: Sequence[str] | None) -> list[str]:
        """Sort items when alphabetizing, otherwise keep the given order."""
        items = list(items or [])
        return sorted(items) if self.alphabetize else items


def _model_options(node: Node, settings: _RenderSettings) -> str:
    body = LINE_BREAK.join(settings.order(node.attributes)) + LINE_BREAK
    return f'shape=Mrecord, label="{{{node.name}|{body}}}"'


def _class_options(node: Node, settings: _RenderSettings) -> str:
    return f'shape=record, label="{{{node.name}|}}"'


def _controller_options(node: Node, settings: _RenderSettings) -> str:
    methods = ControllerMethods.coerce(node.attributes)
    groups = [
        LINE_BREAK.join(settings.order(group)) + LINE_BREAK
        for group in (methods.public, methods.protected, methods.private)
    ]
    return f'shape=Mrecord, label="{{{node.name}|{"|".join(groups)}}}"'


def _module_options(node: Node, settings: _RenderSettings) -> str:
    return f'shape=box, style=dotted, label="{node.name}"'


def _no_options(node: Node, settings: _RenderSettings) -> str:
    return ""


def _box_options(node: Node, settings: _RenderSettings) -> str:
    return "shape=box"


def _state_cluster(node: Node) -> str:
    body = "\n  ".join(node.attributes or [])
    return (
        f"subgraph cluster_{str(node.name).lower()} {{\n"
        f"\tlabel = {quote(node.name)}\n"
        f"\t{body}}}\n"
    )


# Every renderer takes (node, settings) even when it ignores settings
_NodeRenderer = Callable[[Node, _RenderSettings], str]

_NODE_OPTIONS: dict[NodeKind, _NodeRenderer] = {
    NodeKind.MODEL: _model_options,
    NodeKind.MODEL_BRIEF: _no_options,
    NodeKind.CLASS: _class_options,
    NodeKind.CLASS_BRIEF: _box_options,
    NodeKind.CONTROLLER: _controller_options,
    NodeKind.CONTROLLER_BRIEF: _no_options,
    NodeKind.MODULE: _module_options,
}

# Many-to-many, belongs-to, is-a and event share the crow's-foot glyph
_EDGE_STYLES: dict[EdgeKind, tuple[str, str]] = {
    EdgeKind.ONE_TO_ONE: ("--", "arrowtail=odot, arrowhead=odot"),
    EdgeKind.ONE_TO_MANY: ("--|{", "arrowtail=odot, arrowhead=crow"),
    EdgeKind.MANY_TO_MANY: ("}|--|{", "arrowtail=crow, arrowhead=crow"),
    EdgeKind.BELONGS_TO: ("}|--|{", "arrowtail=none, arrowhead=normal"),
    EdgeKind.IS_A: ("}|--|{", 'arrowhead="none", arrowtail="onormal"'),
    EdgeKind.EVENT: ("}|--|{", "fontsize=10"),
}

_COLORED_EDGES = {
    EdgeKind.ONE_TO_ONE,
    EdgeKind.ONE_TO_MANY,
    EdgeKind.MANY_TO_MANY,
    EdgeKind.BELONGS_TO,
}

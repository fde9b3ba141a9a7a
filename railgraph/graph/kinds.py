"""Node and edge kind definitions for diagram graphs."""

from enum import Enum


class NodeKind(str, Enum):
    """Kinds of nodes a diagram graph can render."""

    MODEL = "model"
    MODEL_BRIEF = "model-brief"
    CLASS = "class"
    CLASS_BRIEF = "class-brief"
    CONTROLLER = "controller"
    CONTROLLER_BRIEF = "controller-brief"
    MODULE = "module"
    STATE_CLUSTER = "state-cluster"

    @classmethod
    def _missing_(cls, value):
        # Older producers tag state machine clusters with the plugin name
        if value == "aasm":
            return cls.STATE_CLUSTER
        return None


class EdgeKind(str, Enum):
    """Kinds of edges a diagram graph can render."""

    # Associations
    ONE_TO_ONE = "one-to-one"
    ONE_TO_MANY = "one-to-many"
    MANY_TO_MANY = "many-to-many"
    BELONGS_TO = "belongs-to"

    # Inheritance
    IS_A = "is-a"

    # State machine edges
    EVENT = "event"

    @classmethod
    def _missing_(cls, value):
        return _LEGACY_EDGE_TAGS.get(value)


_LEGACY_EDGE_TAGS = {
    "one-one": EdgeKind.ONE_TO_ONE,
    "one-many": EdgeKind.ONE_TO_MANY,
    "many-many": EdgeKind.MANY_TO_MANY,
}


class DiagramKind(str, Enum):
    """Diagram types the builders know how to produce."""

    MODELS = "models"
    CONTROLLERS = "controllers"
    STATES = "states"

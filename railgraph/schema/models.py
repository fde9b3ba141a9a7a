"""Pydantic models describing an application to diagram."""

from typing import Literal

from pydantic import BaseModel, Field, model_validator

ASSOCIATION_MACROS = ("has_one", "has_many", "has_and_belongs_to_many", "belongs_to")


def _name_entries(entries) -> list:
    """Turn bare strings in a list into {"name": value} mappings."""
    return [{"name": e} if isinstance(e, str) else e for e in entries]


def _fill_names(mapping: dict) -> None:
    """Set each entry's name from its key in a mapping of named sections."""
    for name, data in mapping.items():
        if isinstance(data, dict):
            data["name"] = name


class Attribute(BaseModel):
    """A persisted attribute (column) of a model."""

    name: str
    type: str | None = None


class Association(BaseModel):
    """An association declared on a model."""

    macro: Literal["has_one", "has_many", "has_and_belongs_to_many", "belongs_to"]
    target: str
    name: str | None = None
    through: str | None = None

    @model_validator(mode="before")
    @classmethod
    def normalize_shorthand(cls, data):
        """Accept {has_many: Post} as shorthand for macro/target."""
        if isinstance(data, dict) and "macro" not in data:
            for macro in ASSOCIATION_MACROS:
                if macro in data:
                    data = dict(data)
                    data["macro"] = macro
                    data["target"] = data.pop(macro)
                    break
        return data


class ModelClass(BaseModel):
    """A persisted model class."""

    name: str = ""  # Will be set from the key
    parent: str | None = None
    abstract: bool = False
    attributes: list[Attribute] = Field(default_factory=list)
    associations: list[Association] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_model(cls, data):
        """Normalize attribute shorthand and top-level association keys."""
        if not isinstance(data, dict):
            return data

        attributes = data.get("attributes") or []
        normalized_attrs = []
        for attr in attributes:
            # One-key mappings are always "column: type", even for a "name" column
            if isinstance(attr, dict) and len(attr) == 1:
                (name, attr_type), = attr.items()
                normalized_attrs.append({"name": name, "type": attr_type})
            elif isinstance(attr, str):
                normalized_attrs.append({"name": attr})
            else:
                normalized_attrs.append(attr)
        data["attributes"] = normalized_attrs

        # has_many: [Post, Comment] at model level
        associations = list(data.get("associations") or [])
        for macro in ASSOCIATION_MACROS:
            if macro in data:
                targets = data.pop(macro)
                if isinstance(targets, str):
                    targets = [targets]
                for target in targets:
                    associations.append({"macro": macro, "target": target})
        data["associations"] = associations

        return data


class PlainClass(BaseModel):
    """A class that is neither a model nor a controller."""

    name: str = ""
    parent: str | None = None


class Controller(BaseModel):
    """A controller class with its methods grouped by visibility."""

    name: str = ""
    parent: str | None = None
    public: list[str] = Field(default_factory=list)
    protected: list[str] = Field(default_factory=list)
    private: list[str] = Field(default_factory=list)


class State(BaseModel):
    """A state in a state machine."""

    name: str
    final: bool = False


class Event(BaseModel):
    """An event moving a state machine from one or more states to another."""

    name: str
    from_states: list[str] = Field(alias="from")
    to: str

    @model_validator(mode="before")
    @classmethod
    def normalize_from_states(cls, data):
        """Normalize from to always be a list."""
        if isinstance(data, dict):
            from_val = data.get("from")
            if from_val is not None and not isinstance(from_val, list):
                data["from"] = [from_val]
        return data


class StateMachine(BaseModel):
    """A state machine attached to a class."""

    name: str = ""
    initial: str | None = None
    states: list[State] = Field(default_factory=list)
    events: list[Event] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_states(cls, data):
        """Normalize states from list of strings or dicts."""
        if isinstance(data, dict) and data.get("states"):
            data["states"] = _name_entries(data["states"])
        return data

    @property
    def initial_state(self) -> str | None:
        """The declared initial state, falling back to the first state."""
        if self.initial:
            return self.initial
        if self.states:
            return self.states[0].name
        return None


class Application(BaseModel):
    """Root model for an application description file."""

    name: str = ""
    migration_version: int | str | None = None
    models: dict[str, ModelClass] = Field(default_factory=dict)
    classes: dict[str, PlainClass] = Field(default_factory=dict)
    modules: list[str] = Field(default_factory=list)
    controllers: dict[str, Controller] = Field(default_factory=dict)
    state_machines: dict[str, StateMachine] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def normalize_application(cls, data):
        """Set section entry names from their keys."""
        if not isinstance(data, dict):
            return data

        for section in ("models", "classes", "controllers", "state_machines"):
            entries = data.get(section)
            if entries is None:
                data[section] = {}
                continue
            if isinstance(entries, dict):
                for name, entry in list(entries.items()):
                    if entry is None:
                        entries[name] = {}
                _fill_names(entries)

        if data.get("modules") is None:
            data["modules"] = []

        return data

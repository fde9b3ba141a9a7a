"""Schema layer for parsing application descriptions from YAML."""

from .errors import ApplicationFileError, SchemaLoadError, SchemaValidationError
from .models import (
    Application,
    Association,
    Attribute,
    Controller,
    Event,
    ModelClass,
    PlainClass,
    State,
    StateMachine,
)
from .loader import load_yaml, parse_application, parse_application_from_string

__all__ = [
    "ApplicationFileError",
    "SchemaLoadError",
    "SchemaValidationError",
    "Application",
    "Association",
    "Attribute",
    "Controller",
    "Event",
    "ModelClass",
    "PlainClass",
    "State",
    "StateMachine",
    "load_yaml",
    "parse_application",
    "parse_application_from_string",
]

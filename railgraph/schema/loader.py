"""Read application descriptions from YAML files or strings."""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import SchemaLoadError, SchemaValidationError
from .models import Application

logger = logging.getLogger(__name__)

# Sections whose entries are keyed by class name
NAMED_SECTIONS = ("models", "classes", "controllers", "state_machines")
KNOWN_SECTIONS = frozenset(NAMED_SECTIONS + ("name", "migration_version", "modules"))


def load_yaml(path: str | Path) -> dict:
    """Read an application file and return its top-level sections.

    Raises:
        SchemaLoadError: If the file is missing, unreadable, or not a mapping.
    """
    path = Path(path)
    if not path.is_file():
        raise SchemaLoadError("Not a file" if path.exists() else "File not found", path)

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaLoadError(f"Cannot read file: {e}", path) from e

    return _sections(text, path)


def parse_application(path: str | Path) -> Application:
    """Load and validate an application file.

    Raises:
        SchemaLoadError: If the file cannot be read or parsed.
        SchemaValidationError: If an entry is invalid.
    """
    logger.debug("Loading application description from %s", path)
    return _validate(load_yaml(path), path)


def parse_application_from_string(yaml_string: str) -> Application:
    """Validate an application description given as YAML text."""
    return _validate(_sections(yaml_string))


def _sections(text: str, path: Path | None = None) -> dict:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Invalid YAML: {e}", path) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SchemaLoadError(
            "Expected a mapping of application sections "
            f"(models, controllers, ...), got {type(data).__name__}",
            path,
        )

    for key in data:
        if key not in KNOWN_SECTIONS:
            logger.warning("Ignoring unknown section %r", key)
    return data


def _validate(data: dict, path: str | Path | None = None) -> Application:
    try:
        app = Application.model_validate(data)
    except ValidationError as e:
        raise SchemaValidationError([_describe(err) for err in e.errors()], path) from e

    logger.debug(
        "Loaded %d models, %d controllers, %d state machines",
        len(app.models),
        len(app.controllers),
        len(app.state_machines),
    )
    return app


def _describe(err: dict) -> dict:
    """Flatten a pydantic error and tag it with the entry it belongs to."""
    loc = [str(x) for x in err["loc"]]
    entry = None
    if len(loc) > 1 and loc[0] in NAMED_SECTIONS:
        entry = f"{loc[0]}.{loc[1]}"
    return {
        "loc": ".".join(loc),
        "entry": entry,
        "msg": err["msg"],
        "type": err["type"],
    }

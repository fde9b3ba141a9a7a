"""Errors raised while reading an application description."""

from pathlib import Path


class ApplicationFileError(Exception):
    """Base class for problems with an application description.

    The message is prefixed with the file path when one is known.
    """

    def __init__(self, message: str, path: str | Path | None = None):
        self.path = str(path) if path is not None else None
        super().__init__(f"{self.path}: {message}" if self.path else message)


class SchemaLoadError(ApplicationFileError):
    """The description is unreadable or is not a YAML mapping of sections."""


class SchemaValidationError(ApplicationFileError):
    """One or more entries of the description are invalid.

    ``errors`` holds one dict per problem with ``loc``, ``entry`` (the
    ``section.Name`` the problem belongs to, or None), ``msg`` and ``type``.
    """

    def __init__(self, errors: list[dict], path: str | Path | None = None):
        self.errors = errors
        entries = sorted({e["entry"] for e in errors if e.get("entry")})
        message = f"{len(errors)} problem(s)"
        if entries:
            message += f" in {', '.join(entries)}"
        super().__init__(message, path)

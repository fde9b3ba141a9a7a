"""Diagram options shared by the builders and the CLI."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class OutputFormat(str, Enum):
    """Output formats accepted by the CLI."""

    DOT = "dot"
    XMI = "xmi"


class DiagramOptions(BaseModel):
    """Switches controlling what a builder puts into a diagram."""

    brief: bool = False
    alphabetize: bool = False
    label: bool = False
    inheritance: bool = False
    all_classes: bool = False
    show_belongs_to: bool = False
    hide_magic: bool = False
    hide_types: bool = False
    modules: bool = False
    output_format: OutputFormat = OutputFormat.DOT

    model_config = ConfigDict(frozen=True)

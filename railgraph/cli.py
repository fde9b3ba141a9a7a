"""Command-line interface for railgraph."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import DiagramOptions, OutputFormat
from .graph.builder import build_diagram
from .graph.kinds import DiagramKind
from .schema.errors import SchemaLoadError, SchemaValidationError
from .schema.loader import parse_application

logger = logging.getLogger(__name__)


def _common_options(func):
    """Options shared by every diagram command."""
    options = [
        click.argument("app_file", type=click.Path(exists=True)),
        click.option("-b", "--brief", is_flag=True, help="Generate a compact diagram (no attributes nor methods)"),
        click.option("-a", "--alphabetize", is_flag=True, help="Sort attributes and methods alphabetically"),
        click.option("-l", "--label", is_flag=True, help="Add a label with diagram information (type, date, version)"),
        click.option("-i", "--inheritance", is_flag=True, help="Include inheritance relations"),
        click.option(
            "--format",
            "output_format",
            type=click.Choice([f.value for f in OutputFormat]),
            default=OutputFormat.DOT.value,
            help="Output format",
        ),
        click.option(
            "-o",
            "--output",
            type=click.Path(dir_okay=False, writable=True),
            default=None,
            help="Write the diagram to a file instead of stdout",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _render(kind: DiagramKind, app_file: str, output: str | None, **flags) -> None:
    """Load the application, build the diagram and write it out.

    Exit codes:
      0 - Success
      2 - File or schema error
    """
    try:
        app = parse_application(app_file)
    except SchemaLoadError as e:
        click.echo(f"Error loading file: {e}", err=True)
        sys.exit(2)
    except SchemaValidationError as e:
        click.echo(f"Schema validation error: {e}", err=True)
        for err in e.errors:
            click.echo(f"  - {err['loc']}: {err['msg']}", err=True)
        sys.exit(2)

    options = DiagramOptions(**flags)
    graph = build_diagram(app, kind, options)
    logger.debug(
        "Built %s diagram with %d nodes and %d edges",
        kind.value,
        len(graph.nodes),
        len(graph.edges),
    )

    if options.output_format == OutputFormat.XMI:
        text = graph.to_xmi()
    else:
        text = graph.to_dot()

    if output:
        try:
            Path(output).write_text(text, encoding="utf-8")
        except OSError as e:
            click.echo(f"Cannot write output: {e}", err=True)
            sys.exit(2)
        logger.info("Wrote %s", output)
    else:
        click.echo(text, nl=False)


@click.group(context_settings={"auto_envvar_prefix": "RAILGRAPH"})
@click.version_option(__version__, prog_name="railgraph")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """railgraph: application diagrams in Graphviz DOT."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@_common_options
@click.option("--all", "all_classes", is_flag=True, help="Include abstract models and plain classes")
@click.option("--show-belongs-to", is_flag=True, help="Show belongs_to associations")
@click.option("--hide-magic", is_flag=True, help="Hide magic field names (id, timestamps, ...)")
@click.option("--hide-types", is_flag=True, help="Hide attribute types")
@click.option("--modules", is_flag=True, help="Include modules")
def models(app_file: str, output: str | None, **flags):
    """Generate the models diagram.

    APP_FILE is the path to a YAML application description.
    """
    _render(DiagramKind.MODELS, app_file, output, **flags)


@main.command()
@_common_options
def controllers(app_file: str, output: str | None, **flags):
    """Generate the controllers diagram.

    APP_FILE is the path to a YAML application description.
    """
    _render(DiagramKind.CONTROLLERS, app_file, output, **flags)


@main.command()
@_common_options
def states(app_file: str, output: str | None, **flags):
    """Generate the state machines diagram.

    APP_FILE is the path to a YAML application description.
    """
    _render(DiagramKind.STATES, app_file, output, **flags)


if __name__ == "__main__":
    main()

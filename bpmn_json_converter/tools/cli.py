"""
BPMN JSON Converter CLI Interface

Command-line tool converting between serialized process graphs and editor
JSON documents, and listing the stencils the converter understands.
"""

import json
import logging
import sys
from typing import Any, Optional

import click
from pydantic import ValidationError

from bpmn_json_converter.config import ConverterConfig, ErrorHandlingStrategy
from bpmn_json_converter.converter.bpmn_json_converter import BpmnJsonConverter
from bpmn_json_converter.converter.errors import ConversionReport, ConverterError, Severity
from bpmn_json_converter.converter.registry import get_default_registry
from bpmn_json_converter.core.observability import LogLevel, ObservabilityConfig, ObservabilityManager, log_execution
from bpmn_json_converter.models.serialization import dump_model, load_model

# Setup logging
logger = logging.getLogger(__name__)


@click.group()
@click.option(
    "--verbose/--quiet",
    default=None,
    help="Debug logging, or warnings only",
)
@click.option(
    "--json-logs",
    is_flag=True,
    help="Emit log records as JSON lines on stderr",
)
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on the first element that cannot be converted",
)
@click.pass_context
def cli(ctx: click.Context, verbose: Optional[bool], json_logs: bool, strict: bool) -> None:
    """BPMN JSON Converter - Convert process graphs to and from editor JSON."""
    config = ConverterConfig.from_env()
    config.error_handling = ErrorHandlingStrategy.STRICT if strict else ErrorHandlingStrategy.RECOVERY
    if verbose is True:
        config.log_level = LogLevel.DEBUG.value
    elif verbose is False:
        config.log_level = LogLevel.WARNING.value
    config.json_logs = config.json_logs or json_logs

    # Reconfigure sinks for this invocation
    ObservabilityManager.reset()
    ObservabilityManager.initialize(ObservabilityConfig.from_converter_config(config))

    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.command("to-json")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file path for the editor JSON document",
)
@click.pass_context
def to_json(ctx: click.Context, input_file: str, output: Optional[str]) -> None:
    """
    Convert a serialized process graph to an editor JSON document.

    \b
    Examples:
        bpmn-json to-json order-process.json
        bpmn-json --strict to-json order-process.json -o order-process.editor.json
    """
    data = _read_json(input_file)
    try:
        model = load_model(data)
    except (ValueError, ValidationError) as e:
        click.echo(f"Error: invalid process graph in {input_file}: {e}", err=True)
        sys.exit(1)

    converter = BpmnJsonConverter(config=ctx.obj["config"])
    try:
        document = converter.to_json(model)
    except ConverterError as e:
        _fail_conversion(e)

    _write_json(document, output)
    _report(converter.last_report)


@cli.command("to-domain")
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Output file path for the serialized process graph",
)
@click.pass_context
def to_domain(ctx: click.Context, input_file: str, output: Optional[str]) -> None:
    """
    Convert an editor JSON document to a serialized process graph.

    \b
    Examples:
        bpmn-json to-domain order-process.editor.json
        bpmn-json to-domain order-process.editor.json -o order-process.json
    """
    document = _read_json(input_file)

    converter = BpmnJsonConverter(config=ctx.obj["config"])
    try:
        model = converter.to_domain(document)
    except ConverterError as e:
        _fail_conversion(e)

    _write_json(dump_model(model), output)
    _report(converter.last_report)


@cli.command()
@click.option(
    "--format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
def stencils(format: str) -> None:
    """List every stencil with its converter and domain types."""
    rows = get_default_registry().describe()

    if format == "json":
        click.echo(
            json.dumps(
                [{"stencil": stencil, "converter": converter, "types": types} for stencil, converter, types in rows],
                indent=2,
            )
        )
        return

    for stencil, converter, types in rows:
        click.echo(f"{stencil:<32} {converter:<32} {', '.join(types)}")


@cli.command()
@click.pass_context
def info(ctx: click.Context) -> None:
    """Show converter version and configuration information."""
    from bpmn_json_converter import __version__

    config: ConverterConfig = ctx.obj["config"]
    registry = get_default_registry()
    info_dict = {
        "name": "BPMN JSON Converter",
        "version": __version__,
        "description": "Convert BPMN process graphs to and from editor JSON",
        "stencil_count": len(registry.stencil_ids),
        "config": {
            "error_handling": config.error_handling.value,
            "min_canvas_width": config.min_canvas_width,
            "min_canvas_height": config.min_canvas_height,
            "canvas_margin": config.canvas_margin,
            "default_target_namespace": config.default_target_namespace,
            "stencilset_namespace": config.stencilset_namespace,
            "stencilset_url": config.stencilset_url,
        },
    }

    click.echo(json.dumps(info_dict, indent=2))


# ==================
# Helper Functions
# ==================


@log_execution()
def _read_json(path: str) -> Any:
    """Read a JSON file, exiting with status 1 on failure."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (IOError, ValueError) as e:
        click.echo(f"Error reading {path}: {e}", err=True)
        sys.exit(1)


@log_execution()
def _write_json(data: Any, output_file: Optional[str]) -> None:
    output_json = json.dumps(data, indent=2)
    if output_file:
        with open(output_file, "w", encoding="utf-8") as f:
            f.write(output_json)
        click.echo(f"Output written to: {output_file}", err=True)
    else:
        click.echo(output_json)


def _fail_conversion(error: ConverterError) -> None:
    logger.debug("Conversion aborted", exc_info=error)
    if error.element_id:
        click.echo(f"Error: conversion failed at element {error.element_id}: {error}", err=True)
    else:
        click.echo(f"Error: conversion failed: {error}", err=True)
    sys.exit(1)


def _report(report: Optional[ConversionReport]) -> None:
    """Print the conversion summary and problems to stderr."""
    if report is None:
        return

    click.echo("\n--- Conversion Summary ---", err=True)
    click.echo(report.summary(), err=True)
    for diagnostic in report.diagnostics:
        if diagnostic.severity == Severity.INFO:
            continue
        element = f" [{diagnostic.element_id}]" if diagnostic.element_id else ""
        click.echo(f"{diagnostic.severity.value}{element}: {diagnostic.message}", err=True)


if __name__ == "__main__":
    cli()

import json
import logging
import sys

import click
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from flowbridge.config import OUTPUT_FORMATS, ConfigError, load_settings
from flowbridge.conversion import (
    ConversionError,
    convert_definition,
    convert_document,
    convert_flow_resources,
    is_application_document,
)
from flowbridge.schema import LegacySchemaError, parse_document_file


def _configure_logging(level):
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_settings_or_exit():
    try:
        return load_settings()
    except ConfigError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)


def _render(document, output_format, indent):
    if output_format == "yaml":
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    return json.dumps(document, indent=indent or None, ensure_ascii=False) + "\n"


@click.group()
def flowbridge_cli_group():
    """Convert legacy flow definitions to the current format"""
    pass


@flowbridge_cli_group.command()
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False, writable=True), help='Write the converted document here instead of stdout')
@click.option('--format', 'output_format', type=click.Choice(OUTPUT_FORMATS), help='Output format (default: FLOWBRIDGE_OUTPUT_FORMAT or json)')
@click.option('--indent', type=click.IntRange(min=0), help='JSON indentation (default: FLOWBRIDGE_JSON_INDENT or 2)')
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def convert(source, output, output_format, indent, verbose):
    """Convert a legacy flow or application document"""
    settings = _load_settings_or_exit()
    _configure_logging(logging.DEBUG if verbose else settings.log_level_value)

    output_format = output_format or settings.output_format
    indent = settings.json_indent if indent is None else indent

    try:
        descriptor = parse_document_file(source)
        converted = convert_document(descriptor)
    except (LegacySchemaError, ConversionError) as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)

    rendered = _render(converted, output_format, indent)
    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(rendered)
        click.echo(f"Converted {source} -> {output}", err=True)
    else:
        click.echo(rendered, nl=False)


@flowbridge_cli_group.command()
@click.argument('source', type=click.Path(exists=True, dir_okay=False))
def check(source):
    """Dry-run conversion of a legacy flow and summarize inferred schemas"""
    settings = _load_settings_or_exit()
    _configure_logging(settings.log_level_value)
    console = Console()

    try:
        descriptor = parse_document_file(source)
        if is_application_document(descriptor):
            flows = [(resource_id, definition) for _, resource_id, definition in convert_flow_resources(descriptor)]
        else:
            definition = convert_definition(descriptor)
            flows = [(f"Flow '{definition.name}'", definition)]
    except (LegacySchemaError, ConversionError) as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)

    if not flows:
        click.echo(f"ERROR: No flow resources found in {source}", err=True)
        sys.exit(1)

    task_count = 0
    link_count = 0
    for title, definition in flows:
        table = Table(title=title)
        table.add_column("Task")
        table.add_column("Activity")
        table.add_column("Input schemas", justify="right")
        table.add_column("Output schemas", justify="right")

        tasks = list(definition.tasks)
        if definition.error_handler is not None:
            tasks.extend(definition.error_handler.tasks)

        for task in tasks:
            activity = task.activity
            schemas = activity.schemas if activity is not None else None
            table.add_row(
                task.id,
                activity.ref if activity is not None else "-",
                str(len(schemas.input)) if schemas is not None else "0",
                str(len(schemas.output)) if schemas is not None else "0",
            )

        console.print(table)
        task_count += len(definition.tasks)
        link_count += len(definition.links)

    click.echo(f"OK: {len(flows)} flow(s), {task_count} task(s), {link_count} link(s) convertible")


if __name__ == '__main__':
    flowbridge_cli_group()

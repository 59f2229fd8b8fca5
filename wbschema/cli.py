"""CLI interface for wbschema."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from wbschema import __version__
from wbschema.backend.api import ApiEntityClient
from wbschema.config.manager import ConfigManager
from wbschema.config.registry import InstanceRegistry
from wbschema.config.settings import get_settings
from wbschema.constraints.models import ValidationResult
from wbschema.constraints.service import ConstraintValidationService
from wbschema.logger import setup_logging
from wbschema.mapping.columns import read_columns
from wbschema.mapping.completeness import check_completeness
from wbschema.mapping.models import WikibaseDataType
from wbschema.mapping.store import SchemaStore
from wbschema.persistence.gateway import FileSchemaGateway
from wbschema.persistence.schemas import load_schema
from wbschema.validation.compatibility import get_compatible_wikibase_types
from wbschema.validation.models import DropTarget, DropTargetType
from wbschema.validation.validator import CompatibilityValidator

console = Console()
stderr_console = Console(file=sys.stderr)


def _registry(ctx: click.Context) -> InstanceRegistry:
    config_path = ctx.obj.get("config_path")
    settings = get_settings()
    if config_path is None:
        return InstanceRegistry(settings=settings)
    return ConfigManager(str(config_path), settings=settings).build_registry()


def _service(ctx: click.Context) -> ConstraintValidationService:
    settings = get_settings()
    client = ApiEntityClient(registry=_registry(ctx), settings=settings)
    return ConstraintValidationService(client, settings=settings)


def _parse_value(raw: str):
    """Interpret a command line value as a YAML scalar ("5" -> 5, "Q42" -> "Q42")."""
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw


def _print_result(result: ValidationResult) -> None:
    if result.is_valid:
        console.print("[green]✓ No constraint violations[/green]")
    for violation in result.violations:
        console.print(f"[red]✗ {violation.property_id} {violation.constraint_type}: {escape(violation.message)}[/red]")
    for warning in result.warnings:
        console.print(f"[yellow]! {warning.property_id} {warning.constraint_type}: {escape(warning.message)}[/yellow]")
    for suggestion in result.suggestions:
        console.print(f"[blue]→ {suggestion}[/blue]")


@click.group()
@click.version_option(version=__version__)
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
@click.option(
    '--config', '-c',
    'config_path',
    type=click.Path(exists=True, path_type=Path),
    help='Path to project config with additional Wikibase instances'
)
@click.pass_context
def cli(ctx: click.Context, verbose: bool, config_path: Optional[Path]) -> None:
    """wbschema - map dataset columns onto Wikibase item schemas and validate them"""
    setup_logging("DEBUG" if verbose else get_settings().log_level)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command(name="columns")
@click.argument('csv_path', type=click.Path(exists=True, path_type=Path))
@click.option('--delimiter', '-d', default=',', help='CSV delimiter')
@click.option('--encoding', default='utf-8', help='CSV file encoding')
def columns(csv_path: Path, delimiter: str, encoding: str) -> None:
    """Describe the columns of a CSV file."""
    try:
        infos = read_columns(csv_path, encoding=encoding, delimiter=delimiter)
    except Exception as e:
        stderr_console.print(f"[red]✗ Failed to read columns: {escape(str(e))}[/red]")
        raise click.Abort()

    table = Table(title=str(csv_path))
    table.add_column("Column")
    table.add_column("Type")
    table.add_column("Nullable")
    table.add_column("Unique")
    table.add_column("Wikibase types")
    table.add_column("Samples")
    for info in infos:
        table.add_row(
            info.name,
            info.data_type,
            "yes" if info.nullable else "no",
            str(info.unique_count),
            ", ".join(t.value for t in get_compatible_wikibase_types(info.data_type)),
            ", ".join(info.sample_values[:3]),
        )
    console.print(table)


@cli.command(name="check")
@click.argument('csv_path', type=click.Path(exists=True, path_type=Path))
@click.option(
    '--target', '-t',
    'target_type',
    type=click.Choice([t.value for t in DropTargetType]),
    required=True,
    help='Kind of drop target'
)
@click.option('--accepts', '-a', multiple=True, help='Accepted Wikibase data type (repeatable)')
@click.option('--language', '-l', default='en', help='Language of term targets')
@click.option('--property', '-p', 'property_id', help='Property ID of statement targets')
@click.option('--required', is_flag=True, help='Target requires a value')
def check(
    csv_path: Path,
    target_type: str,
    accepts: tuple,
    language: str,
    property_id: Optional[str],
    required: bool,
) -> None:
    """Check which columns of a CSV file can be dropped on a target."""
    try:
        infos = read_columns(csv_path)
        kind = DropTargetType(target_type)
        if kind.is_term:
            target = DropTarget.for_term(kind, language, is_required=required)
            if accepts:
                target = target.model_copy(
                    update={"accepted_types": [WikibaseDataType(a) for a in accepts]}
                )
        else:
            target = DropTarget(
                type=kind,
                path=f"item.{kind.value}s",
                accepted_types=list(accepts) or ["string"],
                property_id=property_id,
                is_required=required,
            )
    except Exception as e:
        stderr_console.print(f"[red]✗ Check failed: {escape(str(e))}[/red]")
        raise click.Abort()

    validator = CompatibilityValidator()
    for info in infos:
        result = validator.validate_column_for_target(info, target)
        if result.is_valid:
            console.print(f"[green]✓ {info.name} ({info.data_type})[/green]")
        else:
            suggestion = "; ".join(result.error.suggestions)
            console.print(f"[red]✗ {info.name} ({info.data_type}): {result.reason}[/red] [dim]{suggestion}[/dim]")


@cli.command(name="constraints")
@click.argument('property_id')
@click.option('--instance', '-i', default=None, help='Wikibase instance id')
@click.pass_context
def constraints(ctx: click.Context, property_id: str, instance: Optional[str]) -> None:
    """List the constraints declared on a property."""
    instance = instance or get_settings().default_instance
    try:
        service = _service(ctx)
        items = asyncio.run(service.get_property_constraints(instance, property_id))
    except Exception as e:
        stderr_console.print(f"[red]✗ Failed to load constraints: {escape(str(e))}[/red]")
        raise click.Abort()

    if not items:
        console.print(f"[yellow]{property_id} declares no constraints[/yellow]")
        return

    table = Table(title=f"{property_id} constraints ({instance})")
    table.add_column("Type")
    table.add_column("Parameters")
    table.add_column("Description")
    for constraint in items:
        table.add_row(
            constraint.type,
            escape(json.dumps(constraint.parameters, ensure_ascii=False)),
            constraint.description or "",
        )
    console.print(table)


@cli.command(name="validate")
@click.argument('property_id')
@click.argument('values', nargs=-1)
@click.option('--instance', '-i', default=None, help='Wikibase instance id')
@click.pass_context
def validate(ctx: click.Context, property_id: str, values: tuple, instance: Optional[str]) -> None:
    """Validate values of one property against its constraints."""
    instance = instance or get_settings().default_instance
    try:
        service = _service(ctx)
    except Exception as e:
        stderr_console.print(f"[red]✗ Validation failed: {escape(str(e))}[/red]")
        raise click.Abort()

    result = asyncio.run(
        service.validate_property(instance, property_id, [_parse_value(v) for v in values])
    )
    _print_result(result)
    if not result.is_valid:
        sys.exit(1)


@cli.command(name="validate-schema")
@click.argument('values_path', type=click.Path(exists=True, path_type=Path))
@click.option('--instance', '-i', default=None, help='Wikibase instance id')
@click.pass_context
def validate_schema(ctx: click.Context, values_path: Path, instance: Optional[str]) -> None:
    """Validate a YAML/JSON file of {property id: [values]}."""
    instance = instance or get_settings().default_instance
    try:
        with open(values_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError("File must map property ids to lists of values")
        schema = {
            str(pid): values if isinstance(values, list) else [values]
            for pid, values in data.items()
        }
        service = _service(ctx)
    except Exception as e:
        stderr_console.print(f"[red]✗ Schema validation failed: {escape(str(e))}[/red]")
        raise click.Abort()

    result = asyncio.run(service.validate_schema(instance, schema))
    _print_result(result)
    if not result.is_valid:
        sys.exit(1)


@cli.command(name="inspect")
@click.argument('schema_id')
@click.option(
    '--dir', '-d',
    'schema_dir',
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help='Directory of persisted schemas'
)
def inspect(schema_id: str, schema_dir: Optional[Path]) -> None:
    """Summarize a persisted schema and its completeness."""
    gateway = FileSchemaGateway(schema_dir or get_settings().schema_dir)
    try:
        store: SchemaStore = load_schema(gateway, schema_id)
    except Exception as e:
        stderr_console.print(f"[red]✗ Failed to load schema: {escape(str(e))}[/red]")
        raise click.Abort()

    console.print(f"[bold]{store.name or schema_id}[/bold] ({store.wikibase or 'no instance'})")
    console.print(f"Item: {store.item_id or 'new item'}")
    console.print(f"Labels: {', '.join(sorted(store.labels)) or '-'}")
    console.print(f"Descriptions: {', '.join(sorted(store.descriptions)) or '-'}")
    console.print(f"Aliases: {', '.join(sorted(store.aliases)) or '-'}")

    table = Table(title="Statements")
    table.add_column("Property")
    table.add_column("Value")
    table.add_column("Rank")
    table.add_column("Qualifiers")
    table.add_column("References")
    for statement in store.statements:
        value = statement.value
        source = value.source.column_name if value.type == "column" else value.source
        table.add_row(
            statement.property.id,
            f"{value.type}: {source}",
            statement.rank.value,
            str(len(statement.qualifiers)),
            str(len(statement.references)),
        )
    console.print(table)

    result = check_completeness(store)
    if result.is_complete:
        console.print("[green]✓ Schema is complete[/green]")
    elif not result.required_field_highlights:
        console.print(f"[yellow]Missing: {', '.join(result.missing_required_fields)}[/yellow]")
    for highlight in result.required_field_highlights:
        console.print(f"[red]✗ {highlight.path}: {highlight.message}[/red]")


if __name__ == "__main__":
    cli()

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from rich import box
from rich.console import Console
from rich.table import Table

from fusion_model.domain import types
from fusion_model.domain.specs import RecordSpec


def _flag(value: bool) -> str:
    return "[green]yes[/green]" if value else "[red]no[/red]"


def _operations(spec: RecordSpec) -> str:
    enabled = [
        name
        for name, on in (
            ("to_json", spec.generate_to_json),
            ("from_json", spec.generate_from_json),
            ("copy_with", spec.generate_copy_with),
        )
        if on
    ]
    return ", ".join(enabled) if enabled else "none"


def build_spec_table(spec: RecordSpec) -> Table:
    """
    Build a rich table describing every field of a record spec.

    The caption lists the enabled operations and whether instances are immutable.
    """
    table = Table(
        title=f"Record {spec.type_name or '<unbound>'}",
        box=box.ROUNDED,
        caption=f"Operations: {_operations(spec)} │ Immutable: {'yes' if spec.immutable else 'no'}",
    )

    table.add_column("Attribute", style="cyan", no_wrap=True)
    table.add_column("JSON key", style="magenta")
    table.add_column("Type", style="blue")
    table.add_column("to_json", justify="center")
    table.add_column("from_json", justify="center")
    table.add_column("Default", style="yellow")

    for field in spec.fields:
        default = json.dumps(field.default, default=str) if field.has_default else "[dim]required[/dim]"
        if not field.has_default and not field.include_in_from_json:
            default = f"[dim]{types.zero_value(field.field_type)!r} (zero)[/dim]"
        table.add_row(
            field.attr,
            field.key,
            types.describe(field.field_type),
            _flag(field.include_in_to_json),
            _flag(field.include_in_from_json),
            default,
        )
    return table


def print_spec(spec: RecordSpec, console: Optional[Console] = None) -> None:
    """Render a record spec as a rich table."""
    console = console or Console()
    if not spec.fields:
        console.print(f"[yellow]Record {spec.type_name} declares no fields.[/yellow]")
        return
    console.print(build_spec_table(spec))


def print_document(document: Dict[str, Any], console: Optional[Console] = None) -> None:
    """Pretty-print a JSON document."""
    console = console or Console()
    console.print_json(json.dumps(document, default=str))


__all__ = ["build_spec_table", "print_spec", "print_document"]

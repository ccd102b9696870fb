from __future__ import annotations

import importlib
import json
import sys
from pathlib import Path

import typer

from fusion_model.config import get_settings
from fusion_model.domain.types import is_record_type
from fusion_model.errors import ModelError
from fusion_model.reporter import print_document, print_spec
from fusion_model.utils.logging import configure_logging, get_logger

app = typer.Typer(help="fusion-model CLI: inspect record specs and decode documents.")

log = get_logger(__name__)


def _load_record_type(target: str) -> type:
    """Import a record class from a `package.module:ClassName` reference."""
    module_name, _, class_name = target.partition(":")
    if not module_name or not class_name:
        raise typer.BadParameter(f"expected 'module:Class', got '{target}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"cannot import module '{module_name}': {exc}") from exc
    record_type = getattr(module, class_name, None)
    if not is_record_type(record_type):
        raise typer.BadParameter(f"'{target}' is not a Model subclass")
    return record_type


def _read_document(source: str) -> object:
    if source == "-":
        return json.load(sys.stdin)
    with Path(source).open("r", encoding="utf-8") as f:
        return json.load(f)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"env={settings.app_env} | log_level={settings.log_level} json_logs={settings.json_logs} | "
        f"type_key={settings.type_key} validate_defaults={settings.validate_defaults} "
        f"strict_keys={settings.strict_keys}"
    )


@app.command()
def describe(
    target: str = typer.Argument(..., help="Record class as 'package.module:ClassName'."),
) -> None:
    """
    Show how a record type's fields participate in serialization.
    """
    record_type = _load_record_type(target)
    print_spec(record_type.record_spec)


@app.command()
def decode(
    target: str = typer.Argument(..., help="Record class as 'package.module:ClassName'."),
    source: str = typer.Argument("-", help="JSON file to decode ('-' reads stdin)."),
) -> None:
    """
    Decode a JSON document into a record and print its to_json projection.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    record_type = _load_record_type(target)
    try:
        document = _read_document(source)
    except (OSError, json.JSONDecodeError) as exc:
        typer.echo(f"Cannot read document: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    try:
        record = record_type.from_json(document)
    except ModelError as exc:
        log.error("Decoding failed", extra={"model_type": exc.type_name, "path": exc.path})
        typer.echo(f"Decoding failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc
    print_document(record.to_json())


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()

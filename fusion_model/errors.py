"""
Exception taxonomy for fusion-model.

Every error raised by the declaration layer or the serialization engine derives
from `ModelError`, and additionally from the closest built-in exception so
callers can catch either. Errors carry the record type name and the path of the
offending field (e.g. `address.street`, `items[2].count`).
"""

from __future__ import annotations

from typing import Optional


class ModelError(Exception):
    """Base class for all record declaration and serialization errors."""

    def __init__(self, message: str, type_name: Optional[str] = None, path: Optional[str] = None):
        self.type_name = type_name
        self.path = path
        self.reason = message
        super().__init__(self._format(message))

    def _format(self, message: str) -> str:
        location = ".".join(part for part in (self.type_name, self.path) if part)
        return f"{location}: {message}" if location else message


class SchemaError(ModelError, ValueError):
    """Invalid record declaration, unbound spec or unresolvable type reference."""


class MissingRequiredFieldError(ModelError, LookupError):
    """A required field has no value in the document and no default."""

    def __init__(self, type_name: Optional[str], path: str):
        super().__init__("missing required field", type_name=type_name, path=path)


class TypeMismatchError(ModelError, TypeError):
    """A value's runtime shape does not match the declared field type."""

    def __init__(
        self,
        expected: str,
        actual: object,
        type_name: Optional[str] = None,
        path: Optional[str] = None,
    ):
        self.expected = expected
        self.actual = type(actual).__name__
        super().__init__(f"expected {expected}, got {self.actual}", type_name=type_name, path=path)


class UnknownFieldError(ModelError, TypeError):
    """A value was supplied for a field the record does not declare."""


class UnsupportedOperationError(ModelError, NotImplementedError):
    """The record spec disables the requested operation."""


class ImmutableRecordError(ModelError, AttributeError):
    """Attempted to mutate an immutable record."""


__all__ = [
    "ModelError",
    "SchemaError",
    "MissingRequiredFieldError",
    "TypeMismatchError",
    "UnknownFieldError",
    "UnsupportedOperationError",
    "ImmutableRecordError",
]

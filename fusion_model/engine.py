"""
Serialization engine for fusion-model.

Interprets RecordSpec declarations generically:

- `from_json(spec, document)` builds a record from a JSON-compatible mapping
- `to_json(record)` projects a record back to a mapping
- `copy_with(record, overrides)` returns a new record with some fields replaced

Usage:
    from fusion_model.engine import from_json, to_json

    user = from_json(User.record_spec, {"id": 1, "name": "Ada"})
    to_json(user)  # {"id": 1, "name": "Ada", "model_type": "User"}

Values are fully computed before a record is created, so a failing call never
leaves a partially populated record behind.
"""

from __future__ import annotations

import copy
import json
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Optional

from fusion_model.config import get_settings
from fusion_model.domain import types
from fusion_model.domain.specs import FieldSpec, RecordSpec
from fusion_model.errors import (
    MissingRequiredFieldError,
    SchemaError,
    TypeMismatchError,
    UnknownFieldError,
    UnsupportedOperationError,
)
from fusion_model.utils.logging import get_logger

log = get_logger(__name__)

Document = Dict[str, Any]


def _join(path: Optional[str], key: str) -> str:
    return f"{path}.{key}" if path else key


def coerce(
    field_type: Any,
    value: Any,
    path: Optional[str] = None,
    type_name: Optional[str] = None,
) -> Any:
    """
    Validate `value` against a declared field type and return the stored form.

    Accepts JSON-shaped input (mappings for records, member values for enums)
    as well as already-built record instances and enum members.

    Raises
    ------
    TypeMismatchError
        If the value's shape does not match `field_type`.
    """
    inner, optional = types.unwrap_optional(field_type)
    if value is None:
        if optional or types.is_any(inner):
            return None
        raise TypeMismatchError(types.describe(field_type), value, type_name, path)

    inner = types.resolve(inner)
    if types.is_any(inner):
        return _json_value(value, path, type_name)
    if inner is bool:
        if isinstance(value, bool):
            return value
    elif inner is int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    elif inner is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
    elif inner is str:
        if isinstance(value, str):
            return value
    elif types.is_enum_type(inner):
        if isinstance(value, inner):
            return value
        try:
            return inner(value)
        except ValueError:
            raise TypeMismatchError(types.describe(inner), value, type_name, path) from None
    elif types.is_record_type(inner):
        if isinstance(value, inner):
            return value
        if isinstance(value, Mapping):
            return _from_document(inner.record_spec, value, path)
    elif types.is_list_type(inner):
        if isinstance(value, (list, tuple)):
            element_type = types.item_type(inner)
            return [
                coerce(element_type, item, f"{path or ''}[{index}]", type_name)
                for index, item in enumerate(value)
            ]
    elif types.is_dict_type(inner):
        if isinstance(value, Mapping):
            element_type = types.value_type(inner)
            result: Dict[str, Any] = {}
            for key, item in value.items():
                if not isinstance(key, str):
                    raise TypeMismatchError("str key", key, type_name, _join(path, str(key)))
                result[key] = coerce(element_type, item, _join(path, key), type_name)
            return result
    else:
        raise SchemaError(f"unsupported field type {types.describe(inner)}", type_name, path)

    raise TypeMismatchError(types.describe(field_type), value, type_name, path)


def _json_value(value: Any, path: Optional[str], type_name: Optional[str]) -> Any:
    """Copy a value held by an `Any` field, rejecting anything that is not JSON-shaped."""
    if value is None or isinstance(value, (bool, int, float, str, Enum)):
        return value
    if types.is_record_type(type(value)):
        return value
    if isinstance(value, (list, tuple)):
        return [
            _json_value(item, f"{path or ''}[{index}]", type_name)
            for index, item in enumerate(value)
        ]
    if isinstance(value, Mapping):
        result: Dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeMismatchError("str key", key, type_name, _join(path, str(key)))
            result[key] = _json_value(item, _join(path, key), type_name)
        return result
    raise TypeMismatchError("JSON value", value, type_name, path)


def freeze(value: Any) -> Any:
    """
    Read-only form of a stored value for immutable records.

    Lists become tuples, mappings become read-only proxies over fresh dicts and
    mutable nested records are deep-copied.
    """
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if types.is_record_type(type(value)) and not value.record_spec.immutable:
        return copy.deepcopy(value)
    return value


def _fallback(spec: RecordSpec, field: FieldSpec, path: str) -> Any:
    """Value for a field that received nothing: default, else zero value."""
    if field.has_default:
        return coerce(field.field_type, copy.deepcopy(field.default), path, spec.type_name)
    return types.zero_value(field.field_type)


def _require_bound(spec: RecordSpec) -> type:
    if spec.record_type is None:
        raise SchemaError("record spec is not bound to a record type", spec.type_name)
    return spec.record_type


def _from_document(spec: RecordSpec, document: Any, path: Optional[str] = None) -> Any:
    record_type = _require_bound(spec)
    if not spec.generate_from_json:
        raise UnsupportedOperationError("from_json is disabled for this record", spec.type_name, path)
    if not isinstance(document, Mapping):
        raise TypeMismatchError("document", document, spec.type_name, path)

    settings = get_settings()
    values: Dict[str, Any] = {}
    for field in spec.fields:
        field_path = _join(path, field.key)
        if not field.include_in_from_json:
            values[field.attr] = _fallback(spec, field, field_path)
            continue
        raw = document.get(field.key)
        if raw is None:
            if field.has_default:
                values[field.attr] = _fallback(spec, field, field_path)
            else:
                raise MissingRequiredFieldError(spec.type_name, field_path)
            continue
        values[field.attr] = coerce(field.field_type, raw, field_path, spec.type_name)

    known = {f.key for f in spec.fields} | {settings.type_key}
    unknown = sorted(str(key) for key in document if key not in known)
    if unknown:
        if settings.strict_keys:
            raise UnknownFieldError(f"unexpected keys: {unknown}", spec.type_name, path)
        log.debug(
            "Ignoring unknown document keys",
            extra={"model_type": spec.type_name, "keys": unknown},
        )

    log.debug("Decoded record", extra={"model_type": spec.type_name, "fields": len(values)})
    return record_type._construct(values)


def from_json(spec: RecordSpec, document: Mapping[str, Any]) -> Any:
    """
    Build a record from a JSON-compatible mapping.

    Parameters
    ----------
    spec : RecordSpec
        A spec bound to its record class (e.g. `User.record_spec`).
    document : Mapping[str, Any]
        Parsed JSON object.

    Raises
    ------
    MissingRequiredFieldError
        A field read from the document has no value and no default.
    TypeMismatchError
        A document value does not match its declared type.
    UnsupportedOperationError
        The spec disables from_json.
    """
    return _from_document(spec, document)


def build_values(spec: RecordSpec, values: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Validate constructor keyword values against `spec`, filling in the rest.

    Missing fields take their default, then the zero value when the field is
    not read from documents; otherwise they are required.
    """
    unknown = sorted(set(values) - set(spec.attrs))
    if unknown:
        raise UnknownFieldError(f"unexpected fields: {unknown}", spec.type_name)

    result: Dict[str, Any] = {}
    for field in spec.fields:
        if field.attr in values:
            result[field.attr] = coerce(field.field_type, values[field.attr], field.attr, spec.type_name)
        elif field.has_default or not field.include_in_from_json:
            result[field.attr] = _fallback(spec, field, field.attr)
        else:
            raise MissingRequiredFieldError(spec.type_name, field.attr)
    return result


def encode(value: Any) -> Any:
    """Project a stored value to its JSON-compatible form."""
    if types.is_record_type(type(value)):
        return to_json(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [encode(item) for item in value]
    if isinstance(value, Mapping):
        return {key: encode(item) for key, item in value.items()}
    return value


def to_json(record: Any) -> Document:
    """
    Project a record to a JSON-compatible mapping.

    Fields excluded from to_json are omitted; the reserved type entry is
    always appended last. Key order follows field declaration order.
    """
    spec: RecordSpec = record.record_spec
    document: Document = {}
    if spec.generate_to_json:
        for field in spec.fields:
            if field.include_in_to_json:
                document[field.key] = encode(getattr(record, field.attr))
    document[get_settings().type_key] = spec.type_name
    return document


def copy_with(record: Any, overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> Any:
    """
    Return a new record equal to `record` except for the overridden fields.

    Overrides are keyed by attribute name; `None` is stored as-is and is only
    accepted by `Optional` and `Any` fields. Mutable records get deep copies of
    their containers. The input record is never modified.
    """
    spec: RecordSpec = record.record_spec
    if not spec.generate_copy_with:
        raise UnsupportedOperationError("copy_with is disabled for this record", spec.type_name)

    changes: Dict[str, Any] = dict(overrides or {})
    changes.update(kwargs)
    unknown = sorted(set(changes) - set(spec.attrs))
    if unknown:
        raise UnknownFieldError(f"unexpected fields: {unknown}", spec.type_name)

    values = {attr: getattr(record, attr) for attr in spec.attrs}
    if not spec.immutable:
        values = copy.deepcopy(values)
    for attr, value in changes.items():
        values[attr] = coerce(spec.field(attr).field_type, value, attr, spec.type_name)

    log.debug(
        "Copied record",
        extra={"model_type": spec.type_name, "overrides": sorted(changes)},
    )
    return type(record)._construct(values)


def canonical_json(document: Any) -> str:
    """Canonical JSON text of a document: sorted keys, compact separators."""
    return json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def document_equals(left: Any, right: Any) -> bool:
    """Deep, key-order-independent equality of two documents."""
    return canonical_json(left) == canonical_json(right)


def render(record: Any) -> str:
    """Render `(key: value, ...)` over the entries of `to_json(record)`."""
    entries: List[str] = [f"{key}: {value}" for key, value in to_json(record).items()]
    return f"({', '.join(entries)})"


__all__ = [
    "Document",
    "coerce",
    "encode",
    "freeze",
    "from_json",
    "to_json",
    "copy_with",
    "build_values",
    "canonical_json",
    "document_equals",
    "render",
]

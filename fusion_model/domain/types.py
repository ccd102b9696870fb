"""
Declared-type introspection for record fields.

A field's declared type is a plain Python annotation: scalars (`bool`, `int`,
`float`, `str`), Enum subclasses, record types, `list[T]`/`tuple[T, ...]`,
`dict[str, T]`, `Optional[T]` and forward references to record types by name.
This module answers the questions the engine asks about those annotations
(which shape, which zero value, how to describe it) and owns the registry used
to resolve forward references.
"""

from __future__ import annotations

import enum
import sys
from typing import Any, Dict, ForwardRef, Optional, Tuple, Union, get_args, get_origin

from fusion_model.errors import SchemaError

if sys.version_info >= (3, 10):
    from types import UnionType

    _UNION_ORIGINS: Tuple[Any, ...] = (Union, UnionType)
else:  # pragma: no cover - Python < 3.10
    _UNION_ORIGINS = (Union,)

SCALAR_TYPES: Tuple[type, ...] = (bool, int, float, str)

_SCALAR_ZEROS: Dict[type, Any] = {bool: False, int: 0, float: 0.0, str: ""}

_RECORD_TYPES: Dict[str, type] = {}


class _Missing:
    """Sentinel for "no default declared"; survives pydantic's default copying."""

    _instance: Optional["_Missing"] = None

    def __new__(cls) -> "_Missing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __copy__(self) -> "_Missing":
        return self

    def __deepcopy__(self, memo: Dict[int, Any]) -> "_Missing":
        return self

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def register_record_type(cls: type, type_name: str) -> None:
    """Register a record class so forward references to `type_name` resolve."""
    _RECORD_TYPES[type_name] = cls


def lookup_record_type(type_name: str) -> type:
    try:
        return _RECORD_TYPES[type_name]
    except KeyError:
        raise SchemaError(f"unknown record type '{type_name}'") from None


def is_record_type(tp: Any) -> bool:
    """True for classes carrying a bound `record_spec` (i.e. Model subclasses)."""
    return isinstance(tp, type) and getattr(tp, "record_spec", None) is not None


def is_forward_ref(tp: Any) -> bool:
    return isinstance(tp, (str, ForwardRef))


def resolve(tp: Any) -> Any:
    """Resolve a forward reference (string or ForwardRef) to its record class."""
    if isinstance(tp, ForwardRef):
        return lookup_record_type(tp.__forward_arg__)
    if isinstance(tp, str):
        return lookup_record_type(tp)
    return tp


def unwrap_optional(tp: Any) -> Tuple[Any, bool]:
    """
    Split `Optional[T]` into `(T, True)`; any other annotation into `(tp, False)`.

    Unions of several non-None members are not supported.
    """
    if get_origin(tp) in _UNION_ORIGINS:
        members = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(members) != 1:
            raise SchemaError(f"unsupported union type {describe(tp)}")
        return members[0], len(members) != len(get_args(tp))
    return tp, False


def is_any(tp: Any) -> bool:
    return tp is Any or tp is object


def is_list_type(tp: Any) -> bool:
    return tp in (list, tuple) or get_origin(tp) in (list, tuple)


def is_dict_type(tp: Any) -> bool:
    return tp is dict or get_origin(tp) is dict


def item_type(tp: Any) -> Any:
    """Element type of a list/tuple annotation (`Any` when unparameterized)."""
    args = [arg for arg in get_args(tp) if arg is not Ellipsis]
    return args[0] if args else Any


def value_type(tp: Any) -> Any:
    """Value type of a dict annotation (`Any` when unparameterized)."""
    args = get_args(tp)
    if args and args[0] not in (str, Any):
        raise SchemaError(f"dict keys must be str, got {describe(args[0])}")
    return args[1] if len(args) == 2 else Any


def is_enum_type(tp: Any) -> bool:
    return isinstance(tp, type) and issubclass(tp, enum.Enum)


def check_declared_type(tp: Any) -> None:
    """Raise SchemaError if `tp` is not a supported field annotation."""
    inner, _ = unwrap_optional(tp)
    if is_enum_type(inner) and not len(inner):
        raise SchemaError(f"enum {describe(inner)} has no members")
    if is_any(inner) or is_forward_ref(inner) or is_enum_type(inner) or is_record_type(inner):
        return
    if inner in SCALAR_TYPES:
        return
    if is_list_type(inner):
        check_declared_type(item_type(inner))
        return
    if is_dict_type(inner):
        check_declared_type(value_type(inner))
        return
    raise SchemaError(f"unsupported field type {describe(tp)}")


def zero_value(tp: Any) -> Any:
    """Type-specific zero value used when a field has neither value nor default."""
    inner, optional = unwrap_optional(tp)
    if optional or is_any(inner) or is_forward_ref(inner) or is_record_type(inner):
        return None
    if inner in _SCALAR_ZEROS:
        return _SCALAR_ZEROS[inner]
    if is_list_type(inner):
        return []
    if is_dict_type(inner):
        return {}
    if is_enum_type(inner):
        if not len(inner):
            raise SchemaError(f"enum {describe(inner)} has no members")
        return next(iter(inner))
    return None


def describe(tp: Any) -> str:
    """Short human-readable name of an annotation, used in errors and reports."""
    if tp is Any:
        return "Any"
    if isinstance(tp, ForwardRef):
        return tp.__forward_arg__
    if isinstance(tp, str):
        return tp
    origin = get_origin(tp)
    if origin in _UNION_ORIGINS:
        members = [arg for arg in get_args(tp) if arg is not type(None)]
        if len(members) == 1:
            return f"Optional[{describe(members[0])}]"
        return " | ".join(describe(arg) for arg in get_args(tp))
    if origin is not None:
        args = ", ".join("..." if arg is Ellipsis else describe(arg) for arg in get_args(tp))
        return f"{getattr(origin, '__name__', str(origin))}[{args}]"
    if isinstance(tp, type):
        return tp.__name__
    return str(tp)


__all__ = [
    "MISSING",
    "SCALAR_TYPES",
    "register_record_type",
    "lookup_record_type",
    "is_record_type",
    "is_forward_ref",
    "resolve",
    "unwrap_optional",
    "is_any",
    "is_list_type",
    "is_dict_type",
    "is_enum_type",
    "item_type",
    "value_type",
    "check_declared_type",
    "zero_value",
    "describe",
]

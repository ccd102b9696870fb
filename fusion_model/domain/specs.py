"""
Declarative record schema for fusion-model.

`FieldSpec` describes how one attribute of a record participates in
serialization (JSON key, inclusion flags, default); `RecordSpec` describes a
whole record type (which operations are available, whether instances are
immutable, the ordered fields). Both are frozen Pydantic models: they are
defined once when a record class is declared and never mutated afterwards.
"""
from __future__ import annotations

import keyword
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fusion_model.config import get_settings
from fusion_model.domain import types
from fusion_model.domain.types import MISSING
from fusion_model.errors import ModelError


class FieldSpec(BaseModel):
    """
    Serialization configuration of a single record attribute.
    """

    attr: str = Field(..., description="Python attribute name on the record.")
    name: Optional[str] = Field(None, description="JSON key override; defaults to `attr`.")
    field_type: Any = Field(Any, description="Declared type annotation of the value.")
    include_in_to_json: bool = Field(True, description="Emit the field in to_json.")
    include_in_from_json: bool = Field(True, description="Populate the field from documents.")
    default: Any = Field(MISSING, description="Value used when the document has none.")

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    @field_validator("attr")
    @classmethod
    def _check_attr(cls, value: str) -> str:
        if not value.isidentifier() or keyword.iskeyword(value) or value.startswith("_"):
            raise ValueError(f"'{value}' is not a valid public attribute name")
        return value

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value:
            raise ValueError("JSON key override must not be empty")
        return value

    @model_validator(mode="after")
    def _check_type_and_default(self) -> "FieldSpec":
        try:
            types.check_declared_type(self.field_type)
            if self.has_default and get_settings().validate_defaults:
                _validate_default(self)
        except ModelError as exc:
            raise ValueError(f"field '{self.attr}': {exc}") from exc
        return self

    @property
    def key(self) -> str:
        """JSON key used for this field."""
        return self.name or self.attr

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING


def _validate_default(spec: FieldSpec) -> None:
    inner, _ = types.unwrap_optional(spec.field_type)
    if spec.default is not None and types.is_forward_ref(inner):
        # Forward references are checked at use time.
        return
    from fusion_model import engine

    engine.coerce(spec.field_type, spec.default, path=spec.attr)


class RecordSpec(BaseModel):
    """
    Serialization configuration of a record type.

    `record_type` is filled in by `bind` when a Model subclass is declared.
    """

    type_name: Optional[str] = Field(None, description="Declared type name; defaults to the class name.")
    immutable: bool = Field(True, description="Whether instances reject attribute assignment.")
    generate_to_json: bool = Field(True, description="Whether to_json emits the fields.")
    generate_from_json: bool = Field(True, description="Whether from_json is available.")
    generate_copy_with: bool = Field(True, description="Whether copy_with is available.")
    fields: Tuple[FieldSpec, ...] = Field((), description="Ordered field declarations.")
    record_type: Optional[Type[Any]] = Field(None, exclude=True, repr=False)

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="after")
    def _check_fields(self) -> "RecordSpec":
        attrs = [f.attr for f in self.fields]
        keys = [f.key for f in self.fields]
        duplicate_attrs = sorted({a for a in attrs if attrs.count(a) > 1})
        if duplicate_attrs:
            raise ValueError(f"duplicate field attributes: {duplicate_attrs}")
        duplicate_keys = sorted({k for k in keys if keys.count(k) > 1})
        if duplicate_keys:
            raise ValueError(f"duplicate JSON keys: {duplicate_keys}")
        type_key = get_settings().type_key
        if type_key in keys:
            raise ValueError(f"JSON key '{type_key}' is reserved for the record type name")
        return self

    @property
    def attrs(self) -> Tuple[str, ...]:
        return tuple(f.attr for f in self.fields)

    @property
    def is_bound(self) -> bool:
        return self.record_type is not None

    def field(self, attr: str) -> Optional[FieldSpec]:
        """Return the FieldSpec declared for `attr`, if any."""
        return self._by_attr().get(attr)

    def _by_attr(self) -> Dict[str, FieldSpec]:
        return {f.attr: f for f in self.fields}

    def bind(self, record_type: type) -> "RecordSpec":
        """Return a copy of this spec bound to `record_type`."""
        return self.model_copy(
            update={
                "record_type": record_type,
                "type_name": self.type_name or record_type.__name__,
            }
        )


def variable(
    attr: str,
    field_type: Any = Any,
    *,
    name: Optional[str] = None,
    to_json: bool = True,
    from_json: bool = True,
    defaults_to: Any = MISSING,
) -> FieldSpec:
    """
    Shorthand for declaring a FieldSpec.

    Example
    -------
        variable("user_id", int, name="id")
        variable("tags", list[str], defaults_to=[])
    """
    return FieldSpec(
        attr=attr,
        name=name,
        field_type=field_type,
        include_in_to_json=to_json,
        include_in_from_json=from_json,
        default=defaults_to,
    )


def model_spec(
    *fields: FieldSpec,
    type_name: Optional[str] = None,
    immutable: bool = True,
    to_json: bool = True,
    from_json: bool = True,
    copy_with: bool = True,
) -> RecordSpec:
    """Shorthand for declaring a RecordSpec from positional FieldSpecs."""
    return RecordSpec(
        type_name=type_name,
        immutable=immutable,
        generate_to_json=to_json,
        generate_from_json=from_json,
        generate_copy_with=copy_with,
        fields=fields,
    )


__all__ = ["FieldSpec", "RecordSpec", "variable", "model_spec"]

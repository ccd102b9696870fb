"""
Root record type for fusion-model.

Subclass `Model` and declare a `record_spec`; construction, JSON conversion,
`copy_with`, equality, hashing and string rendering are derived from it:

    class Address(Model):
        record_spec = RecordSpec(
            fields=[
                FieldSpec(attr="street", field_type=str),
                FieldSpec(attr="zip_code", name="zip", field_type=str, default=""),
            ]
        )

    address = Address.from_json({"street": "Main St"})
    address.to_json()  # {"street": "Main St", "zip": "", "model_type": "Address"}

Two records are equal when they share a class and their `to_json` projections
are equal.
"""

from __future__ import annotations

import copy
import json
from typing import Any, ClassVar, Dict, Mapping, Optional, Type, TypeVar

from fusion_model import engine
from fusion_model.domain.specs import RecordSpec
from fusion_model.domain.types import register_record_type
from fusion_model.errors import ImmutableRecordError, UnknownFieldError

TModel = TypeVar("TModel", bound="Model")


class Model:
    """
    Base class for serializable records.

    Instances store one attribute per declared field. Records whose spec is
    immutable (the default) reject assignment and deletion.
    """

    record_spec: ClassVar[RecordSpec]

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        declared = cls.__dict__.get("record_spec")
        if declared is None:
            # Inherit the parent's fields under this class's own type name.
            declared = cls.record_spec.model_copy(update={"type_name": None})
        cls.record_spec = declared.bind(cls)
        register_record_type(cls, cls.record_spec.type_name)

    def __init__(self, **values: Any) -> None:
        self._assign(engine.build_values(self.record_spec, values))

    @classmethod
    def _construct(cls: Type[TModel], values: Dict[str, Any]) -> TModel:
        """Create an instance from already validated values."""
        instance = cls.__new__(cls)
        instance._assign(values)
        return instance

    def _assign(self, values: Dict[str, Any]) -> None:
        # Immutable records hold tuples and read-only mappings, never shared containers.
        immutable = self.record_spec.immutable
        for attr, value in values.items():
            object.__setattr__(self, attr, engine.freeze(value) if immutable else value)

    # Serialization

    @classmethod
    def from_json(cls: Type[TModel], document: Mapping[str, Any]) -> TModel:
        """Build a record of this class from a parsed JSON object."""
        return engine.from_json(cls.record_spec, document)

    @classmethod
    def from_json_string(cls: Type[TModel], raw: str) -> TModel:
        return cls.from_json(json.loads(raw))

    def to_json(self) -> Dict[str, Any]:
        """Project this record to a JSON-compatible mapping."""
        return engine.to_json(self)

    def to_json_string(self, indent: Optional[int] = None) -> str:
        return json.dumps(self.to_json(), indent=indent)

    def copy_with(self: TModel, overrides: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> TModel:
        """Return a copy of this record with the given fields replaced."""
        return engine.copy_with(self, overrides, **kwargs)

    # Mutation guards

    def __setattr__(self, name: str, value: Any) -> None:
        spec = self.record_spec
        if spec.immutable:
            raise ImmutableRecordError(f"cannot assign to field '{name}'", spec.type_name)
        field = spec.field(name)
        if field is None:
            raise UnknownFieldError(f"unknown field '{name}'", spec.type_name)
        object.__setattr__(self, name, engine.coerce(field.field_type, value, name, spec.type_name))

    def __delattr__(self, name: str) -> None:
        raise ImmutableRecordError(f"cannot delete field '{name}'", self.record_spec.type_name)

    def __copy__(self: TModel) -> TModel:
        if self.record_spec.immutable:
            return self
        return self._construct({attr: getattr(self, attr) for attr in self.record_spec.attrs})

    def __deepcopy__(self: TModel, memo: Dict[int, Any]) -> TModel:
        if self.record_spec.immutable:
            return self
        return self._construct(
            {attr: copy.deepcopy(getattr(self, attr), memo) for attr in self.record_spec.attrs}
        )

    # Structural equality

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Model):
            return NotImplemented
        if type(self) is not type(other):
            return False
        return engine.document_equals(self.to_json(), other.to_json())

    def __hash__(self) -> int:
        if not self.record_spec.immutable:
            raise TypeError(f"unhashable mutable record: '{self.record_spec.type_name}'")
        return hash(engine.canonical_json(self.to_json()))

    def __str__(self) -> str:
        return engine.render(self)

    def __repr__(self) -> str:
        return f"{self.record_spec.type_name}{engine.render(self)}"


Model.record_spec = RecordSpec().bind(Model)
register_record_type(Model, Model.record_spec.type_name)

__all__ = ["Model"]

"""
Domain package for fusion-model.

Exports the record declaration layer: field/record specs and the declared-type
helpers. Keep this package focused on data definitions and validation concerns.
"""

from fusion_model.domain.types import MISSING
from fusion_model.domain.specs import FieldSpec, RecordSpec, model_spec, variable

__all__ = [
    "MISSING",
    "FieldSpec",
    "RecordSpec",
    "model_spec",
    "variable",
]

"""
fusion-model - declarative JSON models for application code.

This package provides a small serialization contract for record types:

- Field and record declarations (`FieldSpec`, `RecordSpec`)
- A generic engine for `from_json`, `to_json` and `copy_with`
- A `Model` base class with structural equality derived from its JSON form
- Numeric helpers for clamping values and formatting byte sizes

Declarations are plain schema objects interpreted at runtime; no code
generation step is involved.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from fusion_model.config import Settings, get_settings
from fusion_model.domain import MISSING, FieldSpec, RecordSpec, model_spec, variable
from fusion_model.engine import (
    canonical_json,
    copy_with,
    document_equals,
    from_json,
    render,
    to_json,
)
from fusion_model.errors import (
    ImmutableRecordError,
    MissingRequiredFieldError,
    ModelError,
    SchemaError,
    TypeMismatchError,
    UnknownFieldError,
    UnsupportedOperationError,
)
from fusion_model.model import Model
from fusion_model.utils.logging import configure_logging, get_logger
from fusion_model.utils.numbers import clamp_high, clamp_low, clamp_range, readable_bytes

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Declarations
    "MISSING",
    "FieldSpec",
    "RecordSpec",
    "model_spec",
    "variable",
    # Engine
    "from_json",
    "to_json",
    "copy_with",
    "canonical_json",
    "document_equals",
    "render",
    # Records
    "Model",
    # Errors
    "ModelError",
    "SchemaError",
    "MissingRequiredFieldError",
    "TypeMismatchError",
    "UnknownFieldError",
    "UnsupportedOperationError",
    "ImmutableRecordError",
    # Logging
    "configure_logging",
    "get_logger",
    # Numbers
    "clamp_low",
    "clamp_high",
    "clamp_range",
    "readable_bytes",
]

"""
Adapter interfaces binding Venice AI endpoints to workflow tool nodes.

Concrete tool adapters live in :mod:`.tools`; the HTTP client they share lives
in :mod:`.api`.
"""

from .base import (
    AdapterError,
    BinaryDataMissingError,
    ErrorKind,
    ParameterValidationError,
    ToolAdapter,
    ToolExecutionError,
    VerificationResult,
)
from .tools import build_default_registry

__all__ = [
    "AdapterError",
    "BinaryDataMissingError",
    "ErrorKind",
    "ParameterValidationError",
    "ToolAdapter",
    "ToolExecutionError",
    "VerificationResult",
    "build_default_registry",
]

"""
Venice AI endpoints exposed as workflow tool adapters.

Each adapter in :mod:`venice_ai_tools.adapters.tools` pairs a static
descriptor with an execution routine that maps input items to result items.
Use :func:`build_default_registry` to obtain all of them at once.
"""

from .adapters import AdapterError, ToolExecutionError, build_default_registry
from .config import DEFAULT_BASE_URL, CredentialError, VeniceCredential, load_secrets
from .core import ExecutionContext, ExecutionOptions, Item, ItemParameters, ResultItem, StaticParameters

__all__ = [
    "AdapterError",
    "CredentialError",
    "DEFAULT_BASE_URL",
    "ExecutionContext",
    "ExecutionOptions",
    "Item",
    "ItemParameters",
    "ResultItem",
    "StaticParameters",
    "ToolExecutionError",
    "VeniceCredential",
    "build_default_registry",
    "load_secrets",
]

"""
Core infrastructure shared by the Venice tool adapters.

This package stays free of HTTP concerns: it holds item and descriptor types,
parameter resolution, the execution context, logging helpers, and the tool
registry.
"""

from .context import ExecutionContext, ExecutionOptions
from .items import BinaryAttachment, Item, ItemOutcome, ResultItem
from .logging import bind_tags, configure_logging, get_logger, log_progress
from .parameters import ItemParameters, ParameterSource, StaticParameters, render_template
from .registry import ToolRegistry
from .schema import CredentialRequirement, ParameterOption, ParameterSpec, ParameterType, SchemaError, ToolDescriptor

__all__ = [
    "BinaryAttachment",
    "CredentialRequirement",
    "ExecutionContext",
    "ExecutionOptions",
    "Item",
    "ItemOutcome",
    "ItemParameters",
    "ParameterOption",
    "ParameterSource",
    "ParameterSpec",
    "ParameterType",
    "ResultItem",
    "SchemaError",
    "StaticParameters",
    "ToolDescriptor",
    "ToolRegistry",
    "bind_tags",
    "configure_logging",
    "get_logger",
    "log_progress",
    "render_template",
]

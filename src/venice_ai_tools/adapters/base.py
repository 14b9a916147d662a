"""
Base protocols and errors for Venice tool adapters.

Adapters are intentionally narrow in scope: each one binds a single provider
endpoint, declares its schema, and turns a list of input items into the same
number of result items. Higher level concerns (which adapters are available,
how credentials are resolved) live in the registry and CLI layers.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, List, Mapping, Optional, Protocol, Sequence

if TYPE_CHECKING:
    from ..core.context import ExecutionContext
    from ..core.items import Item, ResultItem
    from ..core.schema import ToolDescriptor


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    TRANSPORT = "transport"
    UPSTREAM = "upstream"
    BINARY_MISSING = "binary_missing"


class AdapterError(RuntimeError):
    """Raised when an adapter encounters a non-recoverable error."""

    kind: ErrorKind = ErrorKind.UPSTREAM


class ParameterValidationError(AdapterError):
    """A required parameter is missing for an item; raised before any network call."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, *, item_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.item_index = item_index


class BinaryDataMissingError(ParameterValidationError):
    """The item carries no attachment under the configured binary property."""

    kind = ErrorKind.BINARY_MISSING


class ToolExecutionError(AdapterError):
    """
    Run-level failure raised when an item fails and the run does not continue on failure.

    The original exception is chained as ``__cause__``.
    """

    def __init__(self, tool_id: str, item_index: int, error: Exception) -> None:
        super().__init__(f"{tool_id} failed on item {item_index}: {error}")
        self.tool_id = tool_id
        self.item_index = item_index
        self.kind = getattr(error, "kind", ErrorKind.UPSTREAM)
        self.__cause__ = error

    @property
    def description(self) -> str:
        return str(self.__cause__) if self.__cause__ else str(self)


@dataclass(slots=True)
class VerificationResult:
    """
    Structured response returned by connectivity checks.

    Attributes
    ----------
    success:
        Indicates whether the verification succeeded.
    message:
        Human-readable summary.
    details:
        Optional structured metadata such as model counts.
    """

    success: bool
    message: str
    details: Optional[Mapping[str, object]] = None


class ToolAdapter(Protocol):
    """Protocol implemented by all tool adapters."""

    def describe(self) -> "ToolDescriptor":
        """Return the static schema of the tool."""

    def execute(self, items: Sequence["Item"], context: "ExecutionContext") -> List[List["ResultItem"]]:
        """Process ``items`` in order and return a single output group."""

    @property
    def tool_id(self) -> str:
        """Identifier matching the descriptor."""

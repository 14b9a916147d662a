"""
Tool registry.

The registry is the catalogue a host consults to discover which tools exist,
render their schemas, and obtain an adapter instance to execute. Entries are
keyed by descriptor ``tool_id``; descriptors are validated on registration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List, MutableMapping, Optional

if TYPE_CHECKING:
    from ..adapters.base import ToolAdapter
    from .schema import ToolDescriptor


class ToolRegistry:
    """In-memory catalogue of tool adapters."""

    def __init__(self) -> None:
        self._entries: MutableMapping[str, "ToolAdapter"] = {}

    def __contains__(self, tool_id: object) -> bool:
        return tool_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def register(self, adapter: "ToolAdapter") -> None:
        """Register or overwrite an adapter in the catalogue."""

        descriptor = adapter.describe()
        descriptor.validate()
        self._entries[descriptor.tool_id] = adapter

    def unregister(self, tool_id: str) -> None:
        self._entries.pop(tool_id, None)

    def get(self, tool_id: str) -> Optional["ToolAdapter"]:
        return self._entries.get(tool_id)

    def require(self, tool_id: str) -> "ToolAdapter":
        """Retrieve an adapter or raise an informative error."""

        adapter = self.get(tool_id)
        if adapter is None:
            known = ", ".join(sorted(self._entries)) or "none"
            raise KeyError(f"Tool '{tool_id}' is not registered. Known tools: {known}.")
        return adapter

    def list(self) -> List["ToolAdapter"]:
        return list(self._entries.values())

    def iter_descriptors(self) -> Iterator["ToolDescriptor"]:
        for adapter in self._entries.values():
            yield adapter.describe()

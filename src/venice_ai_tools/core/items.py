"""
Pipeline item primitives.

An :class:`Item` is one unit of workflow data: a JSON payload plus optional
named binary attachments. Adapters turn every input item into exactly one
:class:`ResultItem` tagged with the index of the item it came from.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePath
from typing import Any, Dict, Mapping, Optional


@dataclass(slots=True, frozen=True)
class BinaryAttachment:
    """Raw bytes with the file name and MIME type the host tracks alongside them."""

    data: bytes
    file_name: Optional[str] = None
    mime_type: Optional[str] = None

    @property
    def file_extension(self) -> Optional[str]:
        if not self.file_name:
            return None
        suffix = PurePath(self.file_name).suffix
        return suffix[1:].lower() if suffix else None

    @property
    def file_size(self) -> int:
        return len(self.data)

    def describe(self) -> Dict[str, Any]:
        """Metadata view used when results are rendered as JSON."""

        return {
            "fileName": self.file_name,
            "mimeType": self.mime_type,
            "fileExtension": self.file_extension,
            "fileSize": self.file_size,
        }


@dataclass(slots=True)
class Item:
    json: Mapping[str, Any] = field(default_factory=dict)
    binary: Mapping[str, BinaryAttachment] = field(default_factory=dict)

    def get_binary(self, property_name: str) -> Optional[BinaryAttachment]:
        return self.binary.get(property_name) if self.binary else None


@dataclass(slots=True)
class ResultItem:
    """
    One output record.

    Attributes
    ----------
    json:
        Endpoint-specific payload, or ``{"error": message}`` for a recovered failure.
    binary:
        Attachments produced by binary endpoints (upscale, speech).
    paired_item:
        Index of the input item this result corresponds to.
    """

    json: Dict[str, Any]
    paired_item: int
    binary: Dict[str, BinaryAttachment] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return set(self.json) == {"error"}

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"json": dict(self.json), "pairedItem": {"item": self.paired_item}}
        if self.binary:
            payload["binary"] = {name: attachment.describe() for name, attachment in self.binary.items()}
        return payload


@dataclass(slots=True, frozen=True)
class ItemOutcome:
    """Per-item result before the run-level failure policy is applied."""

    index: int
    result: Optional[ResultItem] = None
    error: Optional[Exception] = None

    @classmethod
    def ok(cls, index: int, result: ResultItem) -> "ItemOutcome":
        return cls(index=index, result=result)

    @classmethod
    def err(cls, index: int, error: Exception) -> "ItemOutcome":
        return cls(index=index, error=error)

    @property
    def failed(self) -> bool:
        return self.error is not None

"""
Helpers turning CLI arguments and input files into items and parameters.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Collection, Dict, List, Mapping, MutableMapping, Optional, Sequence

import yaml

from ..core.items import BinaryAttachment, Item


class InputError(ValueError):
    """Raised when CLI assignments or item files cannot be interpreted."""


def parse_value(raw: str) -> Any:
    """Interpret ``raw`` as a YAML scalar so ``0.2`` and ``true`` keep their types."""

    if raw == "":
        return ""
    try:
        value = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    # YAML 1.1 reads on/off/yes/no as booleans; only true/false do here
    if isinstance(value, bool):
        return value if raw.strip().lower() in ("true", "false") else raw
    # anything that is not a plain scalar (mappings, dates) stays text
    if value is None or isinstance(value, (int, float, str)):
        return value
    return raw


def parse_assignments(values: Optional[Sequence[str]], *, text_keys: Collection[str] = ()) -> Dict[str, Any]:
    """
    Parse ``key=value`` assignments into a parameter mapping.

    Dotted keys build nested collections, e.g. ``options.temperature=0.2``.
    Keys listed in ``text_keys`` keep the raw text instead of a YAML scalar.
    """

    parameters: Dict[str, Any] = {}
    for entry in values or ():
        if "=" not in entry:
            raise InputError(f"Parameter '{entry}' must use key=value format.")
        key, raw = entry.split("=", 1)
        path = [segment.strip() for segment in key.split(".")]
        if not all(path):
            raise InputError(f"Parameter '{entry}' has an empty key segment.")
        target: MutableMapping[str, Any] = parameters
        for segment in path[:-1]:
            nested = target.setdefault(segment, {})
            if not isinstance(nested, MutableMapping):
                raise InputError(f"Parameter '{key}' conflicts with a scalar value for '{segment}'.")
            target = nested
        target[path[-1]] = raw if ".".join(path) in text_keys else parse_value(raw)
    return parameters


def _load_attachment(entry: Any, *, base_dir: Path) -> BinaryAttachment:
    if isinstance(entry, str):
        entry = {"path": entry}
    if not isinstance(entry, Mapping) or "path" not in entry:
        raise InputError("Binary attachments must be a path or a mapping with a 'path' key.")
    path = Path(str(entry["path"])).expanduser()
    if not path.is_absolute():
        path = base_dir / path
    if not path.is_file():
        raise InputError(f"Binary attachment '{path}' does not exist.")
    return BinaryAttachment(
        data=path.read_bytes(),
        file_name=str(entry.get("file_name") or path.name),
        mime_type=entry.get("mime_type"),
    )


def _item_from_entry(entry: Any, *, base_dir: Path) -> Item:
    if not isinstance(entry, Mapping):
        raise InputError(f"Item entries must be mappings, got {type(entry).__name__}.")
    if "json" not in entry and "binary" not in entry:
        return Item(json=dict(entry))
    payload = entry.get("json") or {}
    if not isinstance(payload, Mapping):
        raise InputError("Item 'json' must be a mapping.")
    binary_section = entry.get("binary") or {}
    if not isinstance(binary_section, Mapping):
        raise InputError("Item 'binary' must be a mapping of property names to attachments.")
    binary = {str(name): _load_attachment(attachment, base_dir=base_dir) for name, attachment in binary_section.items()}
    return Item(json=dict(payload), binary=binary)


def load_items(path: Optional[Path]) -> List[Item]:
    """
    Read items from a JSON or YAML list.

    Entries are either plain mappings (used as the item's JSON payload) or
    ``{"json": {...}, "binary": {"data": {"path": ..., "mime_type": ...}}}``.
    Attachment paths are resolved relative to the items file. Without a file a
    single empty item is returned.
    """

    if path is None:
        return [Item()]
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise InputError(f"Failed to read items file '{path}': {exc}") from exc

    try:
        if path.suffix.lower() == ".json":
            payload = json.loads(text)
        else:
            payload = yaml.safe_load(text)
    except (ValueError, yaml.YAMLError) as exc:
        raise InputError(f"Failed to parse items file '{path}': {exc}") from exc

    if isinstance(payload, Mapping):
        payload = [payload]
    if not isinstance(payload, list):
        raise InputError(f"Items file '{path}' must contain a list of items.")
    return [_item_from_entry(entry, base_dir=path.parent) for entry in payload]

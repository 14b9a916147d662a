"""
Per-item parameter resolution.

Hosts resolve parameter values per item because values may be expressions over
the item's JSON payload. Two sources are provided:

* :class:`StaticParameters` returns the same values for every item.
* :class:`ItemParameters` additionally evaluates callables ``(item, index)`` and
  ``{{ field.path }}`` placeholders against ``item.json``.

Resolved values are layered over the descriptor defaults; a top-level value of
``None`` leaves the default in place. Collection parameters are returned as
plain dictionaries containing only the keys that were supplied.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Protocol

from .items import Item
from .schema import ParameterType, ToolDescriptor

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][\w\-]*(?:\.[\w\-]+)*)\s*\}\}")
_MISSING = object()


class ParameterSource(Protocol):
    def resolve(self, descriptor: ToolDescriptor, item: Item, index: int) -> Dict[str, Any]:
        """Return the parameter values for ``item`` with descriptor defaults applied."""


def _apply_defaults(descriptor: ToolDescriptor, supplied: Mapping[str, Any]) -> Dict[str, Any]:
    values = descriptor.defaults()
    for parameter in descriptor.parameters:
        if parameter.name not in supplied:
            continue
        value = supplied[parameter.name]
        if parameter.type == ParameterType.COLLECTION:
            value = dict(value) if isinstance(value, Mapping) else {}
        elif value is None:
            # an unresolved placeholder counts as omitted
            continue
        values[parameter.name] = value
    return values


@dataclass(slots=True)
class StaticParameters:
    values: Mapping[str, Any] = field(default_factory=dict)

    def resolve(self, descriptor: ToolDescriptor, item: Item, index: int) -> Dict[str, Any]:
        return _apply_defaults(descriptor, self.values)


def _lookup(payload: Any, path: str) -> Any:
    current = payload
    for segment in path.split("."):
        if isinstance(current, Mapping) and segment in current:
            current = current[segment]
        elif isinstance(current, (list, tuple)) and segment.isdigit() and int(segment) < len(current):
            current = current[int(segment)]
        else:
            return _MISSING
    return current


def render_template(template: str, payload: Mapping[str, Any]) -> Any:
    """
    Substitute ``{{ path }}`` placeholders from ``payload``.

    A string consisting of a single placeholder yields the referenced value
    unchanged (numbers stay numbers); unknown paths resolve to ``None``.
    """

    whole = _PLACEHOLDER.fullmatch(template.strip())
    if whole:
        value = _lookup(payload, whole.group(1))
        return None if value is _MISSING else value

    def _replace(match: re.Match[str]) -> str:
        value = _lookup(payload, match.group(1))
        return "" if value is _MISSING or value is None else str(value)

    return _PLACEHOLDER.sub(_replace, template)


@dataclass(slots=True)
class ItemParameters:
    values: Mapping[str, Any] = field(default_factory=dict)

    def _evaluate(self, value: Any, item: Item, index: int) -> Any:
        if callable(value):
            return value(item, index)
        if isinstance(value, str) and "{{" in value:
            return render_template(value, item.json)
        if isinstance(value, Mapping):
            return {key: self._evaluate(entry, item, index) for key, entry in value.items()}
        return value

    def resolve(self, descriptor: ToolDescriptor, item: Item, index: int) -> Dict[str, Any]:
        evaluated = {name: self._evaluate(value, item, index) for name, value in self.values.items()}
        return _apply_defaults(descriptor, evaluated)


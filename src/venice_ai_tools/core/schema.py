"""
Declarative tool descriptors.

A descriptor is the static half of a tool adapter: display metadata, the
parameters a host must render and resolve, and the credential resource the tool
requires. Descriptors carry no behaviour beyond self-validation and JSON
serialisation, so hosts can catalogue tools without instantiating clients.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Sequence

from ..config import CREDENTIAL_NAME


class SchemaError(ValueError):
    """Raised when a descriptor is internally inconsistent."""


class ParameterType(str, Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OPTIONS = "options"
    COLLECTION = "collection"


@dataclass(slots=True, frozen=True)
class ParameterOption:
    """One allowed value of an ``options`` parameter."""

    name: str
    value: Any


@dataclass(slots=True, frozen=True)
class ParameterSpec:
    """
    Definition of a single tool parameter.

    Parameters
    ----------
    name:
        Key used when resolving values for an item.
    display_name:
        Label shown by the host.
    type:
        Value type. ``collection`` parameters group optional ``children``.
    default:
        Value used when the host does not supply one.
    required:
        Missing, ``None`` or empty-string values fail validation before any
        network call.
    options:
        Allowed values for ``options`` parameters.
    min_value / max_value:
        Advisory numeric bounds surfaced to the host; not enforced.
    rows:
        Suggested text area height for long string inputs.
    """

    name: str
    display_name: str
    type: ParameterType
    default: Any = None
    required: bool = False
    description: str = ""
    options: Sequence[ParameterOption] = field(default_factory=tuple)
    children: Sequence["ParameterSpec"] = field(default_factory=tuple)
    min_value: Optional[float] = None
    max_value: Optional[float] = None
    rows: Optional[int] = None
    placeholder: Optional[str] = None

    def allowed_values(self) -> tuple:
        return tuple(option.value for option in self.options)

    def validate(self) -> None:
        if not self.name:
            raise SchemaError("Parameter name must not be empty.")
        if self.type == ParameterType.OPTIONS:
            if not self.options:
                raise SchemaError(f"Parameter '{self.name}' is an options parameter without choices.")
            if self.default not in self.allowed_values():
                raise SchemaError(f"Default {self.default!r} of parameter '{self.name}' is not an allowed value.")
        if self.type == ParameterType.COLLECTION:
            _check_unique(self.children, owner=self.name)
            for child in self.children:
                child.validate()
        elif self.children:
            raise SchemaError(f"Parameter '{self.name}' declares children but is not a collection.")

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "displayName": self.display_name,
            "type": self.type.value,
            "default": self.default,
            "description": self.description,
        }
        if self.required:
            payload["required"] = True
        if self.options:
            payload["options"] = [{"name": option.name, "value": option.value} for option in self.options]
        if self.children:
            payload["options"] = [child.to_dict() for child in self.children]
        type_options = {
            key: value
            for key, value in (("minValue", self.min_value), ("maxValue", self.max_value), ("rows", self.rows))
            if value is not None
        }
        if type_options:
            payload["typeOptions"] = type_options
        if self.placeholder:
            payload["placeholder"] = self.placeholder
        return payload


@dataclass(slots=True, frozen=True)
class CredentialRequirement:
    name: str = CREDENTIAL_NAME
    required: bool = True


@dataclass(slots=True, frozen=True)
class ToolDescriptor:
    """
    Metadata and parameter schema of one tool adapter.

    ``tool_id`` is the Python-facing identifier used by registries and the CLI;
    ``node_name`` is the type name a workflow host registers the tool under.
    """

    tool_id: str
    node_name: str
    display_name: str
    description: str
    default_name: str
    documentation_url: str
    parameters: Sequence[ParameterSpec]
    version: int = 1
    group: Sequence[str] = ("transform",)
    categories: Sequence[str] = ("AI",)
    subcategories: Sequence[str] = ("Tools",)
    credentials: Sequence[CredentialRequirement] = (CredentialRequirement(),)
    usable_as_tool: bool = True

    def validate(self) -> None:
        """Validate internal consistency of the descriptor."""

        if not self.tool_id or not self.tool_id.isidentifier():
            raise SchemaError(f"Tool '{self.tool_id}' must be a valid identifier (letters, digits, underscore).")
        _check_unique(self.parameters, owner=self.tool_id)
        for parameter in self.parameters:
            parameter.validate()

    def get_parameter(self, name: str) -> Optional[ParameterSpec]:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    def iter_required(self) -> Iterator[ParameterSpec]:
        return (parameter for parameter in self.parameters if parameter.required)

    def defaults(self) -> Dict[str, Any]:
        """Top-level defaults; collections default to an empty mapping."""

        return {parameter.name: ({} if parameter.type == ParameterType.COLLECTION else parameter.default) for parameter in self.parameters}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.tool_id,
            "name": self.node_name,
            "displayName": self.display_name,
            "description": self.description,
            "version": self.version,
            "group": list(self.group),
            "defaults": {"name": self.default_name},
            "codex": {
                "categories": list(self.categories),
                "subcategories": {category: list(self.subcategories) for category in self.categories},
                "resources": {"primaryDocumentation": [{"url": self.documentation_url}]},
            },
            "usableAsTool": self.usable_as_tool,
            "credentials": [{"name": item.name, "required": item.required} for item in self.credentials],
            "properties": [parameter.to_dict() for parameter in self.parameters],
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=2)


def _check_unique(parameters: Sequence[ParameterSpec], *, owner: str) -> None:
    seen: set[str] = set()
    for parameter in parameters:
        if parameter.name in seen:
            raise SchemaError(f"Duplicate parameter '{parameter.name}' in '{owner}'.")
        seen.add(parameter.name)


def option_values(*pairs: tuple[str, Any]) -> tuple[ParameterOption, ...]:
    """Shorthand for building ``options`` enumerations from ``(name, value)`` pairs."""

    return tuple(ParameterOption(name=name, value=value) for name, value in pairs)

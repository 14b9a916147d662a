"""
Credential and settings helpers for the Venice AI tool adapters.

Secrets are loaded from ``.secrets/secret.toml`` by default. The lookup order is:

1. Explicit ``VENICE_TOOLS_SECRETS_PATH`` environment variable.
2. Project-relative ``.secrets/secret.toml`` (both from CWD and the package root).
3. Project-relative ``.secrets/secrets.toml``.
4. Fallback to ``.secrets/secrets.example.toml`` for scaffolding values.

The ``[venice]`` section provides ``api_key`` and an optional ``base_url``.
``VENICE_API_KEY`` and ``VENICE_BASE_URL`` override whatever the file holds.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Optional

DEFAULT_BASE_URL = "https://api.venice.ai/api/v1"
CREDENTIAL_NAME = "veniceAiApi"

_ENV_SECRETS_PATH = "VENICE_TOOLS_SECRETS_PATH"
_ENV_API_KEY = "VENICE_API_KEY"
_ENV_BASE_URL = "VENICE_BASE_URL"


class CredentialError(RuntimeError):
    """Raised when no usable Venice API key can be resolved."""


@dataclass(slots=True, frozen=True)
class VeniceCredential:
    """API key and optional base URL override supplied for a single run."""

    api_key: str
    base_url: Optional[str] = None

    def resolve_base_url(self) -> str:
        """Return the override without a trailing slash, or the public API root."""

        if self.base_url and self.base_url.strip():
            return self.base_url.strip().rstrip("/")
        return DEFAULT_BASE_URL

    def __repr__(self) -> str:
        return f"VeniceCredential(api_key='***', base_url={self.base_url!r})"


@dataclass(slots=True)
class VeniceSettings:
    """Parsed ``[venice]`` section."""

    api_key: Optional[str] = None
    base_url: Optional[str] = None

    def to_credential(self) -> VeniceCredential:
        if not self.api_key:
            raise CredentialError(f"Venice API key missing. Set [venice].api_key or {_ENV_API_KEY}.")
        return VeniceCredential(api_key=self.api_key, base_url=self.base_url)


@dataclass(slots=True)
class SecretsBundle:
    """Lightweight container for parsed secret values."""

    source_path: Optional[Path]
    data: Dict[str, Dict[str, object]]
    venice: VeniceSettings


def _discover_project_root() -> Optional[Path]:
    current = Path(__file__).resolve()
    for parent in current.parents:
        if (parent / "pyproject.toml").is_file():
            return parent
    return None


def _candidate_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit is not None:
        yield Path(explicit).expanduser()
        return

    env_override = os.getenv(_ENV_SECRETS_PATH)
    if env_override:
        yield Path(env_override).expanduser()

    search_roots = [Path.cwd()]
    package_root = _discover_project_root()
    if package_root and package_root not in search_roots:
        search_roots.append(package_root)

    seen: set[Path] = set()
    for base in search_roots:
        for filename in ("secret.toml", "secrets.toml", "secrets.example.toml"):
            candidate = base / ".secrets" / filename
            if candidate not in seen:
                seen.add(candidate)
                yield candidate


def _load_toml(path: Path) -> Dict[str, Dict[str, object]]:
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _extract_venice_settings(raw: Dict[str, Dict[str, object]]) -> VeniceSettings:
    section = raw.get("venice", {}) if isinstance(raw, dict) else {}
    if not isinstance(section, dict):
        section = {}

    def _extract(key: str) -> Optional[str]:
        value = section.get(key)
        return str(value) if isinstance(value, str) and value else None

    return VeniceSettings(
        api_key=os.getenv(_ENV_API_KEY) or _extract("api_key"),
        base_url=os.getenv(_ENV_BASE_URL) or _extract("base_url"),
    )


def load_secrets(path: Optional[Path] = None, *, strict: bool = False) -> SecretsBundle:
    """
    Attempt to load secrets from the configured locations.

    Parameters
    ----------
    path:
        Explicit secrets file. When given, no other location is consulted.
    strict:
        When ``True`` the function raises ``FileNotFoundError`` if no secrets file is
        discovered. Environment variables still apply when ``False``.
    """

    for candidate in _candidate_paths(path):
        if candidate.is_file():
            data = _load_toml(candidate)
            return SecretsBundle(source_path=candidate, data=data, venice=_extract_venice_settings(data))

    if strict:
        raise FileNotFoundError(f"No secrets file found. Configure {_ENV_SECRETS_PATH} or .secrets/secret.toml.")

    return SecretsBundle(source_path=None, data={}, venice=_extract_venice_settings({}))

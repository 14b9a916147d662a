"""
Execution context primitives handed to tool adapters.

The context plays the role of the workflow host for a single run: it supplies
the credential, resolves per-item parameters, and carries the run-level
``continue_on_fail`` policy. It never outlives the run it was built for.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import LoggerAdapter
from typing import Any, Mapping, Optional, Sequence

import httpx

from ..config import CredentialError, SecretsBundle, VeniceCredential, load_secrets
from .logging import get_logger as _get_logger
from .parameters import ParameterSource, StaticParameters


@dataclass(slots=True)
class ExecutionOptions:
    """
    Flags controlling how a run behaves.

    Attributes
    ----------
    continue_on_fail:
        When ``True`` a failing item produces ``{"error": message}`` in its
        result slot and the run moves on; otherwise the first failure aborts
        the run.
    observability_tags:
        Additional tags surfaced in logs, e.g. to attribute work to a parent
        workflow.
    """

    continue_on_fail: bool = False
    observability_tags: Sequence[str] = field(default_factory=tuple)


@dataclass(slots=True)
class ExecutionContext:
    """
    Host-side state for one adapter run.

    Attributes
    ----------
    credential:
        API key and optional base URL. ``None`` makes every run fail fast.
    parameters:
        Source of per-item parameter values.
    options:
        Run-level behaviour flags.
    transport:
        Optional HTTPX transport forwarded to clients built for this run.
    """

    credential: Optional[VeniceCredential]
    parameters: ParameterSource = field(default_factory=StaticParameters)
    options: ExecutionOptions = field(default_factory=ExecutionOptions)
    transport: Optional[httpx.BaseTransport] = None

    @classmethod
    def build_default(
        cls,
        *,
        parameters: Optional[ParameterSource | Mapping[str, Any]] = None,
        options: Optional[ExecutionOptions] = None,
        credential: Optional[VeniceCredential] = None,
        secrets: Optional[SecretsBundle] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "ExecutionContext":
        """
        Construct a context using sensible defaults.

        Parameters
        ----------
        parameters:
            Parameter source, or a plain mapping wrapped in :class:`StaticParameters`.
        options:
            Optional execution flags.
        credential:
            Explicit credential. When omitted it is taken from ``secrets``
            (loaded via :func:`load_secrets` if not given); a missing API key
            leaves the credential unset.
        """

        if credential is None:
            bundle = secrets or load_secrets(strict=False)
            try:
                credential = bundle.venice.to_credential()
            except CredentialError:
                credential = None
        if parameters is None:
            source: ParameterSource = StaticParameters()
        elif isinstance(parameters, Mapping):
            source = StaticParameters(parameters)
        else:
            source = parameters
        return cls(
            credential=credential,
            parameters=source,
            options=options or ExecutionOptions(),
            transport=transport,
        )

    def require_credential(self) -> VeniceCredential:
        if self.credential is None or not self.credential.api_key:
            raise CredentialError("Venice API credentials are not configured.")
        return self.credential

    @property
    def continue_on_fail(self) -> bool:
        return self.options.continue_on_fail

    def get_logger(self, name: str, *, extra: Optional[Mapping[str, object]] = None) -> LoggerAdapter:
        """Return a logger adapter enriched with execution context observability tags."""

        tags = tuple(self.options.observability_tags)
        return _get_logger(name, tags=tags if tags else None, extra=extra)

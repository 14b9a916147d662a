"""
Venice AI REST client and connectivity adapter.

The client is a bearer-token authenticated :class:`BaseAPIClient` rooted at the
credential's base URL. Tool adapters hand it prepared
:class:`~venice_ai_tools.adapters.api.base.RequestDescriptor` values; the
connectivity adapter uses the models endpoint as a cheap credential check.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, MutableMapping, Optional

import httpx

from ...config import DEFAULT_BASE_URL, VeniceCredential
from ..base import VerificationResult
from .base import APIError, BaseAPIClient


class VeniceClient(BaseAPIClient):
    """HTTP client for ``https://api.venice.ai/api/v1`` and compatible gateways."""

    DEFAULT_BASE_URL = DEFAULT_BASE_URL

    def __init__(
        self,
        *,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        headers: MutableMapping[str, str] = {"Authorization": f"Bearer {api_key}"}
        super().__init__(base_url=base_url, timeout=timeout, default_headers=headers, transport=transport)

    @classmethod
    def from_credential(
        cls,
        credential: VeniceCredential,
        *,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> "VeniceClient":
        return cls(api_key=credential.api_key, base_url=credential.resolve_base_url(), transport=transport)

    def list_models(self, *, model_type: Optional[str] = None) -> Mapping[str, Any]:
        params = {"type": model_type} if model_type and model_type != "all" else {}
        data = self._get_json("/models", params=params)
        if not isinstance(data, Mapping):
            raise APIError("Unexpected payload from Venice models endpoint.")
        return data


@dataclass(slots=True)
class VeniceConnectionAdapter:
    """Adapter to verify Venice API credentials and reachability."""

    client: VeniceClient
    source_id: str = field(default="venice_api")

    def verify(self) -> VerificationResult:
        try:
            payload = self.client.list_models()
        except APIError as exc:
            return VerificationResult(
                success=False,
                message=f"Venice API verification failed: {exc}",
                details={"base_url": self.client.base_url, "kind": exc.kind.value},
            )

        models = payload.get("data")
        model_count = len(models) if isinstance(models, list) else 0
        details: dict[str, object] = {"base_url": self.client.base_url, "model_count": model_count}
        if model_count:
            sample = models[0]
            if isinstance(sample, Mapping) and isinstance(sample.get("id"), str):
                details["sample_model"] = sample["id"]

        return VerificationResult(success=True, message="Venice API reachable.", details=details)


__all__ = ["VeniceClient", "VeniceConnectionAdapter"]

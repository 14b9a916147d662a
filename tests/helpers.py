"""Recording HTTP stubs shared by the test modules."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

import httpx

from venice_ai_tools.adapters.api.base import APIResponse


@dataclass
class Reply:
    status_code: int = 200
    json: Any = None
    content: Optional[bytes] = None
    headers: Optional[Mapping[str, str]] = None

    def build(self) -> httpx.Response:
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content, headers=self.headers)
        return httpx.Response(self.status_code, json=self.json if self.json is not None else {}, headers=self.headers)


class StubVenice:
    """Records outgoing requests and answers them with canned replies."""

    def __init__(self, *replies: Union[Reply, Callable[[httpx.Request], httpx.Response]]) -> None:
        self.requests: list[httpx.Request] = []
        self._replies = list(replies) or [Reply()]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self._replies[min(len(self.requests), len(self._replies)) - 1]
        if isinstance(reply, Reply):
            return reply.build()
        return reply(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def json_body(self, index: int = 0) -> Any:
        return json.loads(self.requests[index].content)


def json_response(payload: Any, *, status_code: int = 200) -> APIResponse:
    return APIResponse(status_code=status_code, headers={"content-type": "application/json"}, content=json.dumps(payload).encode("utf-8"))

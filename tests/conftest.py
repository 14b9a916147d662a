from __future__ import annotations

from typing import Any, Mapping, Optional

import pytest
from helpers import StubVenice
from typer.testing import CliRunner

from venice_ai_tools.config import VeniceCredential
from venice_ai_tools.core.context import ExecutionContext, ExecutionOptions
from venice_ai_tools.core.parameters import StaticParameters


@pytest.fixture()
def credential() -> VeniceCredential:
    return VeniceCredential(api_key="test-key")


@pytest.fixture()
def make_context(credential):
    def _make(
        parameters: Optional[Mapping[str, Any]] = None,
        *,
        stub: Optional[StubVenice] = None,
        continue_on_fail: bool = False,
        source=None,
    ) -> ExecutionContext:
        return ExecutionContext(
            credential=credential,
            parameters=source or StaticParameters(parameters or {}),
            options=ExecutionOptions(continue_on_fail=continue_on_fail),
            transport=stub.transport if stub else None,
        )

    return _make


@pytest.fixture()
def cli_runner() -> CliRunner:
    return CliRunner()

"""
Sequential item runner shared by every Venice tool adapter.

Each adapter contributes three pieces: its descriptor, a request builder, and a
response shaper. The runner resolves parameters for each item, checks required
fields, performs exactly one HTTP call, and records an :class:`ItemOutcome`.
The continue-on-failure policy is applied once, after the loop, by
:func:`collect_results`. Without it the loop stops at the first failing item so
no further requests are made.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

from ...core.context import ExecutionContext
from ...core.items import Item, ItemOutcome, ResultItem
from ...core.logging import bind_tags, log_progress
from ...core.schema import ParameterType, ToolDescriptor
from ..api.base import APIResponse, RequestDescriptor
from ..api.venice import VeniceClient
from ..base import ErrorKind, ParameterValidationError, ToolExecutionError


class EndpointBinding(Protocol):
    client: Optional[VeniceClient]

    def describe(self) -> ToolDescriptor: ...

    def build_request(self, params: Mapping[str, Any], item: Item, index: int) -> RequestDescriptor: ...

    def shape_result(self, params: Mapping[str, Any], item: Item, index: int, response: APIResponse) -> ResultItem: ...


def check_required(descriptor: ToolDescriptor, params: Mapping[str, Any], index: int) -> None:
    """Raise :class:`ParameterValidationError` for the first required parameter without a usable value."""

    for parameter in descriptor.iter_required():
        value = params.get(parameter.name)
        if value is None or (parameter.type == ParameterType.STRING and value == ""):
            raise ParameterValidationError(f"The parameter '{parameter.display_name}' is required.", item_index=index)
        if parameter.type == ParameterType.STRING and not isinstance(value, str):
            raise ParameterValidationError(
                f"The parameter '{parameter.display_name}' must be text, got {type(value).__name__}.",
                item_index=index,
            )


def _process_item(
    binding: EndpointBinding,
    descriptor: ToolDescriptor,
    client: VeniceClient,
    item: Item,
    index: int,
    context: ExecutionContext,
    logger: logging.LoggerAdapter,
) -> ItemOutcome:
    log_progress(logger, "Processing item", phase="execute", step=f"item-{index}", level=logging.DEBUG, extra={"item_index": index})
    try:
        params = context.parameters.resolve(descriptor, item, index)
        check_required(descriptor, params, index)
        request = binding.build_request(params, item, index)
        response = client.send(request)
        result = binding.shape_result(params, item, index, response)
    except Exception as exc:  # recorded per item; collect_results decides whether the run aborts
        log_progress(
            logger,
            "Item failed",
            phase="execute",
            status="failed",
            level=logging.WARNING,
            extra={"item_index": index, "kind": getattr(exc, "kind", ErrorKind.UPSTREAM).value, "error": str(exc)},
        )
        return ItemOutcome.err(index, exc)
    log_progress(logger, "Item completed", phase="execute", status="ok", level=logging.DEBUG, extra={"item_index": index})
    return ItemOutcome.ok(index, result)


def collect_results(tool_id: str, outcomes: Sequence[ItemOutcome], *, continue_on_fail: bool) -> List[ResultItem]:
    """
    Apply the run-level failure policy to per-item outcomes.

    Failures either become ``{"error": message}`` results in their own slot or
    abort the run with a :class:`ToolExecutionError` naming the item index.
    """

    results: List[ResultItem] = []
    for outcome in outcomes:
        if outcome.error is not None:
            if not continue_on_fail:
                raise ToolExecutionError(tool_id, outcome.index, outcome.error)
            results.append(ResultItem(json={"error": str(outcome.error)}, paired_item=outcome.index))
        elif outcome.result is not None:
            results.append(outcome.result)
    return results


def run_tool(binding: EndpointBinding, items: Sequence[Item], context: ExecutionContext) -> List[List[ResultItem]]:
    """Execute ``binding`` over ``items`` strictly in order and return a single output group."""

    descriptor = binding.describe()
    logger = bind_tags(context.get_logger(__name__, extra={"tool": descriptor.tool_id}), ("venice",))
    credential = context.require_credential()
    client = binding.client or VeniceClient.from_credential(credential, transport=context.transport)

    outcomes: List[ItemOutcome] = []
    for index, item in enumerate(items):
        outcome = _process_item(binding, descriptor, client, item, index, context, logger)
        outcomes.append(outcome)
        if outcome.failed and not context.continue_on_fail:
            break

    results = collect_results(descriptor.tool_id, outcomes, continue_on_fail=context.continue_on_fail)
    log_progress(logger, "Run finished", phase="execute", status="ok", extra={"items": len(results)})
    return [results]


def strip_empty(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop keys whose value is exactly ``""`` or ``None``; ``0`` and ``False`` are kept."""

    return {key: value for key, value in payload.items() if value is not None and not (isinstance(value, str) and value == "")}


def stringify(value: Any) -> str:
    """Render a form field the way the provider expects (``true``/``false``, ``2`` rather than ``2.0``)."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def coalesce(value: Any, default: Any) -> Any:
    """Return ``default`` only when ``value`` is ``None``."""

    return default if value is None else value

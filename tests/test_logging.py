from __future__ import annotations

import logging

from helpers import Reply, StubVenice

from venice_ai_tools.adapters.tools.chat import VeniceChatTool
from venice_ai_tools.core.items import Item
from venice_ai_tools.core.logging import PACKAGE_LOGGER, RunLogFormatter, configure_logging, get_logger, log_progress


def test_host_root_handler_receives_debug_progress(make_context, caplog, monkeypatch):
    monkeypatch.delenv("VENICE_TOOLS_LOG_LEVEL", raising=False)
    configure_logging(force=True)
    stub = StubVenice(Reply(json={"choices": [{"message": {"content": "ok"}}]}))

    with caplog.at_level(logging.DEBUG):
        VeniceChatTool().execute([Item()], make_context({"message": "Hi"}, stub=stub))

    assert logging.getLogger(PACKAGE_LOGGER).level == logging.NOTSET
    completed = [record for record in caplog.records if record.getMessage() == "Item completed"]
    assert len(completed) == 1
    assert completed[0].tool == "venice_chat"
    assert completed[0].item_index == 0


def test_explicit_level_applies_to_package_logger(monkeypatch):
    monkeypatch.delenv("VENICE_TOOLS_LOG_LEVEL", raising=False)
    try:
        configure_logging("ERROR", force=True)
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.ERROR
    finally:
        configure_logging(force=True)

    assert logging.getLogger(PACKAGE_LOGGER).level == logging.NOTSET


def test_formatter_renders_structured_extras():
    logger = logging.getLogger(f"{PACKAGE_LOGGER}.formatting")
    record = logger.makeRecord(logger.name, logging.WARNING, __file__, 1, "Item failed", None, None, extra={"item_index": 2, "tool": "venice_chat", "tags": ("venice",)})

    line = RunLogFormatter().format(record)

    assert line.endswith("Item failed | tool=venice_chat item_index=2 tags=[venice]")


def test_log_progress_merges_adapter_fields(caplog):
    adapter = get_logger(f"{PACKAGE_LOGGER}.progress", extra={"tool": "venice_embeddings"})

    with caplog.at_level(logging.INFO, logger=PACKAGE_LOGGER):
        log_progress(adapter, "Run finished", phase="execute", status="ok", extra={"items": 3})

    [record] = [entry for entry in caplog.records if entry.getMessage() == "Run finished"]
    assert (record.tool, record.phase, record.status, record.items) == ("venice_embeddings", "execute", "ok", 3)

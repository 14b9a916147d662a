"""
Logging helpers shared by the tool runner and the HTTP client.

Records are emitted through the ``venice_ai_tools`` logger hierarchy with
structured extras (tool id, item index, HTTP method, status code) rendered as
``key=value`` pairs after the message. The package never touches the root
logger; hosts that configure logging themselves simply receive the records via
propagation.

Environment variables:

* ``VENICE_TOOLS_LOG_LEVEL``: threshold for the package handler (default ``WARNING``).
* ``VENICE_TOOLS_LOG_COLOR``: force (``1``) or disable (``0``) coloured level names.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from logging import Logger, LoggerAdapter
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple

PACKAGE_LOGGER = "venice_ai_tools"
DEFAULT_LEVEL = "WARNING"
_ENV_LEVEL = "VENICE_TOOLS_LOG_LEVEL"
_ENV_COLOR = "VENICE_TOOLS_LOG_COLOR"

# extras listed first, in this order; the rest follow alphabetically
_LEADING_EXTRAS: Tuple[str, ...] = ("tool", "item_index", "phase", "status", "kind", "method", "url", "status_code", "tags")
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))) | {"message", "asctime"}
_COLOURS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[95m",
}

_handler: Optional[logging.Handler] = None


def resolve_level(level: Optional[int | str] = None) -> int:
    if isinstance(level, int):
        return level
    name = (level or os.getenv(_ENV_LEVEL) or DEFAULT_LEVEL).strip().upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.WARNING


def _colour_enabled() -> bool:
    setting = os.getenv(_ENV_COLOR, "").strip().lower()
    if setting in {"1", "true", "yes", "on"}:
        return True
    if setting in {"0", "false", "no", "off"}:
        return False
    return sys.stderr.isatty()


def _structured_extras(record: logging.LogRecord) -> Iterator[Tuple[str, Any]]:
    extras = {key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS and not key.startswith("_") and value is not None}
    for key in _LEADING_EXTRAS:
        if key in extras:
            yield key, extras.pop(key)
    yield from sorted(extras.items())


def _render(value: Any) -> str:
    if isinstance(value, (list, tuple, set)):
        return "[" + ",".join(_render(entry) for entry in value) + "]"
    if isinstance(value, Mapping):
        return json.dumps(value, ensure_ascii=False, default=str)
    return str(value)


class RunLogFormatter(logging.Formatter):
    """``time level logger: message | key=value ...`` with optional ANSI level colours."""

    def __init__(self, *, colour: bool = False) -> None:
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s", datefmt="%H:%M:%S")
        self.colour = colour

    def formatMessage(self, record: logging.LogRecord) -> str:
        line = super().formatMessage(record)
        if self.colour and record.levelno in _COLOURS:
            line = line.replace(record.levelname, f"{_COLOURS[record.levelno]}{record.levelname}\033[0m", 1)
        pairs = " ".join(f"{key}={_render(value)}" for key, value in _structured_extras(record))
        return f"{line} | {pairs}" if pairs else line


class _StderrHandler(logging.StreamHandler):
    """Stream handler bound to whatever ``sys.stderr`` is when a record is emitted."""

    def emit(self, record: logging.LogRecord) -> None:
        self.stream = sys.stderr
        super().emit(record)


def configure_logging(level: Optional[int | str] = None, *, force: bool = False) -> None:
    """
    Attach the package handler to the ``venice_ai_tools`` logger.

    Parameters
    ----------
    level:
        Handler threshold; falls back to ``VENICE_TOOLS_LOG_LEVEL`` then ``WARNING``.
        Only an explicit level (argument or environment) is also applied to the
        package logger, so host handlers otherwise see every record they ask for.
    force:
        Replace an existing package handler, e.g. when the CLI receives ``--log-level``.
    """

    global _handler
    if _handler is not None and not force:
        return
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _handler is not None:
        package_logger.removeHandler(_handler)
    resolved = resolve_level(level)
    _handler = _StderrHandler()
    _handler.setFormatter(RunLogFormatter(colour=_colour_enabled()))
    _handler.setLevel(resolved)
    package_logger.addHandler(_handler)
    if level is not None or os.getenv(_ENV_LEVEL):
        package_logger.setLevel(resolved)
    else:
        package_logger.setLevel(logging.NOTSET)


def get_logger(
    name: str,
    *,
    level: Optional[int | str] = None,
    tags: Optional[Sequence[str]] = None,
    extra: Optional[Mapping[str, object]] = None,
) -> LoggerAdapter:
    """
    Return an adapter whose ``extra`` mapping is merged into every record.

    Parameters
    ----------
    name:
        Logger name, normally ``__name__`` of a module inside the package.
    level:
        Per-logger threshold override.
    tags:
        Observability tags, rendered as ``tags=[...]``.
    extra:
        Fixed structured fields such as the tool id or base URL.
    """

    configure_logging()
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(resolve_level(level))
    payload: Dict[str, object] = {key: value for key, value in (extra or {}).items() if value is not None}
    if tags:
        payload["tags"] = tuple(tags)
    return LoggerAdapter(logger, payload)


def bind_tags(logger: LoggerAdapter, tags: Sequence[str]) -> LoggerAdapter:
    """Return a new adapter with ``tags`` appended; the original is not modified."""

    payload = dict(logger.extra or {})
    payload["tags"] = tuple(dict.fromkeys([*payload.get("tags", ()), *tags]))
    return LoggerAdapter(logger.logger, payload)


def log_progress(
    logger: LoggerAdapter | Logger,
    message: str,
    *,
    phase: Optional[str] = None,
    step: Optional[str] = None,
    status: Optional[str] = None,
    level: int = logging.INFO,
    extra: Optional[Mapping[str, object]] = None,
) -> None:
    """Log a run milestone; ``extra`` is merged over the adapter's own fields."""

    fields: Dict[str, object] = {}
    if isinstance(logger, LoggerAdapter):
        fields.update(logger.extra or {})
        logger = logger.logger
    fields.update(extra or {})
    fields.update({key: value for key, value in (("phase", phase), ("step", step), ("status", status)) if value})
    logger.log(level, message, extra=fields or None)

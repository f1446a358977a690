"""nostrkit.core.log

Logging, configured once at the CLI edge.

Modules log through stdlib ``logging`` with event names as messages
(``event_signed``) and details in ``extra``. The single handler renders
those records through structlog: JSON lines or console output, chosen by
``LoggingConfig.json_output``. Every entry is redacted before rendering.
"""

from __future__ import annotations

import logging
import sys
from typing import IO, Any

import structlog
from structlog.types import EventDict, Processor

from nostrkit.core.config import LoggingConfig
from nostrkit.security.redaction import redact_secrets, sanitize_for_log

# Passed through untouched: ProcessorFormatter bookkeeping and traceback objects.
_PASSTHROUGH_KEYS = ("_record", "_from_structlog", "exc_info", "stack_info")


def _redact(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Structlog processor: strip secrets from the message and every field."""

    meta = {k: event_dict.pop(k) for k in _PASSTHROUGH_KEYS if k in event_dict}
    clean = sanitize_for_log(dict(event_dict))
    # The message already has %-args merged, so a secret passed as an arg is caught.
    clean["event"] = redact_secrets(str(clean.get("event", "")))
    clean.update(meta)
    return clean


def _shared_processors() -> list[Processor]:
    return [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.ExtraAdder(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _redact,
    ]


def configure_logging(cfg: LoggingConfig | None = None, *, stream: IO[str] | None = None) -> logging.Logger:
    """Attach a single structlog-rendering handler to the ``nostrkit`` logger. Idempotent."""

    cfg = cfg or LoggingConfig()
    shared = _shared_processors()

    renderer: list[Processor]
    if cfg.json_output:
        renderer = [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(sort_keys=True, default=str),
        ]
    else:
        renderer = [structlog.dev.ConsoleRenderer(colors=False)]

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderer],
    )

    # structlog-native loggers share the handler and the chain.
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger("nostrkit")
    for h in list(root.handlers):
        root.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(formatter)
    root.addHandler(handler)
    root.setLevel(cfg.level.upper())
    root.propagate = False
    return root

"""
Structured logging for the decoder.

Every module calls get_logger(__name__) and logs a snake_case event name plus
keyword context. Decode scope (tx_id, then program_id and instruction_index
per instruction) is carried in structlog contextvars, so lookup-table, IDL and
decoder events emitted deep in the pipeline are attributable to the
transaction and instruction being decoded.

JSON output by default (LOG_FORMAT=json); console output for local runs.
No other txdecoder imports, to avoid circular imports.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, ContextManager

import structlog

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_LEVEL_VALUE = getattr(logging, LOG_LEVEL, logging.INFO)

LOG_FORMAT = os.getenv("LOG_FORMAT", "json").strip().lower()

# context keys, in the order they are rendered ahead of event-specific keys
DECODE_CONTEXT_KEYS = ("tx_id", "instruction_index", "program_id")


def _rename_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog 'event' -> event_type."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    return event_dict


def _order_decode_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Put decode scope keys first so lines group by transaction when read raw."""
    head = {k: event_dict.pop(k) for k in DECODE_CONTEXT_KEYS if k in event_dict}
    if not head:
        return event_dict
    head.update(event_dict)
    return head


def configure_structlog() -> None:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
        _rename_event,
        _order_decode_context,
    ]
    if LOG_FORMAT == "json":
        processors.append(structlog.processors.JSONRenderer(default=str))
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(LOG_LEVEL_VALUE),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("schema_fetched", program_id=pid, instruction_count=12)
    """
    return structlog.get_logger(name).bind(logger=name)


def transaction_context(tx_id: str) -> ContextManager[None]:
    """Bind tx_id to every event logged inside the block."""
    return structlog.contextvars.bound_contextvars(tx_id=tx_id)


def instruction_context(program_id: str | None, instruction_index: int) -> ContextManager[None]:
    """Bind the instruction being decoded; nests inside transaction_context."""
    return structlog.contextvars.bound_contextvars(
        program_id=program_id, instruction_index=instruction_index
    )

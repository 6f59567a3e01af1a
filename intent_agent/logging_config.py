"""
Structured logging for the intent agent service.

JSON lines by default; a console renderer when running at DEBUG or when
``log_json`` is disabled. Values logged under secret-looking keys are masked
before rendering.
"""

import logging
import sys
from typing import Any, MutableMapping, Optional

import structlog

from .config import settings

SECRET_KEYS = frozenset({"api_key", "deepseek_api_key", "private_key", "authorization"})

NOISY_LOGGERS = ("uvicorn.access", "httpcore", "httpx", "web3.providers", "web3.manager")
HANDLER_NAME = "intent_agent"


def mask_secrets(_: Any, __: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """Replace secret values with their last four characters."""
    for key in SECRET_KEYS.intersection(event_dict):
        value = str(event_dict[key] or "")
        event_dict[key] = f"***{value[-4:]}" if len(value) > 8 else "***"
    return event_dict


def setup_logging(log_level: Optional[str] = None, json_logs: Optional[bool] = None) -> None:
    """Configure structlog and route stdlib logging through it.

    Args:
        log_level: Override log level (default: settings.log_level)
        json_logs: Force JSON (True) or console (False) output
            (default: settings.log_json, else JSON unless DEBUG)
    """
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    if json_logs is None:
        json_logs = settings.log_json if settings.log_json is not None else level != logging.DEBUG

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        mask_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # Module loggers use logging.getLogger(__name__); give them the same pipeline
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    # Replace only our own handler so repeated setup stays idempotent
    root.handlers = [h for h in root.handlers if h.get_name() != HANDLER_NAME]
    root.addHandler(handler)
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

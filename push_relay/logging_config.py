"""Structured logging configuration with JSON output."""

from __future__ import annotations

import logging
import sys

from pythonjsonlogger.json import JsonFormatter

from push_relay.utils.relay_context import current_relay_context


class RelayContextFilter(logging.Filter):
    """Stamp the bound relay context onto log records.

    Fields passed explicitly through `extra=` win over the bound ones.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        context = current_relay_context()

        if not hasattr(record, "request_id"):
            record.request_id = context.request_id if context else "no-request-id"
        if context is not None:
            if context.token_suffix and not hasattr(record, "token_suffix"):
                record.token_suffix = context.token_suffix
            if context.content_encoding and not hasattr(record, "content_encoding"):
                record.content_encoding = context.content_encoding
        return True


class HealthCheckFilter(logging.Filter):
    """Suppress access logs for successful liveness probes.

    Only filters out 200 OK responses - errors (4xx, 5xx) are still logged.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        """Filter out successful probe endpoint logs."""
        message = record.getMessage()

        probe_paths = [
            "GET /ping ",
            "GET /health ",
        ]

        return all(not (path in message and '" 200' in message) for path in probe_paths)


def configure_json_logging(
    log_level: str = "INFO",
    use_json: bool = True,
) -> None:
    """Configure application logging with optional JSON output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        use_json: Whether to use JSON output (True) or text output (False)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setLevel(getattr(logging, log_level.upper()))
    stream_handler.addFilter(RelayContextFilter())

    if use_json:
        json_formatter = JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s %(request_id)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
        stream_handler.setFormatter(json_formatter)
    else:
        text_formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        stream_handler.setFormatter(text_formatter)

    root_logger.addHandler(stream_handler)

    # Suppress noisy loggers (aioapns logs every stream it opens)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aioapns").setLevel(logging.WARNING)
    logging.getLogger("h2").setLevel(logging.WARNING)

    logging.getLogger("uvicorn.access").addFilter(HealthCheckFilter())

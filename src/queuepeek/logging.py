"""Structured logging configuration."""

import json
import logging
from datetime import UTC, datetime

TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# LogRecord attributes copied into JSON output when a call passes them as extra.
CONTEXT_FIELDS = ("entity", "sub_queue")


def log_context(entity: object, sub_queue: object | None = None) -> dict[str, str]:
    """Build the `extra` mapping that tags a record with the entity browsed."""
    context = {"entity": str(entity)}
    if sub_queue is not None:
        context["sub_queue"] = str(sub_queue)
    return context


class JSONFormatter(logging.Formatter):
    """JSON log formatter compatible with ECS/Splunk/Datadog structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in CONTEXT_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                log_entry[name] = value
        if record.exc_info and record.exc_info[1]:
            log_entry["error"] = {
                "type": type(record.exc_info[1]).__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": self.formatException(record.exc_info),
            }
        return json.dumps(log_entry, default=str)


def configure_logging(
    *,
    log_format: str = "text",
    debug: bool = False,
    text_handler: logging.Handler | None = None,
) -> logging.Handler:
    """
    Install a single root handler.

    JSON output always goes through a stream handler with `JSONFormatter`.
    Text output uses `text_handler` when given (the CLI passes a rich
    handler), otherwise a plain stream handler.
    """
    level = logging.DEBUG if debug else logging.INFO
    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    if log_format == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
    elif text_handler is not None:
        handler = text_handler
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    handler.setLevel(level)
    root.addHandler(handler)
    return handler

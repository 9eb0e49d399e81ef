"""Structured logging setup."""
from contextvars import ContextVar
import json
import logging
import sys
from typing import Optional

# Id of the request being served, set by RequestContextMiddleware
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RESERVED = set(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


class RequestIdFilter(logging.Filter):
    """Stamps every record with the current request id."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``extra`` fields are merged at top level."""

    def format(self, record):
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _RESERVED:
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, ensure_ascii=False)


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    fmt: str = "%(asctime)s %(levelname)s %(name)s %(message)s",
    log_file: Optional[str] = None,
) -> None:
    """Install a single root handler; a no-op when the root logger is already configured."""
    root = logging.getLogger()
    if root.handlers:
        return
    root.setLevel(level)
    if log_file:
        handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if json_format else logging.Formatter(fmt))
    handler.addFilter(RequestIdFilter())
    root.addHandler(handler)

"""
Structured logger for the order service.

Every record is emitted as a single JSON line (python-json-logger) so log
shippers can index the free-form attributes passed through ``extra=``.
Output level is controlled from one place (``LOG_LEVEL`` environment
variable) unless a level is passed explicitly.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone

from pythonjsonlogger import jsonlogger


class JsonFormatter(jsonlogger.JsonFormatter):
    """Render a record as ``{"time", "level", "service", "logger", "msg", ...}``."""

    def __init__(self, service: str) -> None:
        super().__init__(json_default=str)
        self.service = service

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record.pop("message", None)
        log_record["time"]    = datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()
        log_record["level"]   = record.levelname.lower()
        log_record["service"] = self.service
        log_record["logger"]  = record.name
        log_record["msg"]     = record.getMessage()


class RequestLogger(logging.LoggerAdapter):
    """Logger bound to one request; per-call ``extra`` wins over request fields."""

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str, level: str | None = None, service: str | None = None) -> logging.Logger:
    """
    Return a consistently configured JSON logger.

    The handler is attached once; an explicit ``level`` or ``service`` on a
    later call re-applies to the existing logger.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JsonFormatter(service or os.getenv("OTEL_SERVICE_NAME", "order-service")))
        logger.addHandler(handler)
        level = level or os.getenv("LOG_LEVEL", "INFO")
    elif service:
        for handler in logger.handlers:
            if isinstance(handler.formatter, JsonFormatter):
                handler.formatter.service = service

    if level:
        logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    return logger

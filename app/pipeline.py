"""
Request pipeline — the cross-cutting stages wrapped around every request.

  before_request : start the latency timer, bind a request logger
  error handler  : the single place where raised failures become
                   ``{"error", "status"}`` JSON responses
  after_request  : resolve the route label, record counter/histogram/error
                   metrics and emit one access log record

Trace/span ids are read when each record is written, so the server span
opened by the Flask instrumentation is picked up whatever the hook order.
They go into logs only; metric labels stay (method, route, status).
"""

from __future__ import annotations

import logging
import uuid

from flask import Flask, Request, g, jsonify, request
from werkzeug.exceptions import HTTPException

from app.errors import OrderServiceError, describe_error
from telemetry.metrics_registry import MetricsRegistry
from telemetry.tracing import current_trace_ids
from utils.logger import RequestLogger

UNKNOWN_ROUTE = "unknown"


def resolve_route(req: Request) -> str:
    """Matched route template, else the bare path, else ``"unknown"``."""
    if req.url_rule is not None:
        return req.url_rule.rule
    return req.path.split("?", 1)[0] or UNKNOWN_ROUTE


def log_level_for(status: int, error: BaseException | None = None) -> int:
    if error is not None or status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class TracedRequestLogger(RequestLogger):
    """Request logger that stamps the active trace/span ids on every record."""

    def process(self, msg, kwargs):
        msg, kwargs = super().process(msg, kwargs)
        kwargs["extra"] = {**current_trace_ids(), **kwargs["extra"]}
        return msg, kwargs


class RequestPipeline:
    def __init__(self, registry: MetricsRegistry, logger: logging.Logger) -> None:
        self.registry = registry
        self.logger   = logger

    def init_app(self, app: Flask) -> None:
        app.before_request(self._before_request)
        app.after_request(self._after_request)
        app.register_error_handler(Exception, self._translate_error)

    def _request_log(self) -> logging.LoggerAdapter:
        return g.get("log") or TracedRequestLogger(self.logger, {})

    # ── Stages ────────────────────────────────────────────────────────────────

    def _before_request(self) -> None:
        g.stop_timer = self.registry.start_timer()
        g.log = TracedRequestLogger(self.logger, {
            "reqId":  request.headers.get("X-Request-ID") or str(uuid.uuid4()),
            "method": request.method,
            "path":   request.path,
        })

    def _translate_error(self, exc: Exception):
        status, message = describe_error(exc)
        if not isinstance(exc, OrderServiceError) and status >= 500:
            g.unexpected_error = exc

        self._request_log().error(
            "request failed",
            extra={
                "err":    {"type": type(exc).__name__, "message": message},
                "status": status,
            },
            exc_info=exc if "unexpected_error" in g else None,
        )

        response = jsonify({"error": message, "status": status})
        response.status_code = status
        if isinstance(exc, HTTPException):
            for name, value in exc.get_headers():
                if name.lower() != "content-type":
                    response.headers[name] = value
        return response

    def _after_request(self, response):
        status = response.status_code
        route  = resolve_route(request)
        labels = {"method": request.method, "route": route, "status": str(status)}

        self.registry.record_request(labels)
        stop_timer = g.pop("stop_timer", None)
        elapsed = stop_timer(labels) if stop_timer else 0.0
        if status >= 500:
            self.registry.record_error(labels)

        self._request_log().log(
            log_level_for(status, g.get("unexpected_error")),
            "request completed",
            extra={
                "status":         status,
                "route":          route,
                "responseTimeMs": round(elapsed * 1000, 3),
            },
        )
        return response

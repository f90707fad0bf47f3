import json
import logging
import sys
import time
import traceback
import uuid
from datetime import datetime

from flask import Flask, g, request

# Sensitive headers to mask
SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}

REQUEST_FIELDS = ("request_id", "user_id", "method", "path", "status_code", "duration_ms", "headers", "target")


class JSONFormatter(logging.Formatter):
    def __init__(self, service_name: str):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.utcnow().isoformat(),
            "service": self.service_name,
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
            "module": record.module,
            "func": record.funcName,
            "line": record.lineno,
        }

        for field in REQUEST_FIELDS:
            if hasattr(record, field):
                log_obj[field] = getattr(record, field)

        if record.exc_info:
            log_obj["exception"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(log_obj, default=str)


def setup_logging(app: Flask) -> logging.Logger:
    """Configure the root logger from the app config and hook request logging."""
    service_name = app.config.get("SERVICE_NAME", "giftshop")
    logger = logging.getLogger()
    logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # clear existing handlers
    if logger.handlers:
        logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if app.config.get("LOG_JSON"):
        handler.setFormatter(JSONFormatter(service_name))
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s [%(name)s] %(message)s"
        ))
    logger.addHandler(handler)

    register_request_logging(app, service_name)
    return logging.getLogger(service_name)


def _masked_headers() -> dict:
    headers = {}
    for k, v in request.headers.items():
        headers[k] = "***" if k.lower() in SENSITIVE_HEADERS else v
    return headers


def register_request_logging(app: Flask, service_name: str):
    request_logger = logging.getLogger(service_name)

    @app.before_request
    def start_request_timer():
        # Correlation ID
        g.request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        g.request_start = time.time()

    @app.after_request
    def log_request(response):
        start = g.get("request_start")
        duration = (time.time() - start) * 1000 if start else 0.0
        extra = {
            "request_id": g.get("request_id"),
            "method": request.method,
            "path": request.path,
            "status_code": response.status_code,
            "duration_ms": round(duration, 2),
            "headers": _masked_headers(),
        }

        if response.status_code >= 500:
            request_logger.error("Request Failed", extra=extra)
        elif response.status_code >= 400:
            request_logger.warning("Request Error", extra=extra)
        else:
            request_logger.info("Request Processed", extra=extra)

        if g.get("request_id"):
            response.headers["X-Request-ID"] = g.request_id
        return response

"""
Structured logging configuration
JSON log lines with request context for the inventory tracker:
- request id / correlation id propagated from headers
- authenticated user id once the bearer token has been resolved
- bearer tokens and passwords redacted before anything is written
"""

import logging
import logging.handlers
import sys
import json
import os
import re
import time
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from contextvars import ContextVar
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# Context variables for request tracking
request_id_var: ContextVar[Optional[str]] = ContextVar('request_id', default=None)
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)
user_id_var: ContextVar[Optional[str]] = ContextVar('user_id', default=None)

_service_name = os.getenv('SERVICE_NAME', 'inventory-service')

REDACTED = "***REDACTED***"

class StructuredFormatter(logging.Formatter):
    """One JSON object per line, with trace context and ``extra_fields``"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "@timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": _service_name,
            "environment": os.getenv('ENVIRONMENT', 'development'),
        }

        trace = {
            "request_id": request_id_var.get(),
            "correlation_id": correlation_id_var.get(),
            "user_id": user_id_var.get(),
        }
        trace = {key: value for key, value in trace.items() if value}
        if trace:
            log_obj["trace"] = trace

        log_obj["location"] = f"{record.module}:{record.funcName}:{record.lineno}"

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            log_obj["error"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "stacktrace": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        extra_fields = getattr(record, 'extra_fields', None)
        if extra_fields:
            log_obj["custom"] = extra_fields

        return json.dumps(log_obj, default=str)

class SecurityFilter(logging.Filter):
    """Scrub bearer tokens, JWTs and password values from messages and extra fields"""

    PATTERNS = [
        re.compile(r"(?i)(bearer\s+)[A-Za-z0-9._~+/=-]+"),
        re.compile(r"eyJ[A-Za-z0-9_-]+\.[A-Za-z0-9_-]+\.[A-Za-z0-9_-]*"),
        re.compile(r"(?i)((?:password|secret|api_key)\s*[=:]\s*)\S+"),
    ]
    SENSITIVE_KEYS = {'password', 'token', 'access_token', 'authorization', 'secret', 'jwt_secret'}

    def _scrub(self, text: str) -> str:
        for pattern in self.PATTERNS:
            text = pattern.sub(lambda m: (m.group(1) if m.groups() else "") + REDACTED, text)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = self._scrub(record.msg)
        extra_fields = getattr(record, 'extra_fields', None)
        if isinstance(extra_fields, dict):
            record.extra_fields = {
                key: REDACTED if key.lower() in self.SENSITIVE_KEYS
                else self._scrub(value) if isinstance(value, str) else value
                for key, value in extra_fields.items()
            }
        return True

def _make_handler(handler: logging.Handler, formatter: logging.Formatter) -> logging.Handler:
    handler.setFormatter(formatter)
    handler.addFilter(SecurityFilter())
    return handler

def setup_logging(service_name: str, level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Route the root logger through the JSON formatter

    Args:
        service_name: Name reported in every log line
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path for a rotating file handler next to stdout
    """
    global _service_name
    _service_name = service_name

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    root_logger.handlers = []

    formatter = StructuredFormatter()
    root_logger.addHandler(_make_handler(logging.StreamHandler(sys.stdout), formatter))
    if log_file:
        root_logger.addHandler(_make_handler(
            logging.handlers.RotatingFileHandler(log_file, maxBytes=10485760, backupCount=5),  # 10MB
            formatter,
        ))

    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    root_logger.info(
        "Logging initialized",
        extra={'extra_fields': {'service': service_name, 'level': level, 'log_file': log_file}}
    )

class LoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that keeps caller-supplied ``extra`` intact"""

    def process(self, msg, kwargs):
        kwargs['extra'] = kwargs.get('extra', {})
        return msg, kwargs

def get_logger(name: str) -> LoggerAdapter:
    return LoggerAdapter(logging.getLogger(name), {})

def set_request_context(
    request_id: Optional[str] = None,
    correlation_id: Optional[str] = None,
    user_id: Optional[str] = None
) -> None:
    """Attach identifiers of the current request to every log line it produces"""
    if request_id:
        request_id_var.set(request_id)
    if correlation_id:
        correlation_id_var.set(correlation_id)
    if user_id:
        user_id_var.set(user_id)

def generate_request_id() -> str:
    return str(uuid.uuid4())

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request and its outcome
    Echoes X-Request-ID (generated when absent) and X-Correlation-ID on the response
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get('X-Request-ID') or generate_request_id()
        correlation_id = request.headers.get('X-Correlation-ID')
        tokens = [request_id_var.set(request_id), correlation_id_var.set(correlation_id)]

        logger = get_logger(__name__)
        fields = {'method': request.method, 'path': request.url.path}
        start_time = time.perf_counter()
        try:
            try:
                response = await call_next(request)
            except Exception:
                logger.error(
                    f"Request failed: {request.method} {request.url.path}",
                    exc_info=True,
                    extra={'extra_fields': {**fields, 'duration_ms': (time.perf_counter() - start_time) * 1000}}
                )
                raise

            logger.info(
                f"{request.method} {request.url.path} -> {response.status_code}",
                extra={'extra_fields': {
                    **fields,
                    'status_code': response.status_code,
                    'duration_ms': round((time.perf_counter() - start_time) * 1000, 2),
                }}
            )
            response.headers['X-Request-ID'] = request_id
            if correlation_id:
                response.headers['X-Correlation-ID'] = correlation_id
            return response
        finally:
            request_id_var.reset(tokens[0])
            correlation_id_var.reset(tokens[1])

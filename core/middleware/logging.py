"""
Structured logging middleware with PII masking.

Applicants submit names, email addresses and phone numbers; none of those may
reach the logs in clear text. Request bodies are never logged since they
carry uploaded documents.
"""

import logging
import time
import json
import re
import uuid
from typing import Callable, Any
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
import traceback

logger = logging.getLogger(__name__)


# Sensitive field patterns to mask in logs
SENSITIVE_FIELD_PATTERNS = [
    re.compile(r'password', re.IGNORECASE),
    re.compile(r'token', re.IGNORECASE),
    re.compile(r'api[_-]?key', re.IGNORECASE),
    re.compile(r'secret', re.IGNORECASE),
    re.compile(r'authorization', re.IGNORECASE),
    re.compile(r'cookie', re.IGNORECASE),
]

# PII patterns to detect and mask
PII_PATTERNS = [
    (re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b'), '[EMAIL]'),
    (re.compile(r'\+\d{1,3}[-.\s]?\d{1,4}[-.\s]?\d{1,4}[-.\s]?\d{1,9}'), '[PHONE]'),
    (re.compile(r'\b\d{3}[-.]?\d{3}[-.]?\d{4}\b'), '[PHONE]'),
]

SKIP_PATHS = ('/health', '/ready')


def is_sensitive_field(field_name: str) -> bool:
    """Whether a field or header name indicates a credential."""
    return any(pattern.search(field_name) for pattern in SENSITIVE_FIELD_PATTERNS)


def mask_pii(text: str) -> str:
    """Replace email addresses and phone numbers in free text."""
    for pattern, replacement in PII_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def mask_sensitive_data(data: Any, depth: int = 0, max_depth: int = 10) -> Any:
    """
    Recursively mask credentials and PII in dictionaries and lists.

    Args:
        data: Data structure to mask
        depth: Current recursion depth
        max_depth: Maximum recursion depth

    Returns:
        Data structure with sensitive values masked
    """
    if depth > max_depth:
        return "[MAX_DEPTH_EXCEEDED]"

    if isinstance(data, dict):
        return {
            key: "[REDACTED]" if is_sensitive_field(str(key))
            else mask_sensitive_data(value, depth + 1, max_depth)
            for key, value in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive_data(item, depth + 1, max_depth) for item in data]
    if isinstance(data, str):
        return mask_pii(data)
    return data


def mask_headers(headers: dict) -> dict:
    """Mask credential headers, keeping the auth scheme for debugging."""
    masked = {}
    for key, value in headers.items():
        if not is_sensitive_field(key):
            masked[key] = value
        elif key.lower() == 'authorization' and ' ' in value:
            masked[key] = f"{value.split(' ', 1)[0]} [REDACTED]"
        else:
            masked[key] = "[REDACTED]"
    return masked


def get_client_ip(request: Request) -> str:
    """Client IPv4 address with the last octet masked."""
    forwarded_for = request.headers.get('x-forwarded-for')
    if forwarded_for:
        ip = forwarded_for.split(',')[0].strip()
    else:
        ip = request.client.host if request.client else 'unknown'

    parts = ip.split('.')
    if len(parts) == 4:
        return f"{parts[0]}.{parts[1]}.{parts[2]}.xxx"
    return 'unknown'


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs one JSON line when a request starts and one when it completes.

    Each request gets an id (taken from ``x-request-id`` when present) that
    is echoed back in the response headers.
    """

    def __init__(self, app: ASGIApp, slow_request_seconds: float = 5.0):
        super().__init__(app)
        self.slow_request_seconds = slow_request_seconds

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get('x-request-id', str(uuid.uuid4()))
        request.state.request_id = request_id

        if request.url.path.startswith(SKIP_PATHS):
            response = await call_next(request)
            response.headers['x-request-id'] = request_id
            return response

        start_time = time.perf_counter()
        logger.info(json.dumps({
            'event': 'request_started',
            'request_id': request_id,
            'method': request.method,
            'path': mask_pii(request.url.path),
            'query_params': mask_sensitive_data(dict(request.query_params)),
            'client_ip': get_client_ip(request),
            'company_id': request.headers.get('x-company-id'),
            'headers': mask_headers(dict(request.headers)),
        }))

        response = None
        try:
            response = await call_next(request)
        finally:
            duration = time.perf_counter() - start_time
            status_code = response.status_code if response else 500
            completed = {
                'event': 'request_completed',
                'request_id': request_id,
                'method': request.method,
                'path': mask_pii(request.url.path),
                'status_code': status_code,
                'duration_ms': round(duration * 1000, 2),
            }
            if duration > self.slow_request_seconds:
                completed['performance'] = 'slow'

            if status_code >= 500:
                logger.error(json.dumps(completed))
            elif status_code >= 400:
                logger.warning(json.dumps(completed))
            else:
                logger.info(json.dumps(completed))

        response.headers['x-request-id'] = request_id
        return response


class StructuredFormatter(logging.Formatter):
    """Formats log records as single-line JSON with PII masked."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            'timestamp': self.formatTime(record, self.datefmt),
            'level': record.levelname,
            'logger': record.name,
            'message': mask_pii(record.getMessage()),
        }

        if hasattr(record, 'request_id'):
            log_data['request_id'] = record.request_id

        if record.exc_info and record.exc_info[0] is not None:
            log_data['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': mask_pii(str(record.exc_info[1])),
                'traceback': traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_data)


def setup_logging(log_level: str = "INFO", json_logs: bool = True):
    """
    Configure application-wide logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Whether to format logs as JSON
    """
    level = getattr(logging, log_level.upper())
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    if json_logs:
        console_handler.setFormatter(StructuredFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        )
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
    logging.getLogger('pdfminer').setLevel(logging.WARNING)

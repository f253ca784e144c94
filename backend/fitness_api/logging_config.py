"""
Logging setup and request logging middleware.
"""
import json
import logging
import time
from typing import Any

from fastapi import Request

from .config import settings

logger = logging.getLogger("fitness_api.requests")

SENSITIVE_FIELDS = {"password", "token", "secret", "authorization"}
MAX_BODY_LOG_BYTES = 4096


class ColoredFormatter(logging.Formatter):
    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if not color:
            return super().format(record)
        original_levelname = record.levelname
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original_levelname


def setup_logging(level: str = None) -> logging.Logger:
    """Attach a single coloured console handler to the package logger."""
    root = logging.getLogger("fitness_api")
    root.setLevel((level or settings.log_level).upper())
    root.handlers.clear()

    handler = logging.StreamHandler()
    handler.setFormatter(ColoredFormatter(
        fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    ))
    root.addHandler(handler)
    root.propagate = False
    return root


def mask_sensitive_data(data: Any) -> Any:
    """Mask password/token-like fields, recursing into nested objects."""
    if isinstance(data, list):
        return [mask_sensitive_data(item) for item in data]
    if not isinstance(data, dict):
        return data

    masked = {}
    for key, value in data.items():
        if any(sensitive in str(key).lower() for sensitive in SENSITIVE_FIELDS):
            masked[key] = "***MASKED***"
        else:
            masked[key] = mask_sensitive_data(value)
    return masked


def mask_email(email: str) -> str:
    """Keep the first character and the domain: ``a***@example.com``."""
    local, sep, domain = (email or "").partition("@")
    if not sep:
        return "***"
    return f"{local[:1]}***@{domain}"


async def _body_for_log(request: Request) -> str:
    content_type = request.headers.get("content-type", "")
    if not content_type.lower().startswith("application/json"):
        return ""
    raw = await request.body()  # Starlette caches this, downstream can still read
    if not raw:
        return ""
    if len(raw) > MAX_BODY_LOG_BYTES:
        return f"<{len(raw)} bytes: skipped (too large)>"
    try:
        parsed = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError):
        return "<unparseable JSON>"
    return json.dumps(mask_sensitive_data(parsed), ensure_ascii=False)


async def log_requests(request: Request, call_next):
    start_time = time.time()
    line = f"{request.method} {request.url.path}"
    if request.query_params:
        line += f" | query={dict(request.query_params)}"
    if settings.log_request_body:
        body = await _body_for_log(request)
        if body:
            line += f" | body={body}"
    logger.info(line)

    try:
        response = await call_next(request)
    except Exception:
        logger.exception(f"{request.method} {request.url.path} raised after {time.time() - start_time:.3f}s")
        raise

    process_time = time.time() - start_time
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({process_time:.3f}s)")
    if process_time > 1.0:
        logger.warning(f"SLOW REQUEST: {process_time:.3f}s for {request.method} {request.url.path}")
    return response

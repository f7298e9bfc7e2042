import inspect
import json
import logging
import re
import sys
import time
from contextvars import ContextVar
from functools import wraps
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional

# Context variable for correlation ID (one per checkout/job/export flow)
correlation_id_var: ContextVar[Optional[str]] = ContextVar('correlation_id', default=None)

# Patterns for secrets that should be masked in logs
SECRET_PATTERNS = [
    (re.compile(r'\b(sk|rk)_(live|test)_[A-Za-z0-9]{8,}'), r'\1_\2_***MASKED***'),
    (re.compile(r'\bwhsec_[A-Za-z0-9]{8,}'), 'whsec_***MASKED***'),
    (re.compile(r'(api[_-]?key\s*[=:]\s*)["\']?[\w-]{20,}["\']?', re.IGNORECASE), r'\1***MASKED***'),
    (re.compile(r'(bearer\s+)[\w-]{20,}', re.IGNORECASE), r'\1***MASKED***'),
    (re.compile(r'(authorization\s*[=:]\s*)["\']?[\w-]{20,}["\']?', re.IGNORECASE), r'\1***MASKED***'),
]

DEFAULT_FORMAT = "%(asctime)s - [%(correlation_id)s] - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Logs are written to <project root>/logs regardless of the working directory
BASE_DIR = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = BASE_DIR / "logs"


def mask_secrets(text: str) -> str:
    """Mask Stripe keys, API keys and bearer tokens in text."""
    for pattern, replacement in SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SecretMaskingFilter(logging.Filter):
    """Filter to mask secrets in log messages."""

    def filter(self, record):
        if isinstance(record.msg, str):
            record.msg = mask_secrets(record.msg)
        if record.args:
            record.args = tuple(
                mask_secrets(arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


class CorrelationIdFilter(logging.Filter):
    """Filter to inject correlation ID into log records."""

    def filter(self, record):
        record.correlation_id = get_correlation_id() or "N/A"
        return True


class JsonFormatter(logging.Formatter):
    """Formatter for structured JSON logging."""

    def format(self, record):
        log_data = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, 'correlation_id', 'N/A'),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_data'):
            log_data.update(record.extra_data)

        return json.dumps(log_data)


class ColorFormatter(logging.Formatter):
    """Adds level colors to console output."""

    grey = "\x1b[38;20m"
    yellow = "\x1b[33;20m"
    red = "\x1b[31;20m"
    bold_red = "\x1b[31;1m"
    reset = "\x1b[0m"

    FORMATS = {
        logging.DEBUG: grey + DEFAULT_FORMAT + reset,
        logging.INFO: grey + DEFAULT_FORMAT + reset,
        logging.WARNING: yellow + DEFAULT_FORMAT + reset,
        logging.ERROR: red + DEFAULT_FORMAT + reset,
        logging.CRITICAL: bold_red + DEFAULT_FORMAT + reset,
    }

    def format(self, record):
        formatter = logging.Formatter(self.FORMATS.get(record.levelno), datefmt=DATE_FORMAT)
        return formatter.format(record)


def setup_log_file(logs_dir: Path = LOGS_DIR, clear_log: bool = False) -> Path:
    """Create the logs directory and optionally truncate the log file."""
    logs_dir.mkdir(parents=True, exist_ok=True)
    log_file = logs_dir / "app.log"
    if clear_log and log_file.exists():
        log_file.write_text("")
    return log_file


def configure_logger(
    name: str,
    log_file: Path,
    log_level: int = logging.INFO,
    use_json: bool = False,
    mask_secrets: bool = True,
) -> logging.Logger:
    """
    Attach console and rotating file handlers to the named logger.
    Handlers are only added once per logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    if logger.hasHandlers():
        return logger

    filters = [CorrelationIdFilter()]
    if mask_secrets:
        filters.append(SecretMaskingFilter())

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(ColorFormatter())

    # Rotate after 5MB, keep 5 backup files
    file_handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5, encoding="utf-8")
    if use_json:
        file_handler.setFormatter(JsonFormatter(datefmt=DATE_FORMAT))
    else:
        file_handler.setFormatter(logging.Formatter(DEFAULT_FORMAT, datefmt=DATE_FORMAT))

    for handler in (console_handler, file_handler):
        for log_filter in filters:
            handler.addFilter(log_filter)
        logger.addHandler(handler)

    return logger


def setup_logger(
    name: str = "interview_generator",
    log_level: int = logging.INFO,
    clear_log: bool = False,
    use_json: bool = False,
    mask_secrets: bool = True,
    logs_dir: Path = LOGS_DIR,
) -> logging.Logger:
    """
    Sets up the package logger with console (colored) and file (rotating) handlers.

    Args:
        name: Logger name
        log_level: Logging level
        clear_log: If True, clears the log file at startup
        use_json: If True, uses JSON formatter for file output
        mask_secrets: If True, masks Stripe keys and tokens in logs
        logs_dir: Directory holding app.log
    """
    log_file = setup_log_file(logs_dir, clear_log)
    return configure_logger(name, log_file, log_level, use_json, mask_secrets)


def set_correlation_id(correlation_id: str):
    """Set the correlation ID for the current context."""
    correlation_id_var.set(correlation_id)


def get_correlation_id() -> Optional[str]:
    """Get the correlation ID for the current context."""
    return correlation_id_var.get()


logger = logging.getLogger(__name__)


def log_execution_time(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to log the execution time of a function."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.time()
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error in {func.__name__} after {time.time() - start_time:.4f} seconds: {e}")
            raise
        logger.info(f"Finished {func.__name__} in {time.time() - start_time:.4f} seconds")
        return result
    return wrapper


def log_async_execution_time(func: Callable[..., Any]) -> Callable[..., Any]:
    """Decorator to log the execution time of a coroutine function."""
    if not inspect.iscoroutinefunction(func):
        raise TypeError(f"{func.__name__} is not a coroutine function")

    @wraps(func)
    async def wrapper(*args, **kwargs):
        start_time = time.time()
        logger.info(f"Starting async execution of: {func.__name__}")
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            logger.error(f"Error in async {func.__name__} after {time.time() - start_time:.4f} seconds: {e}")
            raise
        logger.info(f"Finished async execution of: {func.__name__} in {time.time() - start_time:.4f} seconds")
        return result
    return wrapper

"""Logging configuration shared by the notifications, reporting and webhooks domains.

stdlib logging owns the handlers (console plus rotating files); structlog
owns the processor chain and rendering. Every domain module calls
``configure_logging()`` at import; only the first call in a process takes
effect unless ``force=True``.

Push subscription keys, webhook secrets and signatures are masked before
rendering, whichever logger emits them.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

import structlog

_LEVELS_BY_ENV = {
    "production": "INFO",
    "staging": "INFO",
    "development": "DEBUG",
    "test": "WARNING",
}

REDACTED = "***"
SENSITIVE_KEYS = frozenset({"auth", "authorization", "p256dh", "secret", "signature", "webhook_secret"})

_MAX_LOG_BYTES = 10 * 1024 * 1024
_BACKUP_COUNT = 5

_configured = False


def _current_env() -> str:
    return (os.getenv("ENV") or os.getenv("ENVIRONMENT") or os.getenv("PROTEAN_ENV") or "development").lower()


def get_log_level() -> str:
    """Get log level based on environment."""
    return os.getenv("LOG_LEVEL", _LEVELS_BY_ENV.get(_current_env(), "INFO"))


def redact_sensitive(logger, method_name, event_dict):
    """structlog processor: mask credential-bearing keys."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        if event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def _rotating_handler(path: Path, level) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        filename=path,
        maxBytes=_MAX_LOG_BYTES,
        backupCount=_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    return handler


def setup_stdlib_logging(log_dir: str = "logs", log_file_prefix: str = "notify") -> None:
    """Console plus ``<prefix>.log`` and ``<prefix>_error.log`` under ``log_dir``."""
    log_level = get_log_level()

    log_path = Path(log_dir)
    log_path.mkdir(exist_ok=True)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [
        console_handler,
        _rotating_handler(log_path / f"{log_file_prefix}.log", log_level),
        _rotating_handler(log_path / f"{log_file_prefix}_error.log", logging.ERROR),
    ]

    # Outbound HTTP clients and the job scheduler are chatty below WARNING
    for name in ("httpx", "httpcore", "asyncio", "apscheduler"):
        logging.getLogger(name).setLevel(logging.WARNING)


def build_processors(env: str | None = None) -> list:
    """The structlog chain: JSON in production/staging, rich console otherwise."""
    env = env or _current_env()
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        redact_sensitive,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.LINENO,
                structlog.processors.CallsiteParameter.FUNC_NAME,
            ]
        ),
    ]

    if env in ["production", "staging"]:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.RichTracebackFormatter(show_locals=False, max_frames=2),
            )
        )
    return processors


def configure_logging(log_dir: str = "logs", log_file_prefix: str = "notify", force: bool = False) -> None:
    """Configure stdlib handlers and structlog once per process."""
    global _configured
    if _configured and not force:
        return

    setup_stdlib_logging(log_dir=log_dir, log_file_prefix=log_file_prefix)
    structlog.configure(
        processors=build_processors(),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _configured = True


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    return structlog.get_logger(name)

"""loguru setup for SnapLink: sinks, the REQUEST level and stdlib interception."""

import logging
import os
import sys

from loguru import logger

from snaplink.core.config import settings

REQUEST_LEVEL = "REQUEST"
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi")


class InterceptHandler(logging.Handler):
    """Forward stdlib records (services, repositories, uvicorn) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the real call site
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _register_request_level() -> None:
    try:
        logger.level(REQUEST_LEVEL)
    except ValueError:
        logger.level(REQUEST_LEVEL, no=25, color="<green>")


def setup_logging():
    """
    Route every SnapLink log record through loguru.

    A rotating file sink in ``LOG_DIR`` is always installed, serialized as
    JSON when ``LOG_JSON`` is set; stderr is added in debug mode.
    """
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    level = settings.LOG_LEVEL.upper()

    logger.remove()
    if settings.DEBUG:
        logger.add(sys.stderr, level=level, format=settings.LOG_FORMAT, backtrace=True, diagnose=True)

    file_options = {"serialize": True} if settings.LOG_JSON else {"format": settings.LOG_FORMAT}
    logger.add(
        os.path.join(settings.LOG_DIR, settings.LOG_FILENAME),
        level=level,
        rotation=settings.LOG_ROTATION,
        retention=settings.LOG_RETENTION,
        compression="gz",
        **file_options,
    )

    _register_request_level()

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [InterceptHandler()] if name in INTERCEPTED_LOGGERS else []
        stdlib_logger.propagate = name not in INTERCEPTED_LOGGERS

    return logger


def log_url_access(short_code: str, ip_address: str, user_agent: str = "") -> None:
    """Emit a structured ``url_access`` event for a redirect."""
    logger.bind(
        event_type="url_access",
        ip=ip_address,
        short_code=short_code,
        user_agent=user_agent,
    ).info(f"URL accessed: {short_code}")

from fastapi import Request
import logging
from typing import Any

from rich.logging import RichHandler

from ytplay.config.settings import LoggingConfig, config

logger = logging.getLogger("ytplay.request")


def setup_logging(settings: LoggingConfig = config.logging) -> None:
    """Configure root logging once, with rich output when enabled"""
    handlers = []
    if settings.enable_rich:
        handlers.append(RichHandler(rich_tracebacks=True, show_path=False))
    else:
        handlers.append(logging.StreamHandler())

    logging.basicConfig(
        level=settings.level,
        format=settings.format,
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )
    # Upstream URLs carry signed tokens
    logging.getLogger("httpx").setLevel(logging.WARNING)


def log_with_context(
    request: Request,
    level: int,
    message: str,
    **kwargs: Any
) -> None:
    """
    Log with request context.
    Automatically includes request_id for tracing.
    """
    request_id = getattr(request.state, "request_id", "unknown")
    extra = {
        "request_id": request_id,
        **kwargs
    }
    logger.log(level, f"[{request_id}] {message}", extra=extra)

def log_info(request: Request, message: str, **kwargs: Any) -> None:
    log_with_context(request, logging.INFO, message, **kwargs)

def log_error(request: Request, message: str, **kwargs: Any) -> None:
    log_with_context(request, logging.ERROR, message, **kwargs)

def log_warning(request: Request, message: str, **kwargs: Any) -> None:
    log_with_context(request, logging.WARNING, message, **kwargs)

def log_debug(request: Request, message: str, **kwargs: Any) -> None:
    log_with_context(request, logging.DEBUG, message, **kwargs)

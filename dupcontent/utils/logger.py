"""Logging utilities for the duplicate-content engine.

Provides small helpers that attach a JSON-serialized, length-capped context
to each log line so callers can grep analysis runs by their counts and ids.
"""
import json
import logging
from typing import Any, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger('dupcontent')

_max_context_length = 1000


def configure_logging(level: str = "INFO", fmt: Optional[str] = None, max_context_length: int = 1000) -> None:
    """Apply level, format and context cap to the engine logger.

    Args:
        level: Logging level name (``DEBUG``, ``INFO``, ...)
        fmt: Optional format string for a dedicated handler
        max_context_length: Maximum length of the JSON context appended to messages
    """
    global _max_context_length
    _max_context_length = max_context_length
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if fmt:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S'))
        logger.handlers = [handler]
        logger.propagate = False


def safe_json(obj: Any, max_length: Optional[int] = None) -> str:
    """Serialize object to JSON, truncating long output.

    Args:
        obj: Object to serialize
        max_length: Maximum length of output string (defaults to the configured cap)

    Returns:
        JSON string
    """
    limit = max_length if max_length is not None else _max_context_length
    try:
        json_str = json.dumps(obj, ensure_ascii=False, default=str, sort_keys=True)
    except (TypeError, ValueError):
        return "<unable to serialize>"

    if len(json_str) > limit:
        json_str = json_str[:limit] + "... [truncated]"
    return json_str


def log_info(message: str, **kwargs) -> None:
    """Log info message with optional context."""
    if kwargs:
        logger.info(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.info(message)


def log_warning(message: str, **kwargs) -> None:
    """Log warning message with optional context."""
    if kwargs:
        logger.warning(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.warning(message)


def log_error(message: str, **kwargs) -> None:
    """Log error message with optional context."""
    if kwargs:
        logger.error(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.error(message)


def log_debug(message: str, **kwargs) -> None:
    """Log debug message with optional context."""
    if not logger.isEnabledFor(logging.DEBUG):
        return
    if kwargs:
        logger.debug(f"{message} | Context: {safe_json(kwargs)}")
    else:
        logger.debug(message)


def log_analysis_progress(stage: str, **kwargs) -> None:
    """Log analysis progress through the pipeline stages.

    Args:
        stage: Current stage of processing
        **kwargs: Additional context
    """
    log_info(f"Analysis progress: {stage}", **kwargs)

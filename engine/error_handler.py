"""
Centralized error handling and logging for the generators.

This module provides:
- Centralized logging to files
- Custom exception types for the generation pipeline
- Batch-friendly error recording so one bad asset never halts a build
"""
import logging
import traceback
from pathlib import Path
from typing import Optional, Dict, Any
from datetime import datetime

# Setup logging directory
LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_DIR.mkdir(exist_ok=True)

# Configure logger
logger = logging.getLogger("pixelforge")
logger.setLevel(logging.DEBUG)

# Prevent duplicate handlers
if not logger.handlers:
    # File handler for detailed logs
    log_file = LOG_DIR / f"pixelforge_{datetime.now().strftime('%Y%m%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )

    # Console handler for warnings/errors
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter('%(levelname)s: %(message)s')
    )

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)


class GenerationError(Exception):
    """Base exception for generation errors."""
    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class CanvasError(GenerationError):
    """A drawing surface could not be allocated."""
    pass


class TextureLoadError(GenerationError):
    """A pre-rendered texture could not be read or decoded."""
    pass


class ConfigError(GenerationError):
    """Configuration file is unreadable or malformed."""
    pass


def log_error(
    error: Exception,
    context: str = "",
    user_message: Optional[str] = None,
) -> None:
    """
    Log an error with context information.

    Args:
        error: The exception that occurred
        context: Where the error occurred (e.g., "paladin_generate", "icon_texture")
        user_message: Optional friendlier message recorded next to the trace
    """
    error_type = type(error).__name__
    error_msg = str(error)
    trace = traceback.format_exc()

    logger.error(f"Error in {context}: {error_type}: {error_msg}\n{trace}")
    if user_message:
        logger.info(f"{context}: {user_message}")


def handle_batch_error(
    error: Exception,
    context: str,
    item: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Record a failed item of a batch build and let the batch continue.

    Args:
        error: The exception that occurred
        context: Batch stage (e.g., "humanoids", "gems")
        item: Identifier of the asset that failed

    Returns:
        A small dict describing the failure, suitable for telemetry.
    """
    user_message = getattr(error, "user_message", None)
    log_error(error, context, user_message=user_message)
    return {
        "context": context,
        "item": item,
        "error": type(error).__name__,
        "message": str(error),
    }

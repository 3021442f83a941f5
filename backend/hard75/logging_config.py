import logging
import sys
from pathlib import Path

from hard75.config import get_settings


def setup_logging():
    """Configure logging for the application."""
    settings = get_settings()
    log_dir = Path(settings.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    level = getattr(logging, settings.log_level.upper(), logging.INFO)

    # Root logger
    logger = logging.getLogger()
    logger.setLevel(level)

    # Already configured (reload / repeated startup)
    if any(getattr(h, "_hard75", False) for h in logger.handlers):
        return

    # File handler
    file_handler = logging.FileHandler(log_dir / "app.log")
    file_handler.setLevel(level)
    file_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    file_handler.setFormatter(file_formatter)
    file_handler._hard75 = True

    # Console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_formatter = logging.Formatter(
        '%(levelname)s: %(name)s: %(message)s'
    )
    console_handler.setFormatter(console_formatter)
    console_handler._hard75 = True

    # Add handlers
    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    # Specific loggers
    logging.getLogger("uvicorn.access").handlers = []
    logging.getLogger("uvicorn.error").handlers = []

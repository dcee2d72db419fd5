import logging
import os
import sys

_INITIALISED = False
_LEVEL_ENV = "S3_UPLOAD_API_LOG_LEVEL"


def _env_level(default: int) -> int:
    value = os.getenv(_LEVEL_ENV)
    if not value:
        return default
    level = logging.getLevelName(value.upper())
    if isinstance(level, int):
        return level
    return default


def setup_default_logging():
    """Set up default logging configuration if none exists."""
    global _INITIALISED
    if _INITIALISED:
        return
    _INITIALISED = True
    if not logging.root.handlers:
        logging.basicConfig(
            level=_env_level(logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            handlers=[
                logging.StreamHandler(sys.stdout),
            ],
        )


def configure_logging(level=logging.INFO, log_file=None):
    """Configure logging for the s3_upload_api package.

    Args:
        level: The logging level (default: logging.INFO), the
            S3_UPLOAD_API_LOG_LEVEL environment variable wins when set.
        log_file: Optional path to a log file
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=_env_level(level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=handlers,
        force=True,  # Override any existing configuration
    )


# Call setup_default_logging when this module is imported
setup_default_logging()

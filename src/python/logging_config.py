"""
Logging setup for the emission timeline.

Modules log through `logging.getLogger(__name__)`; setup_logging() attaches
the handlers once at startup, reading the `logging` section of config.json:

    level         root level (DEBUG ... CRITICAL)
    file          rotating log file, relative paths resolved from the project root
    maxBytes      size at which the file rotates
    backupCount   rotated files kept
    console       also log to stderr
    consoleLevel  stderr threshold
    raiseOnError  turn ERROR records into exceptions (debugging aid)
"""

import logging
import logging.handlers
from pathlib import Path
from config_manager import PROJECT_ROOT, config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Third-party loggers kept at WARNING regardless of the root level
QUIET_LOGGERS = ('PyQt6', 'pyqtgraph')


class ErrorRaisingHandler(logging.Handler):
    """Raises RuntimeError for every ERROR or CRITICAL record."""

    def emit(self, record):
        if record.levelno >= logging.ERROR:
            raise RuntimeError(f"Logger error: {record.getMessage()}")


def _level(name: str, fallback: int) -> int:
    return getattr(logging, str(name).upper(), fallback)


def _log_path(log_file: str) -> Path:
    path = Path(log_file)
    return path if path.is_absolute() else PROJECT_ROOT / path


def setup_logging(raise_on_error: bool | None = None) -> None:
    """
    Replace the root logger's handlers with the configured ones.

    Args:
        raise_on_error: Overrides the raiseOnError setting when not None
    """
    level = _level(config.get_logging_setting("level", "INFO"), logging.INFO)
    if raise_on_error is None:
        raise_on_error = config.get_logging_setting("raiseOnError", False)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    if config.get_logging_setting("console", True):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(_level(config.get_logging_setting("consoleLevel", "WARNING"), logging.WARNING))
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    log_path = _log_path(config.get_logging_setting("file", "logs/timeline.log"))
    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=config.get_logging_setting("maxBytes", 10 * 1024 * 1024),
            backupCount=config.get_logging_setting("backupCount", 3),
            encoding='utf-8'
        )
    except OSError as e:
        # Keep running with console logging only
        print(f"Warning: Could not initialize file logging: {e}")
    else:
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        root_logger.info("Emission Timeline Started - level %s, log file %s",
                         logging.getLevelName(level), log_path)

    if raise_on_error:
        root_logger.addHandler(ErrorRaisingHandler())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

"""
Logger utility - Configures logging for the bubble engine and the demo.
Handler sizes, the console threshold and per-component levels come from the
``logging`` section of the application config.
"""

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from ..core.config import Config

FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Loggers switched to DEBUG when the app runs with debug enabled
DEBUG_LOGGERS = ("speech_bubbles.engine", "speech_bubbles.streaming", "speech_bubbles.renderer")


def _level(name: str) -> int:
    level = logging.getLevelName(name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {name}")
    return level


def setup_logging(config: Config, log_dir: Optional[Path] = None) -> Path:
    """Install console, rotating file and error file handlers on the root logger.

    Returns the path of the main log file.
    """
    settings = config.logging
    log_dir = Path(log_dir or config.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(_level(config.log_level))
    root_logger.handlers.clear()

    # Console stays quiet so it doesn't interleave with the bubble output
    console_handler = logging.StreamHandler()
    console_handler.setLevel(_level(settings.console_level))
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    root_logger.addHandler(console_handler)

    log_file = log_dir / settings.file_name
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=settings.max_file_mb * 1024 * 1024,
        backupCount=settings.backup_count
    )
    file_handler.setLevel(_level(config.log_level))
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root_logger.addHandler(file_handler)

    error_handler = logging.handlers.RotatingFileHandler(
        log_dir / 'errors.log',
        maxBytes=settings.error_max_file_mb * 1024 * 1024,
        backupCount=settings.error_backup_count
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(logging.Formatter(FILE_FORMAT))
    root_logger.addHandler(error_handler)

    for name, level in settings.levels.items():
        logging.getLogger(name).setLevel(_level(level))

    if config.debug:
        root_logger.setLevel(logging.DEBUG)
        file_handler.setLevel(logging.DEBUG)
        for name in DEBUG_LOGGERS:
            logging.getLogger(name).setLevel(logging.DEBUG)

    logging.getLogger(__name__).info(f"Logging to {log_file} (level {config.log_level})")
    return log_file

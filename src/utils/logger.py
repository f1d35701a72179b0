"""
Centralized logging infrastructure for the flappy neuroevolution project.

Usage:
    from src.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Generation started")
    logger.debug("Alive: 187")
    logger.warning("Tick overran its slot")

Configuration:
    Set LOG_LEVEL in config.py to control verbosity:
    - DEBUG: All messages including per-tick tracing and out-of-band inputs
    - INFO: Generation summaries and speed changes (default)
    - WARNING: Warnings and errors only
    - ERROR: Errors only
"""

import logging
import sys
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Optional


class LogLevel(Enum):
    """Log levels for configuration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR


ROOT_LOGGER_NAME = 'flappy'

# Module-level state
_initialized = False
_file_handler: Optional[logging.FileHandler] = None


class ColoredFormatter(logging.Formatter):
    """Formatter that adds colors to console output."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
        'RESET': '\033[0m',
    }

    def __init__(self, fmt: str, use_colors: bool = True):
        super().__init__(fmt)
        self.use_colors = use_colors and sys.stdout.isatty()

    def format(self, record: logging.LogRecord) -> str:
        if self.use_colors:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            record = logging.makeLogRecord(record.__dict__)
            record.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def setup_logging(
    log_dir: str = 'logs',
    level: LogLevel = LogLevel.INFO,
    console_output: bool = True,
    file_output: bool = False,
    log_filename: Optional[str] = None,
) -> None:
    """
    Initialize the logging system.

    Calling it again after initialization only adjusts the level.

    Args:
        log_dir: Directory for log files
        level: Minimum log level to capture
        console_output: Whether to output to console
        file_output: Whether to output to file
        log_filename: Custom log filename (default: evolution_YYYYMMDD_HHMMSS.log)
    """
    global _initialized, _file_handler

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)

    if _initialized:
        root_logger.setLevel(level.value)
        return

    root_logger.setLevel(level.value)
    root_logger.handlers.clear()

    # Console handler with colors
    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_fmt = ColoredFormatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            use_colors=True
        )
        console_handler.setFormatter(console_fmt)
        root_logger.addHandler(console_handler)

    # File handler without colors
    if file_output:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)
        if log_filename is None:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
            log_filename = f'evolution_{timestamp}.log'

        _file_handler = logging.FileHandler(path / log_filename, mode='a', encoding='utf-8')
        _file_handler.setLevel(logging.DEBUG)  # Capture everything in file
        file_fmt = logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
        )
        _file_handler.setFormatter(file_fmt)
        root_logger.addHandler(_file_handler)

    _initialized = True
    root_logger.debug(f"Logging initialized (level={level.name}, file={file_output})")


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Logger instance under the project namespace

    Example:
        logger = get_logger(__name__)
        logger.info("Message")
    """
    # Strip 'src.' prefix for cleaner names
    if name.startswith('src.'):
        name = name[4:]

    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def get_log_path() -> Optional[Path]:
    """Get the current log file path."""
    if _file_handler is not None:
        return Path(_file_handler.baseFilename)
    return None


def log_generation_metrics(
    generation: int,
    population: int,
    best_age: int,
    mean_age: float,
    parent_age: Optional[int] = None,
    out_of_band: Optional[int] = None,
    ticks: Optional[int] = None,
) -> None:
    """
    Log generation metrics in a consistent format.

    Args:
        generation: Index of the generation that just ended
        population: Number of birds in it
        best_age: Age of the longest surviving bird
        mean_age: Mean age at death
        parent_age: Age of the bird chosen as parent (if any)
        out_of_band: Number of sensed inputs outside the expected band
        ticks: Ticks the generation lasted
    """
    logger = get_logger('evolution')

    metrics = [
        f"gen={generation}",
        f"pop={population}",
        f"best={best_age}",
        f"mean={mean_age:.1f}",
    ]

    if parent_age is not None:
        metrics.append(f"parent={parent_age}")
    if ticks is not None:
        metrics.append(f"ticks={ticks}")
    if out_of_band:
        metrics.append(f"oob={out_of_band}")

    logger.info(" | ".join(metrics))


def log_speed_change(tick_rate: float) -> None:
    """Log a tick rate change from the speed control."""
    get_logger('clock').info(f"SPEED | {tick_rate:.0f} ticks/s")

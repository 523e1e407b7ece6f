"""
Logging configuration for tracestitch.

Every pipeline stage logs under its own child of the ``tracestitch``
logger (``tracestitch.event_paths``, ``tracestitch.stitcher``, ...), and the
console shows which stage a line came from. The opcode replay can emit one
line per step at the custom TRACE level, enabled with ``--verbose``.
"""

import logging
import sys
from typing import Optional

from tracestitch.utils.colors import Colors

ROOT_LOGGER_NAME = 'tracestitch'

# Below DEBUG: one line per replayed structLogs step
TRACE = 5
logging.addLevelName(TRACE, 'TRACE')


class ColoredFormatter(logging.Formatter):
    """
    Formatter that colors the level name and exposes the pipeline stage.

    ``%(stage)s`` is the logger name without the ``tracestitch.`` prefix.
    """

    LEVEL_COLORS = {
        TRACE: Colors.DIM,
        logging.DEBUG: Colors.DIM,
        logging.INFO: Colors.BRIGHT_CYAN,
        logging.WARNING: Colors.BRIGHT_YELLOW,
        logging.ERROR: Colors.BRIGHT_RED,
        logging.CRITICAL: Colors.BOLD + Colors.BRIGHT_RED,
    }

    def __init__(self, fmt: str = None, datefmt: str = None, use_colors: bool = True):
        super().__init__(fmt, datefmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        record.stage = record.name.split('.', 1)[1] if '.' in record.name else record.name
        if not self.use_colors:
            return super().format(record)

        # Records are shared between handlers; the file log must stay plain
        levelname = record.levelname
        color = self.LEVEL_COLORS.get(record.levelno, '')
        reset = Colors.RESET if color else ''
        record.levelname = f"{color}{levelname}{reset}"
        try:
            return super().format(record)
        finally:
            record.levelname = levelname


class TracestitchLogger(logging.Logger):
    """Logger with a ``trace`` method for the per-step replay level."""

    def trace(self, msg, *args, **kwargs):
        if self.isEnabledFor(TRACE):
            self._log(TRACE, msg, args, **kwargs)


logging.setLoggerClass(TracestitchLogger)


def resolve_level(
    level: int = logging.WARNING,
    debug: bool = False,
    verbose: bool = False
) -> int:
    """Map the --debug/--verbose flags onto a logging level."""
    if verbose:
        return TRACE
    if debug:
        return logging.DEBUG
    return level


def setup_logging(
    level: int = logging.WARNING,
    quiet: bool = False,
    debug: bool = False,
    verbose: bool = False,
    log_file: Optional[str] = None,
    use_colors: bool = True
) -> logging.Logger:
    """
    Configure the ``tracestitch`` logger.

    Console output goes to stderr so stdout stays clean for the tree or
    JSON document. The optional log file always records at least DEBUG,
    and TRACE when ``verbose`` is set.

    Args:
        level: Console level when neither ``debug`` nor ``verbose`` is set
        quiet: Suppress console output entirely
        debug: Console level DEBUG
        verbose: Console level TRACE
        log_file: Optional path of a plain-text log file
        use_colors: Color level names when stderr is a terminal

    Returns:
        The configured ``tracestitch`` logger
    """
    console_level = resolve_level(level, debug, verbose)
    file_level = min(console_level, logging.DEBUG)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.handlers.clear()
    logger.propagate = False
    logger.setLevel(file_level if log_file else console_level)

    if not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level)
        colored = use_colors and hasattr(sys.stderr, 'isatty') and sys.stderr.isatty()
        console_handler.setFormatter(ColoredFormatter(
            fmt='%(levelname)s [%(stage)s]: %(message)s',
            use_colors=colored
        ))
        logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(file_level)
        file_handler.setFormatter(ColoredFormatter(
            fmt='%(asctime)s - %(stage)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
            use_colors=False
        ))
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = None) -> logging.Logger:
    """
    Get the ``tracestitch`` logger, or the child logger of one stage.

    Args:
        name: Stage name, e.g. 'stitcher' for ``tracestitch.stitcher``
    """
    if name:
        return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')
    return logging.getLogger(ROOT_LOGGER_NAME)


logger = get_logger()

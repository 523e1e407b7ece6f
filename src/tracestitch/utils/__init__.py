"""
Utilities module for tracestitch.

Provides exception handling, logging and colors.
"""

from .exceptions import (
    TracestitchError,
    StitchError,
    TraceInputError,
    AbiError,
    AbiLoadError,
    EventDecodeError,
    ConfigError,
    format_error,
    format_error_json,
)
from .logging import setup_logging, resolve_level, get_logger, logger, TRACE
from .colors import (
    Colors,
    SUPPORTS_COLOR,
    bold, dim, cyan,
    error, success, warning, info,
    opcode, address, pc_value,
)

__all__ = [
    # Exceptions
    'TracestitchError',
    'StitchError',
    'TraceInputError',
    'AbiError',
    'AbiLoadError',
    'EventDecodeError',
    'ConfigError',
    # Formatting
    'format_error',
    'format_error_json',
    # Logging
    'setup_logging',
    'resolve_level',
    'get_logger',
    'logger',
    'TRACE',
    # Colors
    'Colors',
    'SUPPORTS_COLOR',
    'bold', 'dim', 'cyan',
    'error', 'success', 'warning', 'info',
    'opcode', 'address', 'pc_value',
]

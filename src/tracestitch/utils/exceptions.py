"""
Custom exceptions for tracestitch.

This module provides a hierarchy of exceptions for the failure cases of
the stitching pipeline, along with utilities for formatting errors consistently.

Per-log reconciliation anomalies are not exceptions: they are collected as
``StitchIssue`` entries while the walk completes, and only the final
policy decision turns them into a ``StitchError``.
"""

import json
from typing import Any, Dict, List, Optional


class TracestitchError(Exception):
    """
    Base exception for all tracestitch errors.

    Attributes:
        message: Human-readable error message
        details: Additional context as key-value pairs
        error_code: Optional error code for programmatic handling
    """

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error": True,
            "type": self.error_code,
            "message": self.message,
            **self.details
        }

    def to_json(self, indent: int = 2) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)


# ============================================================================
# Stitching Errors
# ============================================================================

class StitchError(TracestitchError):
    """Raised when stitching produced warnings and lenient mode is off."""

    HEADER = "Warnings during stitch_logs_into_call_trace:"

    def __init__(self, warnings: List[str], **kwargs):
        self.warnings = list(warnings)
        message = "\n".join([self.HEADER] + self.warnings)
        details = {"warnings": self.warnings}
        details.update(kwargs)
        super().__init__(message, details, "StitchError")


# ============================================================================
# Input Errors
# ============================================================================

class TraceInputError(TracestitchError):
    """Raised when a trace, call tree or receipt blob has an unexpected shape."""

    def __init__(self, message: str, source: Optional[str] = None, **kwargs):
        details = {"source": source} if source else {}
        details.update(kwargs)
        super().__init__(message, details, "TraceInputError")


# ============================================================================
# ABI Errors
# ============================================================================

class AbiError(TracestitchError):
    """Base class for ABI-related errors."""

    def __init__(self, message: str, abi_path: Optional[str] = None, **kwargs):
        details = {}
        if abi_path:
            details["abi_path"] = abi_path
        details.update(kwargs)
        super().__init__(message, details, "AbiError")


class AbiLoadError(AbiError):
    """Raised when an ABI file cannot be read or has an unknown format."""

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.error_code = "AbiLoadError"


class EventDecodeError(AbiError):
    """Raised when a log cannot be decoded with its event ABI."""

    def __init__(self, event_name: str, reason: str, **kwargs):
        super().__init__(
            f"Failed to decode event {event_name}: {reason}",
            event=event_name,
            **kwargs
        )
        self.error_code = "EventDecodeError"


# ============================================================================
# Configuration Errors
# ============================================================================

class ConfigError(TracestitchError):
    """Raised when the configuration file is malformed."""

    def __init__(self, message: str, config_file: Optional[str] = None, **kwargs):
        details = {"config_file": config_file} if config_file else {}
        details.update(kwargs)
        super().__init__(message, details, "ConfigError")


# ============================================================================
# Error Formatting Utilities
# ============================================================================

def format_error(e: Exception, json_mode: bool = False) -> str:
    """
    Format an exception for display.

    Args:
        e: The exception to format
        json_mode: If True, output as JSON; otherwise use colored text

    Returns:
        Formatted error string
    """
    from tracestitch.utils.colors import error

    if isinstance(e, TracestitchError):
        if json_mode:
            return e.to_json()
        return error(e.message)
    if json_mode:
        return json.dumps(format_error_json(str(e), type(e).__name__), indent=2)
    return error(str(e))


def format_error_json(
    message: str,
    error_type: str = "Error",
    **kwargs
) -> Dict[str, Any]:
    """
    Create a standardized error JSON structure.

    Args:
        message: Error message
        error_type: Error type/code
        **kwargs: Additional fields to include

    Returns:
        Dictionary suitable for JSON output
    """
    return {
        "error": True,
        "type": error_type,
        "message": message,
        **kwargs
    }

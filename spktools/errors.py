"""
spktools Error Hierarchy

Unified exception hierarchy for the record-log tools.
All custom exceptions inherit from SpkToolsError for easy catching and filtering.

Usage:
    from spktools.errors import RecordFileError, SpkToolsError

    try:
        repair(path, codec)
    except RecordFileError as e:
        logger.error(f"Cannot rewrite: {e.message}, path: {e.context.get('path')}")
"""

from typing import Any

__all__ = [
    "ComponentLoadError",
    "ConfigurationError",
    "InvalidColorError",
    "InvalidSquareError",
    "RecordDecodeError",
    "RecordFileError",
    # Base error
    "SpkToolsError",
]


class SpkToolsError(Exception):
    """Base exception for all spktools errors.

    Attributes:
        code: Machine-readable error code for categorization
        message: Human-readable error description
        context: Additional context for debugging
    """
    code: str = "SPKTOOLS_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"[{self.code}] {self.message} ({ctx})"
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "context": self.context,
        }


# =============================================================================
# Record Errors
# =============================================================================


class RecordDecodeError(SpkToolsError):
    """A record could not be decoded at the current offset.

    Decoders raise this (or any other non-OSError exception) when the
    bytes at the cursor do not form a complete record. The scanner recovers
    from it locally by classifying the attempted range as corrupt.
    """
    code: str = "RECORD_DECODE_ERROR"


class RecordFileError(SpkToolsError):
    """A record file could not be read or rewritten.

    Wraps the underlying OSError. Fatal for the whole batch: files already
    rewritten stay rewritten.
    """
    code: str = "RECORD_FILE_ERROR"

    def __init__(
        self,
        message: str,
        path: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if path:
            self.context["path"] = path


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(SpkToolsError):
    """Invalid configuration."""
    code: str = "CONFIGURATION_ERROR"


class ComponentLoadError(ConfigurationError):
    """A codec or rules engine import path could not be resolved.

    Attributes:
        target: The ``module:attr`` path that failed
    """
    code: str = "COMPONENT_LOAD_ERROR"

    def __init__(
        self,
        message: str,
        target: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if target:
            self.context["target"] = target


# =============================================================================
# Rules Errors
# =============================================================================


class InvalidColorError(SpkToolsError):
    """Side value that is neither sente nor gote."""
    code: str = "INVALID_COLOR"


class InvalidSquareError(SpkToolsError):
    """Square index outside the 9x9 board."""
    code: str = "INVALID_SQUARE"

    def __init__(
        self,
        message: str,
        square: int | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        if square is not None:
            self.context["square"] = square

"""
Spyfield Error Hierarchy

Exception hierarchy for the rules engine and its configuration layer.
All custom exceptions inherit from SpyfieldError for easy catching and
filtering.

Only configuration and strict-mode helpers raise. The engine's public
move API is total: illegal moves are ignored, not reported.

Usage:
    from spyfield.errors import ConfigurationError

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(f"Bad settings: {e.message} ({e.context})")
"""

from typing import Any

__all__ = [
    "ConfigurationError",
    "InvalidMoveError",
    "InvalidStateError",
    "SpyfieldError",
    "ValidationError",
]


class SpyfieldError(Exception):
    """Base exception for all Spyfield errors.

    ``str(err)`` reads ``[CODE] message (key=value, ...)`` so a CLI can
    print it as is; ``to_dict`` gives the same data to JSON callers.

    Attributes:
        code: Stable tag such as ``CONFIGURATION_ERROR`` or ``INVALID_MOVE``
        message: Human-readable error description
        context: Offending settings keys, env vars or phase/move details
    """
    code: str = "SPYFIELD_ERROR"

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
# Game State Errors
# =============================================================================


class InvalidStateError(SpyfieldError):
    """Corrupted or unexpected game state.

    Raised when a model is constructed in a configuration that normal
    play can never produce (e.g. a heatmap whose bounds disagree with
    its cells).
    """
    code: str = "INVALID_STATE"


class InvalidMoveError(SpyfieldError):
    """Move that cannot be applied to current state.

    Only raised by ``GameEngine.apply_move_strict``; the default
    ``apply_move`` ignores such moves.

    Attributes:
        phase: The phase the move was applied against
        move_type: The rejected move's type tag
    """
    code: str = "INVALID_MOVE"

    def __init__(
        self,
        message: str,
        phase: str | None = None,
        move_type: str | None = None,
        context: dict[str, Any] | None = None,
    ):
        super().__init__(message, context=context)
        self.phase = phase
        self.move_type = move_type
        if phase:
            self.context["phase"] = phase
        if move_type:
            self.context["move_type"] = move_type


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(SpyfieldError):
    """Base class for validation errors."""
    code: str = "VALIDATION_ERROR"


class ConfigurationError(ValidationError):
    """Invalid configuration."""
    code: str = "CONFIGURATION_ERROR"

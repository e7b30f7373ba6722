"""Exception hierarchy for PlanGPS.

The transform engine never raises for an uncalibrated or degenerate
calibration; those are ordinary states reported through result objects.
Exceptions here belong to the layers around the engine: configuration
files, saved-map storage and persistence of calibration state.
"""

from typing import Any, Dict, List, Optional


class PlanGpsError(Exception):
    """Base exception for all PlanGPS errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize PlanGpsError with message and optional details.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error message with details if available."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


# =============================================================================
# CALIBRATION EXCEPTIONS
# =============================================================================

class CalibrationError(PlanGpsError):
    """Base exception for calibration-related errors."""
    pass


class NotCalibratedError(CalibrationError):
    """Raised when an operation needs calibration data but none is set."""

    def __init__(self, operation: str):
        super().__init__(
            f"Cannot {operation}: no calibration is set",
            {"operation": operation}
        )


# =============================================================================
# CONFIGURATION EXCEPTIONS
# =============================================================================

class ConfigurationError(PlanGpsError):
    """Base exception for configuration-related errors."""
    pass


class ConfigurationFileError(ConfigurationError):
    """Raised when configuration file cannot be found or parsed."""
    pass


class ConfigurationValidationError(ConfigurationError):
    """Raised when configuration validation fails."""

    def __init__(self, errors: List[str], source: Optional[str] = None):
        """Initialize with the list of validation problems.

        Args:
            errors: One message per invalid field
            source: Optional file the configuration came from
        """
        header = "Configuration validation failed"
        if source:
            header += f" for {source}"
        message = header + ":\n" + "\n".join(f"  - {msg}" for msg in errors)
        super().__init__(message)
        self.errors = errors
        self.source = source


# =============================================================================
# STORAGE EXCEPTIONS
# =============================================================================

class MapRepositoryError(PlanGpsError):
    """Raised when the saved-map store cannot be read or written."""
    pass


class MapNotFoundError(MapRepositoryError):
    """Raised when a saved map id is not in the repository."""

    def __init__(self, map_id: str, available_ids: List[str]):
        super().__init__(
            f"Saved map '{map_id}' not found",
            {"map_id": map_id, "available": available_ids}
        )

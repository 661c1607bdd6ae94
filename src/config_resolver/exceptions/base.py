"""Base exception classes for the configuration resolver."""
from typing import Optional, Dict, Any


class ConfigResolverError(Exception):
    """Base exception for all configuration resolver errors.

    All custom exceptions in the package should inherit from this.
    Provides structured error information with error codes and details.

    Args:
        message: Human-readable error message
        error_code: Machine-readable error code (e.g., "CONFIG_LOAD_FAILED")
        details: Additional context as dictionary
        original: Original exception if wrapping another exception
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        original: Optional[Exception] = None,
    ):
        self.message = message
        self.error_code = error_code or "UNKNOWN_ERROR"
        self.details = details or {}
        self.original = original

        # Build full error message
        full_message = f"[{self.error_code}] {message}"
        if original:
            full_message += f" (caused by: {type(original).__name__}: {original})"

        super().__init__(full_message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging.

        Returns:
            Dict with error details
        """
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "exception_type": self.__class__.__name__,
        }

"""
Custom exception classes for the alteration monitor.

Provides specific exception types for configuration, lifecycle and observer
failures so callers can handle them without inspecting messages.
"""

from typing import Any


class BaseError(Exception):
    """
    Base exception class for all alteration monitor errors.

    All custom exceptions in the package inherit from this base class
    to enable consistent error handling and logging.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ):
        """
        Initialize the error.

        Args:
            message: Human-readable error description
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context information
            cause: Optional underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation including error code if present."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        """Detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}', "
            f"context={self.context})"
        )


class ConfigurationError(BaseError):
    """Raised when an observer, monitor or settings object is misconfigured."""

    def __init__(
        self,
        message: str,
        config_key: str | None = None,
        expected_type: str | None = None,
        actual_value: Any | None = None,
    ):
        context = {}
        if config_key:
            context["config_key"] = config_key
        if expected_type:
            context["expected_type"] = expected_type
        if actual_value is not None:
            context["actual_value"] = str(actual_value)

        super().__init__(message, error_code="CONFIG_ERROR", context=context)


class MonitoringError(BaseError):
    """Raised when file monitoring operations fail."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        operation: str | None = None,
        underlying_error: Exception | None = None,
        error_code: str = "MONITORING_ERROR",
    ):
        context = {}
        if path:
            context["path"] = path
        if operation:
            context["operation"] = operation

        super().__init__(
            message,
            error_code=error_code,
            context=context,
            cause=underlying_error,
        )


class MonitorStateError(MonitoringError):
    """Raised when a monitor is started while running or stopped while stopped."""

    def __init__(self, message: str, operation: str | None = None):
        super().__init__(message, operation=operation, error_code="MONITOR_STATE_ERROR")


class InitializationError(BaseError):
    """Raised when an observer or the loop thread fails to start with a monitor."""

    def __init__(
        self,
        message: str,
        component: str | None = None,
        initialization_stage: str | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if component:
            context["component"] = component
        if initialization_stage:
            context["initialization_stage"] = initialization_stage

        super().__init__(
            message,
            error_code="INITIALIZATION_ERROR",
            context=context,
            cause=underlying_error,
        )


class ShutdownError(BaseError):
    """Raised when an observer fails to release its resources while a monitor stops."""

    def __init__(
        self,
        message: str,
        component: str | None = None,
        shutdown_stage: str | None = None,
        underlying_error: Exception | None = None,
    ):
        context = {}
        if component:
            context["component"] = component
        if shutdown_stage:
            context["shutdown_stage"] = shutdown_stage

        super().__init__(
            message,
            error_code="SHUTDOWN_ERROR",
            context=context,
            cause=underlying_error,
        )

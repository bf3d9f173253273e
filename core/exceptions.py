"""
Custom exceptions for the readiness scoring engine
Provides structured error handling across all domains
"""
from typing import Any, Dict, List, Optional


class ReadinessError(Exception):
    """Base exception for all readiness scoring errors"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(ReadinessError):
    """Raised when an assessment answer is missing or outside its allowed values"""

    def __init__(self, message: str, field: Optional[str] = None, **details):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={"field": field, **details} if field else details,
            status_code=400,
        )
        self.field = field


class InvalidConfigurationError(ReadinessError):
    """Raised when a scoring weight configuration is malformed or out of range"""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(
            message=message,
            error_code="INVALID_CONFIGURATION",
            details={"errors": errors or []},
            status_code=422,
        )
        self.errors = errors or []


class PersistenceError(ReadinessError):
    """Raised when the store is unreachable or a write conflicts"""

    def __init__(self, message: str, operation: Optional[str] = None, **details):
        super().__init__(
            message=message,
            error_code="PERSISTENCE_ERROR",
            details={"operation": operation, **details} if operation else details,
            status_code=503,
        )


class NotFoundError(ReadinessError):
    """Raised when a resource is not found"""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} not found: {identifier}",
            error_code="NOT_FOUND",
            details={"resource": resource, "identifier": str(identifier)},
            status_code=404,
        )


class ConfigurationError(ReadinessError):
    """Raised when application settings are invalid or missing"""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting} if setting else {},
            status_code=500,
        )

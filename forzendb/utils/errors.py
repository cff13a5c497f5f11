"""Exception hierarchy for forzendb."""

from enum import Enum
from typing import Any, Dict, Optional


## Error Categories


class ErrorCategory(Enum):
    """Categories of errors for better handling."""

    DATABASE = "database"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


## Custom Exceptions


class ForzenError(Exception):
    """Base exception for all forzendb errors."""

    category = ErrorCategory.UNKNOWN
    user_message = "An error occurred"

    def __init__(
        self, message: str | None = None, details: Dict[str, Any] | None = None
    ):
        """Initialise ForzenError with optional message and details."""
        self.message = message or self.user_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error details to a dictionary."""
        return {
            "error_type": self.__class__.__name__,
            "category": self.category.value,
            "message": self.message,
            "details": self.details,
        }


## Database Errors


class DatabaseError(ForzenError):
    """Base exception for database-related errors."""

    category = ErrorCategory.DATABASE
    user_message = "A database error occurred"


class DatabaseConnectionError(DatabaseError):
    """Opening or closing the database connection failed."""

    user_message = "Failed to connect to the database"


class QueryError(DatabaseError):
    """A statement failed to parse or execute."""

    user_message = "Database query failed"

    def __init__(
        self,
        message: Optional[str] = None,
        sql: str = "",
        details: Dict[str, Any] | None = None,
    ):
        self.sql = sql
        details = dict(details or {})
        details.setdefault("sql", sql)
        super().__init__(message, details)


class NoConnectionError(DatabaseError):
    """An operation needed a connection handle and none was available."""

    user_message = "No database connection is available"


## Validation Errors


class ValidationError(ForzenError):
    """Base exception for validation-related errors."""

    category = ErrorCategory.VALIDATION
    user_message = "Invalid input"


class SchemaError(ValidationError):
    """Exception for malformed table or column definitions."""

    user_message = "Invalid table definition"


class InvalidEntityError(ValidationError):
    """Exception for entities that cannot be inserted."""

    user_message = "Invalid entity"


class MissingRequiredFieldError(ValidationError):
    """Exception for missing required fields."""

    user_message = "A required field is missing"


## Configuration Errors


class ConfigurationError(ForzenError):
    """Base exception for configuration-related errors."""

    category = ErrorCategory.CONFIGURATION
    user_message = "A configuration error occurred"


class MissingConfigError(ConfigurationError):
    """Exception for a missing configuration file."""

    user_message = "Missing configuration settings"


class InvalidConfigError(ConfigurationError):
    """Exception for invalid configuration settings."""

    user_message = "Invalid configuration settings"


## Utility Functions


def format_error_message(error: Exception) -> str:
    """Format an error message for display."""
    if isinstance(error, ForzenError):
        return error.message
    else:
        return "An unexpected error occurred - check logs for details."

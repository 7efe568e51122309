"""
Custom exceptions for the DuckDB ODBC connector.
"""
from typing import Any, Dict

# Error kind reported to the host for every connector failure
ERROR_KIND = "Expression.Error"


class ConnectorError(Exception):
    """Base exception for all connector errors."""
    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.kind = ERROR_KIND
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "type": type(self).__name__,
            "message": self.message,
            "details": self.details,
        }

class ConfigurationError(ConnectorError):
    """Raised when connection parameters are incomplete or inconsistent."""
    pass

class InvalidOptionError(ConnectorError):
    """Raised when an options mapping contains keys the schema does not know."""
    pass

class InvalidValueError(ConnectorError):
    """Raised when an option value fails its type or predicate check."""
    pass

class DatabaseError(ConnectorError):
    """Raised when the ODBC driver rejects a connection attempt."""
    pass

from typing import Any, Dict, Optional


class SagePayError(Exception):
    """Base exception for the Sage Pay integration."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(SagePayError):
    """
    Raised when the embedding application has not wired a required
    collaborator or has selected an unknown gateway environment.
    """
    pass

class FaxContextError(Exception):
    """Base exception for the fax context recovery engine."""


class ConfigurationError(FaxContextError):
    """Raised when recovery configuration is missing or invalid."""


class ContextStoreError(FaxContextError):
    """Raised by a context store when a lookup or update fails."""


class ContextValidationError(FaxContextError):
    """Raised when a raw context record cannot be turned into a ConversationContext."""

"""
Base exception classes for the POS engine.
"""


class PosEngineException(Exception):
    """
    Base exception for all POS engine errors.

    All custom exceptions in the engine inherit from this class, so callers
    can catch every engine-specific failure with a single handler.

    Attributes:
        message: Human-readable error message
        details: Optional dict with additional context (entity IDs, quantities, etc.)
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if self.details:
            details_str = ', '.join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.__class__.__name__}('{self.message}', {details_str})"
        return f"{self.__class__.__name__}('{self.message}')"

"""
Bundle-related exceptions.
"""

from .base import PosEngineException


class BundleException(PosEngineException):
    """Base exception for bundle-related errors."""
    pass


class InvalidBundleException(BundleException):
    """Raised when a bundle definition cannot be used for the requested operation."""

    def __init__(self, bundle_id: str, reason: str):
        super().__init__(
            f"Invalid bundle {bundle_id}: {reason}",
            details={'bundle_id': bundle_id, 'reason': reason}
        )
        self.bundle_id = bundle_id
        self.reason = reason


class IncompleteCustomBundleException(BundleException):
    """Raised when a custom bundle selection is confirmed with the wrong piece count."""

    def __init__(self, bundle_id: str, picked: int, max_pieces: int):
        super().__init__(
            f"Custom bundle {bundle_id} needs exactly {max_pieces} pieces, {picked} picked",
            details={'bundle_id': bundle_id, 'picked': picked, 'max_pieces': max_pieces}
        )
        self.bundle_id = bundle_id
        self.picked = picked
        self.max_pieces = max_pieces

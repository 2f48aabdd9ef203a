from __future__ import annotations

# Base Exceptions


class MultipartError(Exception):
    """Base exception used by this module."""

    pass


# Leaf Exceptions


class BoundaryValueError(ValueError, MultipartError):
    """Raised when a multipart boundary cannot be used as a delimiter.

    :param boundary: The rejected boundary
    :param string reason: Why the boundary was rejected
    """

    def __init__(self, boundary: str, reason: str) -> None:
        self.boundary = boundary
        self.reason = reason
        super().__init__(f"Invalid multipart boundary {boundary!r}: {reason}")

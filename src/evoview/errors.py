"""Fault types raised by views.

Both are precondition violations rather than recoverable conditions:
callers should fix the calling code, not catch and continue.
"""


class EmptyViewError(IndexError):
    """Raised when extremes or statistics are requested on an empty view."""


class ViewReleasedError(RuntimeError):
    """Raised when a view is used after it was returned to its pool."""

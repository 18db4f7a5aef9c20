"""
Exception types for the tweet library view engine.
"""


class LibraryError(Exception):
    """Base class for library errors."""


class ValidationError(LibraryError, ValueError):
    """Malformed criteria, configuration, or tweet record."""


class RenderFault(LibraryError, AssertionError):
    """A render asked for an index outside the ordered view.

    This always means the windowing math is wrong, so it is never caught
    inside the engine.
    """

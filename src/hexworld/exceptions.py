"""Custom exceptions for hex world generation."""


class HexWorldError(Exception):
    """Base exception for hex world errors."""

    pass


class InvalidConfigError(HexWorldError, ValueError):
    """Raised when a map configuration cannot produce a complete map."""

    pass

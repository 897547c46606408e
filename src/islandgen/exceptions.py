"""Custom exceptions for island generation."""


class IslandError(Exception):
    """Base exception for island generation errors."""

    pass


class UnknownTemplateError(IslandError):
    """Raised when a named island template does not exist."""

    pass


class UnknownBiomePresetError(IslandError):
    """Raised when a named biome preset does not exist."""

    pass


class GraphFormatError(IslandError):
    """Raised when serialized graph data cannot be read."""

    pass

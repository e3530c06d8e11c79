"""Exceptions raised by the lotmap pipeline."""


class LotMapError(Exception):
    """Base class for pipeline-level failures."""


class EmptyDatasetError(LotMapError, ValueError):
    """Raised when a CSV yields no usable rows or no entities to render."""


class DegenerateBoundsError(LotMapError, ValueError):
    """Raised when bounds are missing or have zero width, so no scale can be derived."""

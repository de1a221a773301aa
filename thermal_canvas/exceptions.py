"""Exceptions raised by thermal_canvas."""


class ThermalCanvasError(Exception):
    """Base class for all thermal_canvas errors."""


class FrameDecodeError(ThermalCanvasError):
    """Raised when a source image cannot be turned into a ThermalFrame."""

    def __init__(self, message: str, source=None):
        self.source = source
        super().__init__(message)


class UnknownPaletteError(ThermalCanvasError, ValueError):
    """Raised when a palette name is not in the catalog."""


class MarkerNotFoundError(ThermalCanvasError, KeyError):
    """Raised when a marker id is not in the store."""

    def __str__(self):
        return f"Marker not found: {self.args[0]}" if self.args else "Marker not found"


class MarkerPersistenceError(ThermalCanvasError):
    """Raised when markers cannot be loaded from or saved to storage."""

    def __init__(self, message: str, measurement_id=None):
        self.measurement_id = measurement_id
        super().__init__(message)

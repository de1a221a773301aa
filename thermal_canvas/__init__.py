"""
thermal_canvas - thermal image visualization and annotation engine

Maps decoded temperature fields through calibrated color palettes, handles
pan/zoom with exact pointer-to-temperature lookup, and keeps numbered marker
annotations that are persisted per measurement.

Main usage:
    from thermal_canvas import ThermalViewSession

    session = ThermalViewSession()
    session.open("frame.json")
    session.fit(800, 600)
    rgba = session.image
    info = session.interaction.pointer_move(400, 300)
"""

__version__ = "0.1.0"

from .calibration import CalibrationController
from .compositor import Compositor, render
from .exceptions import (
    FrameDecodeError,
    MarkerNotFoundError,
    MarkerPersistenceError,
    ThermalCanvasError,
    UnknownPaletteError,
)
from .interaction import InteractionController, InteractionMode
from .markers import InMemoryMarkerRepository, JsonMarkerRepository, MarkerRepository, MarkerStore
from .models import (
    CalibrationMode,
    CalibrationRange,
    CalibrationSeed,
    HoverInfo,
    Marker,
    ThermalFrame,
    ViewportState,
)
from .palettes import PALETTES, Palette, color_at, colors_at, get_palette
from .reader import FrameReader, decode_frame, read_frame
from .session import ThermalViewSession
from .settings import Settings
from .viewport import Viewport

__all__ = [
    "CalibrationController",
    "CalibrationMode",
    "CalibrationRange",
    "CalibrationSeed",
    "Compositor",
    "FrameDecodeError",
    "FrameReader",
    "HoverInfo",
    "InMemoryMarkerRepository",
    "InteractionController",
    "InteractionMode",
    "JsonMarkerRepository",
    "Marker",
    "MarkerNotFoundError",
    "MarkerPersistenceError",
    "MarkerRepository",
    "MarkerStore",
    "PALETTES",
    "Palette",
    "Settings",
    "ThermalCanvasError",
    "ThermalFrame",
    "ThermalViewSession",
    "UnknownPaletteError",
    "Viewport",
    "ViewportState",
    "color_at",
    "colors_at",
    "decode_frame",
    "get_palette",
    "read_frame",
    "render",
]

"""Pointer and toolbar event handling for a thermal view."""

import logging
from enum import Enum
from typing import Optional

from .calibration import CalibrationController
from .markers import MarkerStore
from .models import HoverInfo, Marker, ThermalFrame
from .viewport import Viewport

logger = logging.getLogger(__name__)


class InteractionMode(str, Enum):
    VIEWING = "viewing"
    ADDING_MARKER = "adding_marker"


class CalibrationHandle(str, Enum):
    MIN = "min"
    MAX = "max"


class InteractionController:
    """
    Two-state machine: VIEWING (initial) and ADDING_MARKER.

    Hover readout works in both states. A click while ADDING_MARKER places
    one marker on the pixel under the pointer and returns to VIEWING; clicks
    off the frame are ignored and keep the mode. Drag-panning only starts
    while VIEWING so a placement click never moves the image.
    """

    def __init__(self, frame: ThermalFrame, viewport: Viewport, markers: MarkerStore,
                 calibration: CalibrationController):
        self.frame = frame
        self.viewport = viewport
        self.markers = markers
        self.calibration = calibration
        self.mode = InteractionMode.VIEWING
        self.hover: Optional[HoverInfo] = None

    @property
    def adding_marker(self) -> bool:
        return self.mode is InteractionMode.ADDING_MARKER

    def toggle_add_marker(self) -> InteractionMode:
        if self.mode is InteractionMode.VIEWING:
            self.mode = InteractionMode.ADDING_MARKER
            self.viewport.end_pan()
        else:
            self.mode = InteractionMode.VIEWING
        return self.mode

    def cancel_add_marker(self):
        self.mode = InteractionMode.VIEWING

    def lookup(self, sx: float, sy: float) -> Optional[HoverInfo]:
        """Temperature under a screen point, or None off the frame."""
        pixel = self.viewport.screen_to_data(sx, sy)
        if pixel is None:
            return None
        x, y = pixel
        return HoverInfo(x, y, self.frame.temperature_at(x, y))

    def pointer_move(self, sx: float, sy: float) -> Optional[HoverInfo]:
        if self.viewport.is_panning:
            self.viewport.pan_to(sx, sy)
        self.hover = self.lookup(sx, sy)
        return self.hover

    def pointer_leave(self):
        self.viewport.end_pan()
        self.hover = None

    def pointer_down(self, sx: float, sy: float):
        if self.mode is InteractionMode.VIEWING:
            self.viewport.begin_pan(sx, sy)

    def pointer_up(self):
        self.viewport.end_pan()

    def click(self, sx: float, sy: float) -> Optional[Marker]:
        if self.mode is not InteractionMode.ADDING_MARKER:
            return None
        info = self.lookup(sx, sy)
        if info is None:
            return None
        marker = self.markers.add(info.x, info.y, info.temperature)
        self.mode = InteractionMode.VIEWING
        logger.debug("Placed marker #%d at (%d, %d)", len(self.markers), info.x, info.y)
        return marker

    def wheel(self, sx: float, sy: float, delta_y: float):
        """Zoom towards the pointer; positive delta_y (scroll down) zooms out."""
        settings = self.viewport.settings
        factor = settings.wheel_zoom_out_factor if delta_y > 0 else settings.wheel_zoom_in_factor
        self.viewport.zoom_at(sx, sy, factor)
        self.hover = self.lookup(sx, sy)

    def drag_calibration_handle(self, handle, fraction: float) -> bool:
        """Move a color-scale handle to a slider position in [0, 1]; False if rejected."""
        handle = CalibrationHandle(handle)
        value = self.calibration.value_at_handle(fraction)
        if value is None:
            return False
        if handle is CalibrationHandle.MIN:
            return self.calibration.set_min(value)
        return self.calibration.set_max(value)

    def edit_marker(self, marker_id: str, **changes) -> Marker:
        return self.markers.update(marker_id, **changes)

    def delete_marker(self, marker_id: str) -> Marker:
        return self.markers.remove(marker_id)

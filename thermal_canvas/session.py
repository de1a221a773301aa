"""
One thermal view: the displayed frame plus the palette, calibration, viewport,
marker and interaction state that belong to it.

A session owns all of its state; nothing is shared between sessions. Decode
and persistence failures are recorded on session.error instead of raised so
the view keeps working with whatever it has.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Union

import numpy as np

from .calibration import CalibrationController
from .compositor import Compositor
from .exceptions import FrameDecodeError, MarkerPersistenceError
from .interaction import InteractionController
from .markers import MarkerRepository, MarkerStore
from .models import CalibrationRange, CalibrationSeed, HoverInfo, Marker, ThermalFrame
from .palettes import Palette, get_palette
from .reader import Decoder, FrameReader, decode_frame
from .settings import DEFAULT_SETTINGS, Settings
from .utilities import format_temperature
from .viewport import Viewport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkerOverlay:
    """Where to draw a numbered marker on screen."""

    number: int
    screen_x: float
    screen_y: float
    marker: Marker


class ThermalViewSession:

    def __init__(self, measurement_id: Optional[str] = None, repository: Optional[MarkerRepository] = None,
                 decoder: Optional[Decoder] = None, settings: Settings = DEFAULT_SETTINGS):
        self.settings = settings
        self.decoder = decoder if decoder is not None else FrameReader()
        self.frame: Optional[ThermalFrame] = None
        self.error: Optional[str] = None
        self.palette = get_palette(settings.default_palette)
        self.calibration = CalibrationController(settings)
        self.compositor = Compositor()
        self.markers = MarkerStore(measurement_id, repository, settings)
        self.viewport: Optional[Viewport] = None
        self.interaction: Optional[InteractionController] = None

    @property
    def measurement_id(self) -> Optional[str]:
        return self.markers.measurement_id

    @property
    def has_frame(self) -> bool:
        return self.frame is not None

    def open(self, source: Any, seed: Optional[CalibrationSeed] = None,
             max_temp_hint: Optional[float] = None) -> bool:
        """Decode and display a new frame; on failure the view is emptied and error is set."""
        container = None
        if self.viewport is not None:
            container = (self.viewport.container_width, self.viewport.container_height)
        try:
            frame = decode_frame(self.decoder, source, max_temp_hint)
        except FrameDecodeError as e:
            self.error = str(e)
            self._show(None)
            return False
        self.error = None
        self._show(frame, seed)
        if container is not None:
            self.fit(*container)
        return True

    def show_frame(self, frame: ThermalFrame, seed: Optional[CalibrationSeed] = None):
        """Display an already decoded frame."""
        self.error = None
        self._show(frame, seed)

    def _show(self, frame: Optional[ThermalFrame], seed: Optional[CalibrationSeed] = None):
        self.compositor.invalidate()
        if frame is None:
            self.frame = None
            self.calibration.clear()
            self.viewport = None
            self.interaction = None
            return
        viewport = Viewport(frame.width, frame.height, self.settings)
        interaction = InteractionController(frame, viewport, self.markers, self.calibration)
        self.calibration.load_frame(frame, seed)
        self.frame, self.viewport, self.interaction = frame, viewport, interaction
        logger.debug("Showing %dx%d frame [%.2f, %.2f]", frame.width, frame.height, frame.min_temp, frame.max_temp)

    def fit(self, container_width: float, container_height: float, padding: Optional[float] = None):
        if self.viewport is None:
            return None
        return self.viewport.fit_to_container(container_width, container_height, padding)

    def select_palette(self, palette: Union[str, Palette]) -> Palette:
        self.palette = get_palette(palette)
        return self.palette

    @property
    def calibration_range(self) -> Optional[CalibrationRange]:
        return self.calibration.range

    @property
    def image(self) -> Optional[np.ndarray]:
        """RGBA buffer for the current frame, palette and calibration; None without a frame."""
        if self.frame is None:
            return None
        return self.compositor.get_buffer(self.frame, self.palette, self.calibration.range)

    @property
    def hover(self) -> Optional[HoverInfo]:
        return self.interaction.hover if self.interaction else None

    def hover_text(self) -> str:
        info = self.hover
        if info is None:
            return "Hover image to measure"
        temp = format_temperature(info.temperature, self.settings.temperature_unit)
        return f"Cursor: {temp} ({info.x}, {info.y})"

    def markers_outside_frame(self) -> List[Marker]:
        """Stored markers whose pixel does not exist in the displayed frame."""
        if self.frame is None:
            return []
        return [m for m in self.markers if not self.frame.contains(m.x, m.y)]

    def marker_overlays(self) -> List[MarkerOverlay]:
        """Overlays for markers on the displayed frame; numbering counts every stored marker."""
        if self.viewport is None:
            return []
        overlays = []
        for number, marker in enumerate(self.markers, start=1):
            if not self.frame.contains(marker.x, marker.y):
                continue
            sx, sy = self.viewport.pixel_center_to_screen(marker.x, marker.y)
            overlays.append(MarkerOverlay(number, sx, sy, marker))
        return overlays

    async def load_markers(self) -> bool:
        """Replace markers from storage; on failure keep an empty collection and set error."""
        try:
            await self.markers.load()
        except MarkerPersistenceError as e:
            logger.error("Loading markers for %s failed: %s", self.measurement_id, e)
            self.error = f"Error loading markers: {e}"
            return False
        outside = self.markers_outside_frame()
        if outside:
            logger.warning("%d stored markers for %s lie outside the %dx%d frame",
                           len(outside), self.measurement_id, self.frame.width, self.frame.height)
        return True

    async def save_markers(self) -> bool:
        """Persist markers; on failure local markers are kept for a retry and error is set."""
        try:
            count = await self.markers.save_all()
        except MarkerPersistenceError as e:
            logger.error("Saving markers for %s failed: %s", self.measurement_id, e)
            self.error = f"Error saving markers: {e}"
            return False
        if self.error and self.error.startswith("Error saving markers"):
            self.error = None
        logger.debug("Saved %d markers", count)
        return True

"""
Affine mapping between data space (frame pixel indices) and container space.

screen = data * scale + offset. The viewport never raises for coordinate
queries: screen_to_data() returns None when the pointer is off the frame.
"""
import math
from typing import Optional, Tuple

from .models import ViewportState
from .settings import DEFAULT_SETTINGS, Settings
from .utilities import clamp

# Float error tolerated when inverting the transform at a pixel corner
SNAP_TOLERANCE = 1e-9


def _snap(value: float) -> float:
    nearest = round(value)
    if abs(value - nearest) < SNAP_TOLERANCE:
        return float(nearest)
    return value


class Viewport:
    """Pan/zoom state for one displayed frame."""

    def __init__(self, width: int, height: int, settings: Settings = DEFAULT_SETTINGS):
        if width <= 0 or height <= 0:
            raise ValueError(f"Viewport needs a positive data size, got {width}x{height}")
        self.width = width
        self.height = height
        self.settings = settings
        self.state = ViewportState()
        self.container_width = 0.0
        self.container_height = 0.0
        self._fit_padding = settings.fit_padding
        self._pan_anchor: Optional[Tuple[float, float]] = None

    @property
    def scale(self) -> float:
        return self.state.scale

    @property
    def offset(self) -> Tuple[float, float]:
        return (self.state.offset_x, self.state.offset_y)

    @property
    def is_panning(self) -> bool:
        return self._pan_anchor is not None

    def set_container(self, container_width: float, container_height: float):
        self.container_width = float(container_width)
        self.container_height = float(container_height)

    def fit_to_container(self, container_width: float, container_height: float,
                         padding: Optional[float] = None) -> ViewportState:
        """Scale the frame to fit (never above fit_max_scale) and centre it."""
        if padding is None:
            padding = self.settings.fit_padding
        self.set_container(container_width, container_height)
        self._fit_padding = padding
        avail_w = container_width - 2 * padding
        avail_h = container_height - 2 * padding
        if avail_w <= 0 or avail_h <= 0:
            # Container not laid out yet; keep the current transform
            return self.state
        scale = min(avail_w / self.width, avail_h / self.height, self.settings.fit_max_scale)
        self.state = ViewportState(
            scale,
            (container_width - self.width * scale) / 2,
            (container_height - self.height * scale) / 2,
        )
        return self.state

    def reset(self) -> ViewportState:
        """Re-run the last fit (the "Reset View" action)."""
        self._pan_anchor = None
        return self.fit_to_container(self.container_width, self.container_height, self._fit_padding)

    def zoom_at(self, anchor_x: float, anchor_y: float, factor: float) -> ViewportState:
        """Multiply the scale by factor, keeping the screen point (anchor_x, anchor_y) fixed."""
        old = self.state
        new_scale = clamp(old.scale * factor, self.settings.min_scale, self.settings.max_scale)
        ratio = new_scale / old.scale
        self.state = ViewportState(
            new_scale,
            anchor_x - (anchor_x - old.offset_x) * ratio,
            anchor_y - (anchor_y - old.offset_y) * ratio,
        )
        return self.state

    def zoom_in(self) -> ViewportState:
        return self.zoom_at(self.container_width / 2, self.container_height / 2, self.settings.zoom_in_factor)

    def zoom_out(self) -> ViewportState:
        return self.zoom_at(self.container_width / 2, self.container_height / 2, self.settings.zoom_out_factor)

    def pan_by(self, dx: float, dy: float) -> ViewportState:
        old = self.state
        self.state = ViewportState(old.scale, old.offset_x + dx, old.offset_y + dy)
        return self.state

    def begin_pan(self, sx: float, sy: float):
        self._pan_anchor = (sx, sy)

    def pan_to(self, sx: float, sy: float) -> ViewportState:
        """Move the drag anchor to (sx, sy); no-op unless a pan is in progress."""
        if self._pan_anchor is None:
            return self.state
        last_x, last_y = self._pan_anchor
        self._pan_anchor = (sx, sy)
        return self.pan_by(sx - last_x, sy - last_y)

    def end_pan(self):
        self._pan_anchor = None

    def data_to_screen(self, px: float, py: float) -> Tuple[float, float]:
        s = self.state
        return (px * s.scale + s.offset_x, py * s.scale + s.offset_y)

    def screen_to_data(self, sx: float, sy: float) -> Optional[Tuple[int, int]]:
        """Return the integer pixel under (sx, sy), or None outside the frame."""
        s = self.state
        dx = _snap((sx - s.offset_x) / s.scale)
        dy = _snap((sy - s.offset_y) / s.scale)
        if not (0 <= dx < self.width and 0 <= dy < self.height):
            return None
        return (int(math.floor(dx)), int(math.floor(dy)))

    def pixel_center_to_screen(self, px: int, py: int) -> Tuple[float, float]:
        """Screen position of a pixel's centre, where marker overlays are drawn."""
        return self.data_to_screen(px + 0.5, py + 0.5)

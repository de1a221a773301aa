"""Turn a thermal frame into an RGBA pixel buffer through a palette and calibration range."""

import logging
from typing import Optional, Tuple, Union

import numpy as np

from .models import CalibrationRange, ThermalFrame
from .palettes import Palette, colors_at, get_palette
from .utilities import normalize_temperatures

logger = logging.getLogger(__name__)


def render(frame: ThermalFrame, palette: Union[str, Palette],
           calibration: Union[CalibrationRange, Tuple[float, float]]) -> np.ndarray:
    """
    Render every temperature sample to a color.

    Returns a uint8 array of shape (height, width, 4), row-major, alpha 255.
    Samples are normalized over [min, max] of the calibration range and
    clamped to [0, 1]; a degenerate range renders every sample at 0.5.
    """
    if isinstance(calibration, CalibrationRange):
        t_min, t_max = calibration.min, calibration.max
    else:
        t_min, t_max = calibration
    normalized = normalize_temperatures(frame.temperatures, t_min, t_max)
    rgb = colors_at(normalized, palette)
    buffer = np.empty((frame.height, frame.width, 4), dtype=np.uint8)
    buffer[..., :3] = rgb
    buffer[..., 3] = 255
    return buffer


def scale_nearest(buffer: np.ndarray, factor: int) -> np.ndarray:
    """Enlarge an image by an integer factor with nearest-neighbour sampling."""
    if int(factor) != factor or factor < 1:
        raise ValueError(f"Scale factor must be a positive integer, got {factor}")
    factor = int(factor)
    if factor == 1:
        return buffer.copy()
    return np.repeat(np.repeat(buffer, factor, axis=0), factor, axis=1)


class Compositor:
    """Caches the rendered buffer and recomputes it whenever frame, palette or range changes."""

    def __init__(self):
        self._frame: Optional[ThermalFrame] = None
        self._key = None
        self._buffer: Optional[np.ndarray] = None
        self.render_count = 0

    def invalidate(self):
        self._frame = None
        self._key = None
        self._buffer = None

    def get_buffer(self, frame: ThermalFrame, palette: Union[str, Palette],
                   calibration: CalibrationRange) -> np.ndarray:
        palette = get_palette(palette)
        key = (palette, calibration.min, calibration.max)
        if self._buffer is None or frame is not self._frame or key != self._key:
            logger.debug(
                "Rendering %dx%d frame with %s palette over [%.2f, %.2f]",
                frame.width, frame.height, palette.value, calibration.min, calibration.max,
            )
            self._buffer = render(frame, palette, calibration)
            self._buffer.setflags(write=False)
            self._frame = frame
            self._key = key
            self.render_count += 1
        return self._buffer

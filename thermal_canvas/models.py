"""
Data models for thermal viewing sessions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import numpy as np


@dataclass(frozen=True, eq=False)
class ThermalFrame:
    """A decoded temperature field, row-major (index = y * width + x)."""

    width: int
    height: int
    min_temp: float
    max_temp: float
    temperatures: np.ndarray
    metadata: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if int(self.width) != self.width or int(self.height) != self.height:
            raise ValueError(f"Frame dimensions must be integers, got {self.width}x{self.height}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Frame dimensions must be positive, got {self.width}x{self.height}")
        if float(self.min_temp) > float(self.max_temp):
            raise ValueError(f"Frame min_temp {self.min_temp} is above max_temp {self.max_temp}")
        temps = np.array(self.temperatures, dtype=np.float64)
        if temps.size != self.width * self.height:
            raise ValueError(
                f"Expected {self.width * self.height} temperature samples for "
                f"{self.width}x{self.height}, got {temps.size}"
            )
        temps = temps.reshape(self.height, self.width)
        temps.setflags(write=False)
        object.__setattr__(self, "width", int(self.width))
        object.__setattr__(self, "height", int(self.height))
        object.__setattr__(self, "min_temp", float(self.min_temp))
        object.__setattr__(self, "max_temp", float(self.max_temp))
        object.__setattr__(self, "temperatures", temps)

    @classmethod
    def from_array(cls, data: np.ndarray, min_temp: Optional[float] = None,
                   max_temp: Optional[float] = None, metadata: Optional[Dict[str, Any]] = None) -> "ThermalFrame":
        """Build a frame from a 2D array; bounds default to the data range."""
        data = np.asarray(data, dtype=np.float64)
        if data.ndim != 2:
            raise ValueError(f"Temperature data must be 2D, got shape {data.shape}")
        height, width = data.shape
        if min_temp is None:
            min_temp = float(np.nanmin(data))
        if max_temp is None:
            max_temp = float(np.nanmax(data))
        return cls(width, height, min_temp, max_temp, data, dict(metadata or {}))

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "ThermalFrame":
        """Build a frame from the decoder service JSON shape (width, height, minTemp, maxTemp, temperatures)."""
        missing = [k for k in ("width", "height", "temperatures") if k not in payload]
        if missing:
            raise ValueError(f"Thermal payload missing keys: {', '.join(missing)}")
        temps = np.asarray(payload["temperatures"], dtype=np.float64)
        min_temp = payload.get("minTemp")
        max_temp = payload.get("maxTemp")
        return cls(
            int(payload["width"]),
            int(payload["height"]),
            float(np.nanmin(temps)) if min_temp is None else min_temp,
            float(np.nanmax(temps)) if max_temp is None else max_temp,
            temps,
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "minTemp": self.min_temp,
            "maxTemp": self.max_temp,
            "temperatures": self.temperatures.ravel().tolist(),
        }

    def get_image_shape(self) -> tuple:
        """Return the image dimensions (height, width)."""
        return (self.height, self.width)

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def temperature_at(self, x: int, y: int) -> float:
        """Return the temperature at the given pixel."""
        if self.contains(x, y):
            return float(self.temperatures[y, x])
        raise IndexError(f"Pixel coordinates ({x}, {y}) out of image bounds")

    def get_temperature_range(self) -> tuple:
        """Return the measured temperature range (min, max) of the samples."""
        return float(np.nanmin(self.temperatures)), float(np.nanmax(self.temperatures))

    def get_average_temperature(self) -> float:
        return float(np.nanmean(self.temperatures))


@dataclass(frozen=True)
class HoverInfo:
    """Temperature readout under the pointer."""

    x: int
    y: int
    temperature: float


@dataclass(frozen=True)
class Marker:
    """A point annotation anchored to a data-space pixel."""

    id: str
    x: int
    y: int
    temperature: float
    element_type: str
    final_action: str = ""

    def to_record(self, index: int) -> Dict[str, Any]:
        """Persistence record; index is 1-based."""
        return {
            "index": index,
            "x": self.x,
            "y": self.y,
            "temperature": self.temperature,
            "elementType": self.element_type,
            "finalAction": self.final_action,
        }


class CalibrationMode(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"


@dataclass(frozen=True)
class CalibrationRange:
    """Temperature window mapped onto the palette's [0, 1] domain."""

    min: float
    max: float
    mode: CalibrationMode = CalibrationMode.AUTO

    def __post_init__(self):
        if not self.min < self.max:
            raise ValueError(f"Calibration range requires min < max, got [{self.min}, {self.max}]")

    @property
    def span(self) -> float:
        return self.max - self.min

    def as_tuple(self) -> Tuple[float, float]:
        return (self.min, self.max)


@dataclass(frozen=True)
class CalibrationSeed:
    """Previously persisted manual calibration for a measurement."""

    min: float
    max: float

    def __post_init__(self):
        if not self.min < self.max:
            raise ValueError(f"Calibration seed requires min < max, got [{self.min}, {self.max}]")


@dataclass(frozen=True)
class ViewportState:
    """Forward transform: screen = data * scale + offset."""

    scale: float = 1.0
    offset_x: float = 0.0
    offset_y: float = 0.0

    def __post_init__(self):
        if not self.scale > 0:
            raise ValueError(f"Viewport scale must be positive, got {self.scale}")

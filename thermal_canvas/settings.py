"""
Viewer configuration.

Module constants hold the defaults used by the viewport, calibration and marker
code. A Settings instance groups them so a session can be configured from a
dict or a JSON file; only the keys defined on Settings are accepted.
"""
import json
from dataclasses import dataclass, asdict, fields
from pathlib import Path
from typing import Any, Dict, Union

# -----------------------------------------------------------------------------
# Viewport
# -----------------------------------------------------------------------------
ZOOM_IN_FACTOR = 1.25
ZOOM_OUT_FACTOR = 0.8
MIN_SCALE = 0.25
MAX_SCALE = 5.0
FIT_PADDING = 0.0
# Fit never enlarges past native resolution
FIT_MAX_SCALE = 1.0
# Wheel zoom steps (pointer-anchored)
WHEEL_ZOOM_IN_FACTOR = 1.1
WHEEL_ZOOM_OUT_FACTOR = 0.9

# -----------------------------------------------------------------------------
# Calibration
# -----------------------------------------------------------------------------
CALIBRATION_EPSILON = 1.0
ALLOW_OUT_OF_DOMAIN_CALIBRATION = False

# -----------------------------------------------------------------------------
# Markers and display
# -----------------------------------------------------------------------------
DEFAULT_ELEMENT_TYPE = "Electrical Asset"
DEFAULT_FINAL_ACTION = ""
DEFAULT_PALETTE = "iron"
TEMPERATURE_UNIT = "C"


@dataclass(frozen=True)
class Settings:
    """Tunable viewer parameters."""

    zoom_in_factor: float = ZOOM_IN_FACTOR
    zoom_out_factor: float = ZOOM_OUT_FACTOR
    min_scale: float = MIN_SCALE
    max_scale: float = MAX_SCALE
    fit_padding: float = FIT_PADDING
    fit_max_scale: float = FIT_MAX_SCALE
    wheel_zoom_in_factor: float = WHEEL_ZOOM_IN_FACTOR
    wheel_zoom_out_factor: float = WHEEL_ZOOM_OUT_FACTOR
    calibration_epsilon: float = CALIBRATION_EPSILON
    allow_out_of_domain_calibration: bool = ALLOW_OUT_OF_DOMAIN_CALIBRATION
    default_element_type: str = DEFAULT_ELEMENT_TYPE
    default_final_action: str = DEFAULT_FINAL_ACTION
    default_palette: str = DEFAULT_PALETTE
    temperature_unit: str = TEMPERATURE_UNIT

    def __post_init__(self):
        if not 0 < self.min_scale <= self.max_scale:
            raise ValueError(
                f"Scale bounds must satisfy 0 < min_scale <= max_scale, got {self.min_scale}, {self.max_scale}"
            )
        if self.calibration_epsilon < 0:
            raise ValueError("calibration_epsilon must be >= 0")
        if self.fit_padding < 0:
            raise ValueError("fit_padding must be >= 0")
        if self.temperature_unit not in ("C", "F", "K"):
            raise ValueError(f"Unsupported temperature unit: {self.temperature_unit}")

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(unknown)}")
        return cls(**values)

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "Settings":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


DEFAULT_SETTINGS = Settings()

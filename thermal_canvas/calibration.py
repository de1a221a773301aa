"""Active [min, max] temperature window used to color a frame."""

import logging
from typing import Callable, List, Optional

from .models import CalibrationMode, CalibrationRange, CalibrationSeed, ThermalFrame
from .settings import DEFAULT_SETTINGS, Settings
from .utilities import clamp

logger = logging.getLogger(__name__)

Listener = Callable[[CalibrationRange], None]


class CalibrationController:
    """
    Tracks the calibration range for the displayed frame.

    Auto mode follows the frame's reported bounds. Manual mode is entered by a
    seed from storage or by any accepted set_min/set_max. Edits that would
    bring min within epsilon of max are rejected and leave the range unchanged.
    """

    def __init__(self, settings: Settings = DEFAULT_SETTINGS):
        self.settings = settings
        self.frame: Optional[ThermalFrame] = None
        self.range: Optional[CalibrationRange] = None
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener):
        self._listeners.append(listener)

    def _publish(self, new_range: CalibrationRange):
        self.range = new_range
        for listener in self._listeners:
            listener(new_range)

    @property
    def mode(self) -> Optional[CalibrationMode]:
        return self.range.mode if self.range else None

    @property
    def domain(self):
        """Frame bounds (min_temp, max_temp) that limit manual edits."""
        if self.frame is None:
            return None
        return (self.frame.min_temp, self.frame.max_temp)

    def _auto_range(self, frame: ThermalFrame) -> CalibrationRange:
        low, high = frame.min_temp, frame.max_temp
        if not low < high:
            # Uniform frame: widen so min < max still holds
            low, high = low - self.settings.calibration_epsilon / 2, high + self.settings.calibration_epsilon / 2
            if not low < high:
                high = low + 1.0
        return CalibrationRange(low, high, CalibrationMode.AUTO)

    def load_frame(self, frame: ThermalFrame, seed: Optional[CalibrationSeed] = None) -> CalibrationRange:
        self.frame = frame
        if seed is not None and not seed.min < seed.max:
            logger.warning("Ignoring calibration seed [%s, %s]: min must be below max", seed.min, seed.max)
            seed = None
        if seed is not None:
            logger.debug("Seeding manual calibration [%s, %s]", seed.min, seed.max)
            new_range = CalibrationRange(seed.min, seed.max, CalibrationMode.MANUAL)
        else:
            new_range = self._auto_range(frame)
        self._publish(new_range)
        return new_range

    def clear(self):
        self.frame = None
        self.range = None

    def _bounded(self, value: float) -> float:
        if self.settings.allow_out_of_domain_calibration or self.frame is None:
            return float(value)
        return clamp(float(value), *sorted(self.domain))

    def set_min(self, value: float) -> bool:
        """Set the lower bound; returns False and changes nothing if value >= max - epsilon."""
        if self.range is None:
            return False
        value = self._bounded(value)
        if not value < self.range.max - self.settings.calibration_epsilon:
            logger.debug("Rejected calibration min %.3f (max %.3f)", value, self.range.max)
            return False
        self._publish(CalibrationRange(value, self.range.max, CalibrationMode.MANUAL))
        return True

    def set_max(self, value: float) -> bool:
        """Set the upper bound; returns False and changes nothing if value <= min + epsilon."""
        if self.range is None:
            return False
        value = self._bounded(value)
        if not value > self.range.min + self.settings.calibration_epsilon:
            logger.debug("Rejected calibration max %.3f (min %.3f)", value, self.range.min)
            return False
        self._publish(CalibrationRange(self.range.min, value, CalibrationMode.MANUAL))
        return True

    def set_range(self, low: float, high: float) -> bool:
        """Set both bounds at once; rejected unless low < high - epsilon after bounding."""
        if self.range is None:
            return False
        low, high = self._bounded(low), self._bounded(high)
        if not low < high - self.settings.calibration_epsilon:
            return False
        self._publish(CalibrationRange(low, high, CalibrationMode.MANUAL))
        return True

    def reset(self) -> Optional[CalibrationRange]:
        """Return to auto mode over the frame's reported bounds."""
        if self.frame is None:
            return None
        new_range = self._auto_range(self.frame)
        self._publish(new_range)
        return new_range

    def value_at_handle(self, fraction: float) -> Optional[float]:
        """Temperature at a slider position in [0, 1] over the frame domain."""
        if self.frame is None:
            return None
        low, high = self.domain
        return low + (high - low) * clamp(fraction, 0.0, 1.0)

    def handle_fraction(self, value: float) -> Optional[float]:
        """Slider position in [0, 1] for a temperature over the frame domain."""
        if self.frame is None:
            return None
        low, high = self.domain
        if high == low:
            return 0.5
        return clamp((value - low) / (high - low), 0.0, 1.0)

    def to_seed(self) -> Optional[CalibrationSeed]:
        """Manual range as a seed for persistence; None in auto mode."""
        if self.range is None or self.range.mode is not CalibrationMode.MANUAL:
            return None
        return CalibrationSeed(self.range.min, self.range.max)

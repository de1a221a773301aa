"""Numeric helpers shared by the rendering and interaction code."""

import math

import numpy as np


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (0.5 -> 1, 2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def round_half_up_array(values: np.ndarray) -> np.ndarray:
    """Vectorized round_half_up; returns int64."""
    return np.floor(np.asarray(values, dtype=np.float64) + 0.5).astype(np.int64)


def normalize_temperatures(temps: np.ndarray, t_min: float, t_max: float) -> np.ndarray:
    """Map temperatures onto [0, 1] over [t_min, t_max]; flat 0.5 when the window is empty."""
    temps = np.asarray(temps, dtype=np.float64)
    if not t_max > t_min:
        return np.full_like(temps, 0.5, dtype=np.float64)
    return np.clip((temps - t_min) / (t_max - t_min), 0.0, 1.0)


class UnitConversion:
    """Temperature conversions (K<->°C, °C<->°F)."""

    @staticmethod
    def k2c(k):
        return k - 273.15

    @staticmethod
    def c2k(c):
        return c + 273.15

    @staticmethod
    def c2f(c, diff=False):
        """Celsius to Fahrenheit; diff=True for delta conversion."""
        return c * (9.0 / 5.0) + (0 if diff else 32)

    @staticmethod
    def f2c(f, diff=False):
        """Fahrenheit to Celsius; diff=True for delta conversion."""
        return (f - (0 if diff else 32)) * (5.0 / 9.0)

    @staticmethod
    def unitlabel(unit):
        if unit == 'C':
            return '°C'
        if unit == 'K':
            return 'K'
        if unit == 'F':
            return '°F'
        return None


def format_temperature(celsius: float, unit: str = 'C', digits: int = 2) -> str:
    """Format a Celsius reading for display in C, F or K."""
    if unit == 'F':
        value = UnitConversion.c2f(celsius)
    elif unit == 'K':
        value = UnitConversion.c2k(celsius)
    elif unit == 'C':
        value = celsius
    else:
        raise ValueError(f"Unsupported temperature unit: {unit}")
    return f"{value:.{digits}f}{UnitConversion.unitlabel(unit)}"

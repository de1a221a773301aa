"""
Shared fixtures for thermal_canvas tests.
"""
import numpy as np
import pytest

from thermal_canvas.models import ThermalFrame


def make_frame(width=4, height=3, start=20.0, step=1.0, min_temp=None, max_temp=None):
    """Frame whose temperature at (x, y) is start + (y * width + x) * step."""
    temps = start + np.arange(width * height, dtype=np.float64) * step
    return ThermalFrame(
        width,
        height,
        float(temps.min()) if min_temp is None else min_temp,
        float(temps.max()) if max_temp is None else max_temp,
        temps,
    )


@pytest.fixture
def frame():
    return make_frame()


@pytest.fixture
def wide_frame():
    """100x50 frame spanning 0..100 °C."""
    temps = np.linspace(0.0, 100.0, 100 * 50)
    return ThermalFrame(100, 50, 0.0, 100.0, temps)

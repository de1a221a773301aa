"""
Tests for rendering frames to RGBA buffers.
"""
import numpy as np
import pytest

from thermal_canvas.compositor import Compositor, render, scale_nearest
from thermal_canvas.models import CalibrationRange, ThermalFrame


def _frame(temps, width, height):
    return ThermalFrame(width, height, min(temps), max(temps), temps)


def test_render_shape_and_alpha():
    """Output is (height, width, 4) uint8 with opaque alpha."""
    frame = _frame([0.0, 10.0, 20.0, 30.0, 40.0, 50.0], 3, 2)
    buffer = render(frame, "iron", CalibrationRange(0.0, 50.0))
    assert buffer.shape == (2, 3, 4)
    assert buffer.dtype == np.uint8
    assert np.all(buffer[..., 3] == 255)


def test_render_grayscale_values_row_major():
    """Samples map linearly through whiteHot in row-major order."""
    frame = _frame([0.0, 10.0, 20.0, 30.0], 2, 2)
    buffer = render(frame, "whiteHot", CalibrationRange(0.0, 30.0))
    assert buffer[0, 0, :3].tolist() == [0, 0, 0]
    assert buffer[0, 1, :3].tolist() == [85, 85, 85]
    assert buffer[1, 0, :3].tolist() == [170, 170, 170]
    assert buffer[1, 1, :3].tolist() == [255, 255, 255]


def test_render_clamps_outside_range():
    """Temperatures outside the calibration window saturate at the palette ends."""
    frame = _frame([-50.0, 500.0], 2, 1)
    buffer = render(frame, "blackHot", CalibrationRange(0.0, 100.0))
    assert buffer[0, 0, :3].tolist() == [255, 255, 255]
    assert buffer[0, 1, :3].tolist() == [0, 0, 0]


def test_render_degenerate_range_uses_midpoint():
    """A window with max <= min renders every sample at 0.5."""
    frame = _frame([1.0, 2.0, 3.0], 3, 1)
    buffer = render(frame, "whiteHot", (5.0, 5.0))
    assert np.all(buffer[..., :3] == 128)


def test_compositor_recomputes_only_on_change():
    """Same inputs reuse the buffer; palette, range or frame changes re-render."""
    frame = _frame([0.0, 1.0, 2.0, 3.0], 2, 2)
    compositor = Compositor()
    first = compositor.get_buffer(frame, "iron", CalibrationRange(0.0, 3.0))
    again = compositor.get_buffer(frame, "iron", CalibrationRange(0.0, 3.0))
    assert again is first
    assert compositor.render_count == 1

    compositor.get_buffer(frame, "rainbow", CalibrationRange(0.0, 3.0))
    assert compositor.render_count == 2
    compositor.get_buffer(frame, "rainbow", CalibrationRange(1.0, 3.0))
    assert compositor.render_count == 3
    other = _frame([0.0, 1.0, 2.0, 3.0], 2, 2)
    compositor.get_buffer(other, "rainbow", CalibrationRange(1.0, 3.0))
    assert compositor.render_count == 4


def test_cached_buffer_is_read_only():
    """Callers cannot mutate the cached image."""
    frame = _frame([0.0, 1.0], 2, 1)
    buffer = Compositor().get_buffer(frame, "iron", CalibrationRange(0.0, 1.0))
    with pytest.raises(ValueError):
        buffer[0, 0, 0] = 1


def test_scale_nearest_repeats_blocks():
    """Each sample becomes a factor x factor block."""
    image = np.arange(2 * 2 * 4, dtype=np.uint8).reshape(2, 2, 4)
    big = scale_nearest(image, 3)
    assert big.shape == (6, 6, 4)
    assert np.array_equal(big[0:3, 0:3], np.broadcast_to(image[0, 0], (3, 3, 4)))
    assert np.array_equal(big[3:6, 3:6], np.broadcast_to(image[1, 1], (3, 3, 4)))


def test_scale_nearest_rejects_fractional_factor():
    with pytest.raises(ValueError, match="positive integer"):
        scale_nearest(np.zeros((1, 1, 4), dtype=np.uint8), 1.5)

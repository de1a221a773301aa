"""
Tests for palette lookup and color interpolation.
"""
import numpy as np
import pytest

from thermal_canvas.exceptions import UnknownPaletteError
from thermal_canvas.palettes import (
    PALETTE_STOPS,
    PALETTES,
    Palette,
    check_palette_registry,
    color_at,
    colors_at,
    get_palette,
    get_palette_info,
    palette_gradient,
)


def test_registry_is_consistent():
    """Every palette has stops from 0 to 1 and one catalog entry."""
    check_palette_registry()
    assert set(PALETTE_STOPS) == set(Palette)


def test_catalog_order_and_names():
    """The selector lists the six palettes in a fixed order."""
    assert [info.id.value for info in PALETTES] == [
        "iron", "rainbow", "whiteHot", "blackHot", "arctic", "outdoor"
    ]
    assert get_palette_info("whiteHot").name == "White Hot"


def test_iron_midpoint_between_stops():
    """0.5 lies halfway between the purple and red iron stops."""
    assert color_at(0.5, Palette.IRON) == (164, 0, 64)
    assert color_at(0.5, "iron") == (164, 0, 64)


@pytest.mark.parametrize("palette", list(Palette))
def test_exact_stop_positions_return_stop_color(palette):
    """A value at a stop's position returns that stop's color exactly."""
    for position, color in PALETTE_STOPS[palette]:
        assert color_at(position, palette) == tuple(color)


@pytest.mark.parametrize("palette", list(Palette))
def test_values_outside_unit_interval_are_clamped(palette):
    """No extrapolation below 0 or above 1."""
    stops = PALETTE_STOPS[palette]
    assert color_at(-3.0, palette) == stops[0][1]
    assert color_at(7.5, palette) == stops[-1][1]


def test_half_rounds_up():
    """127.5 rounds to 128, as the reference renderer does."""
    assert color_at(0.5, Palette.WHITE_HOT) == (128, 128, 128)
    assert color_at(0.5, Palette.BLACK_HOT) == (128, 128, 128)


@pytest.mark.parametrize("palette", list(Palette))
def test_vectorized_matches_scalar(palette):
    """colors_at agrees with color_at element for element, channels within 0..255."""
    values = np.linspace(-0.1, 1.1, 1201)
    vectorized = colors_at(values, palette)
    assert vectorized.shape == (1201, 3)
    assert vectorized.dtype == np.uint8
    for value, rgb in zip(values, vectorized):
        assert tuple(int(c) for c in rgb) == color_at(value, palette)


def test_vectorized_keeps_input_shape():
    """A 2D input yields a (rows, cols, 3) output."""
    out = colors_at(np.zeros((3, 5)), Palette.RAINBOW)
    assert out.shape == (3, 5, 3)
    assert tuple(out[0, 0]) == (0, 0, 128)


def test_unknown_palette_name():
    """Unknown names raise UnknownPaletteError, which is a ValueError."""
    with pytest.raises(UnknownPaletteError, match="Unknown palette"):
        get_palette("sepia")
    with pytest.raises(ValueError):
        color_at(0.5, "sepia")


def test_gradient_endpoints():
    """Gradient sampling starts and ends on the end stops."""
    gradient = palette_gradient(Palette.ARCTIC, 5)
    assert len(gradient) == 5
    assert gradient[0] == (0, 0, 64)
    assert gradient[-1] == (255, 255, 255)
    assert gradient[2] == (0, 128, 192)

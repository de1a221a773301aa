"""
Palette registry and color mapping for thermal rendering.

Each palette is an ordered list of stops (position, (r, g, b)) from cold to hot.
Positions start at 0.0, end at 1.0 and strictly increase. color_at() maps a
normalized value in [0, 1] to a color by linear interpolation between the two
bracketing stops.

To add a palette: add a member to Palette, its stops to PALETTE_STOPS and a
catalog entry to PALETTES. check_palette_registry() fails if the three drift.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple, Union

import numpy as np

from .exceptions import UnknownPaletteError
from .utilities import clamp, round_half_up, round_half_up_array

RGB = Tuple[int, int, int]
Stop = Tuple[float, RGB]


class Palette(str, Enum):
    IRON = "iron"
    RAINBOW = "rainbow"
    WHITE_HOT = "whiteHot"
    BLACK_HOT = "blackHot"
    ARCTIC = "arctic"
    OUTDOOR = "outdoor"


# -----------------------------------------------------------------------------
# Stop tables: one entry per palette, cold -> hot
# -----------------------------------------------------------------------------
PALETTE_STOPS: Dict[Palette, Tuple[Stop, ...]] = {
    Palette.IRON: (
        (0.0, (0, 0, 0)),
        (0.2, (32, 0, 128)),
        (0.4, (128, 0, 128)),
        (0.6, (200, 0, 0)),
        (0.8, (255, 128, 0)),
        (0.9, (255, 255, 0)),
        (1.0, (255, 255, 255)),
    ),
    Palette.RAINBOW: (
        (0.0, (0, 0, 128)),
        (0.2, (0, 0, 255)),
        (0.35, (0, 255, 255)),
        (0.5, (0, 255, 0)),
        (0.65, (255, 255, 0)),
        (0.8, (255, 128, 0)),
        (1.0, (255, 0, 0)),
    ),
    Palette.WHITE_HOT: (
        (0.0, (0, 0, 0)),
        (1.0, (255, 255, 255)),
    ),
    Palette.BLACK_HOT: (
        (0.0, (255, 255, 255)),
        (1.0, (0, 0, 0)),
    ),
    Palette.ARCTIC: (
        (0.0, (0, 0, 64)),
        (0.25, (0, 64, 128)),
        (0.5, (0, 128, 192)),
        (0.75, (128, 200, 255)),
        (1.0, (255, 255, 255)),
    ),
    Palette.OUTDOOR: (
        (0.0, (0, 64, 0)),
        (0.25, (0, 128, 0)),
        (0.5, (192, 192, 0)),
        (0.75, (255, 128, 0)),
        (1.0, (255, 0, 0)),
    ),
}


@dataclass(frozen=True)
class PaletteInfo:
    """Catalog entry shown in a palette selector."""

    id: Palette
    name: str
    description: str


PALETTES: Tuple[PaletteInfo, ...] = (
    PaletteInfo(Palette.IRON, "Iron", "Classic thermal palette"),
    PaletteInfo(Palette.RAINBOW, "Rainbow", "Full spectrum colors"),
    PaletteInfo(Palette.WHITE_HOT, "White Hot", "Grayscale, hot is white"),
    PaletteInfo(Palette.BLACK_HOT, "Black Hot", "Grayscale, hot is black"),
    PaletteInfo(Palette.ARCTIC, "Arctic", "Blue to white tones"),
    PaletteInfo(Palette.OUTDOOR, "Outdoor", "Green to red vegetation style"),
)

SUPPORTED_PALETTES = tuple(p.value for p in Palette)


def get_palette(name: Union[str, Palette]) -> Palette:
    """Resolve a palette id (e.g. "whiteHot") to a Palette member."""
    if isinstance(name, Palette):
        return name
    try:
        return Palette(name)
    except ValueError:
        supported = ", ".join(SUPPORTED_PALETTES)
        raise UnknownPaletteError(f"Unknown palette: {name!r}. Supported: {supported}.") from None


def get_palette_info(palette: Union[str, Palette]) -> PaletteInfo:
    palette = get_palette(palette)
    for info in PALETTES:
        if info.id is palette:
            return info
    raise UnknownPaletteError(f"Palette {palette.value!r} has no catalog entry")


def palette_stops(palette: Union[str, Palette]) -> Tuple[Stop, ...]:
    return PALETTE_STOPS[get_palette(palette)]


def check_palette_registry() -> None:
    """Raise ValueError if any palette is missing stops/catalog entry or has malformed stops."""
    catalog_ids = [info.id for info in PALETTES]
    for palette in Palette:
        if palette not in PALETTE_STOPS:
            raise ValueError(f"Palette {palette.value} has no stops")
        if catalog_ids.count(palette) != 1:
            raise ValueError(f"Palette {palette.value} must appear once in the catalog")
        stops = PALETTE_STOPS[palette]
        positions = [pos for pos, _ in stops]
        if len(stops) < 2 or positions[0] != 0.0 or positions[-1] != 1.0:
            raise ValueError(f"Palette {palette.value} must span positions 0.0 to 1.0")
        if any(b <= a for a, b in zip(positions, positions[1:])):
            raise ValueError(f"Palette {palette.value} positions must strictly increase")
        for _, color in stops:
            if len(color) != 3 or any(not 0 <= c <= 255 for c in color):
                raise ValueError(f"Palette {palette.value} has an invalid color {color}")


def color_at(value: float, palette: Union[str, Palette]) -> RGB:
    """Return the (r, g, b) color for a normalized value; value is clamped to [0, 1]."""
    stops = palette_stops(palette)
    value = clamp(float(value), 0.0, 1.0)
    for (pos_a, color_a), (pos_b, color_b) in zip(stops, stops[1:]):
        if pos_a <= value <= pos_b:
            width = pos_b - pos_a
            t = 0.0 if width == 0 else (value - pos_a) / width
            return tuple(round_half_up(a + (b - a) * t) for a, b in zip(color_a, color_b))
    # Unreachable for a well formed palette; keeps the function total
    return stops[-1][1]


def _stop_arrays(palette: Palette) -> Tuple[np.ndarray, np.ndarray]:
    stops = PALETTE_STOPS[palette]
    positions = np.array([pos for pos, _ in stops], dtype=np.float64)
    colors = np.array([color for _, color in stops], dtype=np.float64)
    return positions, colors


def colors_at(values: np.ndarray, palette: Union[str, Palette]) -> np.ndarray:
    """
    Vectorized color_at.

    Returns a uint8 array with a trailing RGB axis; element for element the
    result equals color_at() on the same value.
    """
    positions, colors = _stop_arrays(get_palette(palette))
    values = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)
    # First pair whose upper stop is >= value, as in color_at
    idx = np.searchsorted(positions[1:], values, side="left")
    idx = np.clip(idx, 0, len(positions) - 2)
    lower = positions[idx]
    width = positions[idx + 1] - lower
    with np.errstate(divide="ignore", invalid="ignore"):
        t = np.where(width == 0, 0.0, (values - lower) / width)
    c_lo = colors[idx]
    c_hi = colors[idx + 1]
    rgb = round_half_up_array(c_lo + (c_hi - c_lo) * t[..., np.newaxis])
    return np.clip(rgb, 0, 255).astype(np.uint8)


def palette_gradient(palette: Union[str, Palette], steps: int = 256) -> List[RGB]:
    """Sample a palette at evenly spaced values, e.g. for a color scale bar."""
    if steps < 2:
        raise ValueError("steps must be >= 2")
    return [color_at(i / (steps - 1), palette) for i in range(steps)]

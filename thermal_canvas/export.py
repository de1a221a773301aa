"""Write rendered frames, annotated figures and marker tables to disk."""

import csv
from pathlib import Path
from typing import Iterable, Optional, Sequence, Union

import numpy as np
from matplotlib import image as mpimg
from matplotlib.cm import ScalarMappable
from matplotlib.colors import ListedColormap, Normalize
from matplotlib.figure import Figure

from .compositor import scale_nearest
from .models import CalibrationRange, Marker, ThermalFrame
from .palettes import Palette, get_palette_info, palette_gradient
from .utilities import UnitConversion

PathLike = Union[str, Path]


def palette_colormap(palette: Union[str, Palette], steps: int = 256) -> ListedColormap:
    """Matplotlib colormap sampled from a palette."""
    info = get_palette_info(palette)
    colors = np.array(palette_gradient(info.id, steps), dtype=np.float64) / 255.0
    return ListedColormap(colors, name=info.id.value)


def save_png(buffer: np.ndarray, output_path: PathLike, scale: int = 1) -> Path:
    """Save an RGBA buffer as PNG, enlarged by an integer factor with nearest-neighbour sampling."""
    output_path = Path(output_path)
    mpimg.imsave(str(output_path), scale_nearest(buffer, scale), format="png")
    return output_path


def save_annotated_figure(frame: ThermalFrame, buffer: np.ndarray, palette: Union[str, Palette],
                          calibration: CalibrationRange, output_path: PathLike,
                          markers: Sequence[Marker] = (), title: Optional[str] = None) -> Path:
    """Plot the rendered frame with numbered markers and a color scale bar."""
    output_path = Path(output_path)
    fig = Figure(figsize=(8, 6))
    ax = fig.add_subplot(1, 1, 1)
    ax.imshow(buffer, interpolation="nearest", aspect="equal")
    for number, marker in enumerate(markers, start=1):
        ax.plot(marker.x, marker.y, marker="+", color="white", markersize=12, markeredgewidth=2)
        ax.annotate(
            f"{number}: {marker.temperature:.1f}{UnitConversion.unitlabel('C')}",
            (marker.x, marker.y), xytext=(6, -6), textcoords="offset points",
            color="white", fontsize=8,
            bbox={"boxstyle": "round,pad=0.2", "facecolor": "black", "alpha": 0.6},
        )
    mappable = ScalarMappable(norm=Normalize(vmin=calibration.min, vmax=calibration.max),
                              cmap=palette_colormap(palette))
    fig.colorbar(mappable, ax=ax, label=f"Temperature ({UnitConversion.unitlabel('C')})")
    ax.set_title(title or f"Thermal Image {frame.width}x{frame.height} - {get_palette_info(palette).name}")
    ax.set_xlabel("Width (pixels)")
    ax.set_ylabel("Height (pixels)")
    fig.tight_layout()
    fig.savefig(str(output_path))
    return output_path


def export_frame_csv(frame: ThermalFrame, output_path: PathLike) -> Path:
    """Export temperature data as X, Y, Temperature_C rows."""
    output_path = Path(output_path)
    data = frame.temperatures
    with open(output_path, 'w', newline='') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(['X', 'Y', 'Temperature_C'])
        for y in range(data.shape[0]):
            for x in range(data.shape[1]):
                writer.writerow([x, y, data[y, x]])
    return output_path


def export_markers_csv(markers: Iterable[Marker], output_path: PathLike) -> Path:
    """Export markers in display order with their 1-based index."""
    output_path = Path(output_path)
    with open(output_path, 'w', newline='') as csvfile:
        writer = csv.writer(csvfile)
        writer.writerow(['index', 'x', 'y', 'temperature', 'elementType', 'finalAction'])
        for i, marker in enumerate(markers, start=1):
            record = marker.to_record(i)
            writer.writerow([record['index'], record['x'], record['y'], record['temperature'],
                             record['elementType'], record['finalAction']])
    return output_path

#!/usr/bin/env python3
"""
Example script for thermal_canvas

Builds a synthetic 160x120 frame with a hot spot, then walks through the
viewer: fit to a container, hover, zoom, place markers, adjust calibration,
and save the rendered and annotated images.

Usage:
    python example.py
"""

import asyncio

import numpy as np
import matplotlib.pyplot as plt

from thermal_canvas import InMemoryMarkerRepository, ThermalFrame, ThermalViewSession
from thermal_canvas.export import save_annotated_figure, save_png


def synthetic_frame(width=160, height=120):
    """Ambient 22°C background with a 65°C hot spot."""
    yy, xx = np.mgrid[0:height, 0:width]
    spot = np.exp(-((xx - 110) ** 2 + (yy - 40) ** 2) / (2 * 12.0 ** 2))
    return ThermalFrame.from_array(22.0 + 43.0 * spot)


def main():
    print("Thermal Canvas - Basic Example")
    print("=" * 50)

    session = ThermalViewSession("example-1", InMemoryMarkerRepository())
    session.show_frame(synthetic_frame())
    state = session.fit(800, 600)
    print(f"Fitted at scale {state.scale:.2f}, offset ({state.offset_x:.0f}, {state.offset_y:.0f})")

    # Hover over the centre of the container
    session.interaction.pointer_move(400, 300)
    print(session.hover_text())

    session.viewport.zoom_in()
    print(f"Zoomed to scale {session.viewport.scale:.2f}")
    session.viewport.reset()
    session.fit(800, 600)

    # Place a marker on the hot spot and one on the background
    for px, py in ((110, 40), (20, 100)):
        session.interaction.toggle_add_marker()
        sx, sy = session.viewport.pixel_center_to_screen(px, py)
        marker = session.interaction.click(sx, sy)
        print(f"Marker at ({marker.x}, {marker.y}): {marker.temperature:.1f}°C")

    if asyncio.run(session.save_markers()):
        print(f"Saved {len(session.markers)} markers")

    session.select_palette("rainbow")
    session.calibration.set_min(30.0)
    rng = session.calibration_range
    print(f"Calibration: {rng.min:.1f} - {rng.max:.1f} ({rng.mode.value})")

    save_png(session.image, "example_frame.png", scale=2)
    save_annotated_figure(session.frame, session.image, session.palette, rng,
                          "example_annotated.png", session.markers.markers)
    print("Images written to example_frame.png and example_annotated.png")

    plt.figure(figsize=(8, 6))
    plt.imshow(session.image, interpolation="nearest")
    plt.title("Thermal Canvas - rainbow")
    plt.axis("off")
    plt.show()


if __name__ == "__main__":
    main()

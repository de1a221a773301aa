"""
Command-line interface for thermal_canvas.
"""

import argparse
import asyncio
import logging
import sys

from .exceptions import ThermalCanvasError
from .export import export_frame_csv, export_markers_csv, save_annotated_figure, save_png
from .markers import JsonMarkerRepository
from .palettes import PALETTES, SUPPORTED_PALETTES
from .session import ThermalViewSession
from .settings import DEFAULT_SETTINGS, Settings
from .utilities import format_temperature


def build_parser():
    parser = argparse.ArgumentParser(
        prog="thermal-canvas",
        description="Render and annotate thermal frames (.json, .csv, .npy)"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    parser.add_argument("--settings", type=str, help="JSON file with viewer settings")

    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a frame to PNG")
    render.add_argument("file_path", help="Path to the thermal frame to read")
    render.add_argument("--output", "-o", required=True, help="Output PNG path")
    render.add_argument("--palette", choices=SUPPORTED_PALETTES, help="Color palette")
    render.add_argument("--min", dest="range_min", type=float, help="Calibration minimum (°C)")
    render.add_argument("--max", dest="range_max", type=float, help="Calibration maximum (°C)")
    render.add_argument("--max-temp-hint", type=float, help="Device-reported maximum temperature")
    render.add_argument("--scale", type=int, default=1, help="Integer enlargement (nearest neighbour)")
    render.add_argument("--annotate", action="store_true",
                        help="Draw markers and a color scale bar with matplotlib")
    _add_marker_args(render, required=False)

    info = sub.add_parser("info", help="Show frame information")
    info.add_argument("file_path", help="Path to the thermal frame to read")
    info.add_argument("--stats", action="store_true", help="Show temperature statistics")
    info.add_argument("--export-csv", type=str, help="Export temperature data to CSV file")

    sub.add_parser("palettes", help="List available palettes")

    markers = sub.add_parser("markers", help="Inspect stored markers")
    _add_marker_args(markers, required=True)
    markers.add_argument("--export-csv", type=str, help="Export markers to CSV file")

    add = sub.add_parser("add-marker", help="Add a marker at a frame pixel and save")
    add.add_argument("file_path", help="Path to the thermal frame to read")
    add.add_argument("x", type=int)
    add.add_argument("y", type=int)
    add.add_argument("--element-type", type=str, help="Element classification")
    add.add_argument("--final-action", type=str, help="Final action")
    _add_marker_args(add, required=True)

    return parser


def _add_marker_args(parser, required):
    parser.add_argument("--store", required=required, help="Directory holding marker JSON files")
    parser.add_argument("--measurement", required=required, help="Measurement identifier")


def _open_session(args, settings):
    repository = JsonMarkerRepository(args.store) if getattr(args, "store", None) else None
    session = ThermalViewSession(getattr(args, "measurement", None), repository, settings=settings)
    if not session.open(args.file_path, max_temp_hint=getattr(args, "max_temp_hint", None)):
        raise ThermalCanvasError(session.error)
    return session


def cmd_render(args, settings):
    session = _open_session(args, settings)
    if args.palette:
        session.select_palette(args.palette)
    calibration = session.calibration
    # Command-line bounds go through the same guard as slider edits
    accepted = True
    if args.range_min is not None and args.range_max is not None:
        accepted = calibration.set_range(args.range_min, args.range_max)
    elif args.range_min is not None:
        accepted = calibration.set_min(args.range_min)
    elif args.range_max is not None:
        accepted = calibration.set_max(args.range_max)
    if not accepted:
        rng = calibration.range
        print(f"Calibration bounds rejected: min must stay {settings.calibration_epsilon} below max; "
              f"using [{rng.min:.1f}, {rng.max:.1f}]", file=sys.stderr)
    if session.measurement_id and session.markers.repository is not None:
        if not asyncio.run(session.load_markers()):
            print(session.error, file=sys.stderr)
    if args.annotate:
        save_annotated_figure(session.frame, session.image, session.palette, session.calibration_range,
                              args.output, session.markers.markers)
    else:
        save_png(session.image, args.output, args.scale)
    rng = session.calibration_range
    print(f"Rendered {session.frame.width}x{session.frame.height} frame with {session.palette.value} "
          f"palette over [{rng.min:.1f}, {rng.max:.1f}] to: {args.output}")


def cmd_info(args, settings):
    session = _open_session(args, settings)
    frame = session.frame
    unit = settings.temperature_unit
    print("\n=== THERMAL FRAME ===")
    print(f"File: {args.file_path}")
    print(f"Image size: {frame.width}x{frame.height}")
    print(f"Reported range: {format_temperature(frame.min_temp, unit)} - {format_temperature(frame.max_temp, unit)}")
    if args.stats:
        temp_min, temp_max = frame.get_temperature_range()
        print("\n=== TEMPERATURE STATISTICS ===")
        print(f"Minimum temperature: {format_temperature(temp_min, unit)}")
        print(f"Maximum temperature: {format_temperature(temp_max, unit)}")
        print(f"Average temperature: {format_temperature(frame.get_average_temperature(), unit)}")
        print(f"Temperature range: {temp_max - temp_min:.2f}")
    if args.export_csv:
        export_frame_csv(frame, args.export_csv)
        print(f"\nData exported to: {args.export_csv}")


def cmd_palettes(args, settings):
    for info in PALETTES:
        print(f"{info.id.value:<10} {info.name:<10} {info.description}")


def cmd_markers(args, settings):
    session = ThermalViewSession(args.measurement, JsonMarkerRepository(args.store), settings=settings)
    if not asyncio.run(session.load_markers()):
        raise ThermalCanvasError(session.error)
    markers = session.markers.markers
    if not markers:
        print(f"No markers for measurement {args.measurement}")
    for number, marker in enumerate(markers, start=1):
        print(f"{number:>3}  ({marker.x}, {marker.y})  "
              f"{format_temperature(marker.temperature, settings.temperature_unit)}  "
              f"{marker.element_type}  {marker.final_action}")
    if args.export_csv:
        export_markers_csv(markers, args.export_csv)
        print(f"Markers exported to: {args.export_csv}")


def cmd_add_marker(args, settings):
    session = _open_session(args, settings)
    if not asyncio.run(session.load_markers()):
        raise ThermalCanvasError(session.error)
    if not session.frame.contains(args.x, args.y):
        raise ValueError(f"Pixel ({args.x}, {args.y}) outside {session.frame.width}x{session.frame.height} frame")
    marker = session.markers.add(args.x, args.y, session.frame.temperature_at(args.x, args.y))
    changes = {}
    if args.element_type is not None:
        changes["element_type"] = args.element_type
    if args.final_action is not None:
        changes["final_action"] = args.final_action
    if changes:
        marker = session.markers.update(marker.id, **changes)
    if not asyncio.run(session.save_markers()):
        raise ThermalCanvasError(session.error)
    print(f"Marker #{session.markers.number_of(marker.id)} at ({marker.x}, {marker.y}): "
          f"{format_temperature(marker.temperature, settings.temperature_unit)}")


COMMANDS = {
    "render": cmd_render,
    "info": cmd_info,
    "palettes": cmd_palettes,
    "markers": cmd_markers,
    "add-marker": cmd_add_marker,
}


def main(argv=None):
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = Settings.from_json_file(args.settings) if args.settings else DEFAULT_SETTINGS
        COMMANDS[args.command](args, settings)
    except (ThermalCanvasError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()

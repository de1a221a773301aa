"""
Tests for the thermal-canvas command line.
"""
import json

import pytest

from thermal_canvas.cli import main


@pytest.fixture
def frame_file(tmp_path):
    path = tmp_path / "frame.json"
    path.write_text(json.dumps({
        "width": 4, "height": 3, "minTemp": 20.0, "maxTemp": 31.0,
        "temperatures": [20.0 + i for i in range(12)],
    }))
    return path


def test_palettes(capsys):
    main(["palettes"])
    out = capsys.readouterr().out
    assert "whiteHot" in out
    assert "Green to red vegetation style" in out


def test_info_with_stats(frame_file, capsys):
    main(["info", str(frame_file), "--stats"])
    out = capsys.readouterr().out
    assert "Image size: 4x3" in out
    assert "Average temperature: 25.50°C" in out


def test_render_png(frame_file, tmp_path, capsys):
    output = tmp_path / "out.png"
    main(["render", str(frame_file), "-o", str(output), "--palette", "rainbow",
          "--min", "22", "--max", "28", "--scale", "2"])
    assert output.read_bytes()[:8] == b"\x89PNG\r\n\x1a\n"
    assert "over [22.0, 28.0]" in capsys.readouterr().out


def test_add_list_and_export_markers(frame_file, tmp_path, capsys):
    store = tmp_path / "markers"
    main(["add-marker", str(frame_file), "1", "2", "--store", str(store), "--measurement", "m7",
          "--element-type", "Transformer"])
    main(["add-marker", str(frame_file), "3", "0", "--store", str(store), "--measurement", "m7"])
    out = capsys.readouterr().out
    assert "Marker #1 at (1, 2): 29.00°C" in out
    assert "Marker #2 at (3, 0): 23.00°C" in out

    csv_path = tmp_path / "markers.csv"
    main(["markers", "--store", str(store), "--measurement", "m7", "--export-csv", str(csv_path)])
    out = capsys.readouterr().out
    assert "Transformer" in out
    assert csv_path.read_text().splitlines()[0] == "index,x,y,temperature,elementType,finalAction"

    annotated = tmp_path / "annotated.png"
    main(["render", str(frame_file), "-o", str(annotated), "--annotate",
          "--store", str(store), "--measurement", "m7"])
    assert annotated.exists()


def test_add_marker_outside_frame(frame_file, tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["add-marker", str(frame_file), "9", "9", "--store", str(tmp_path), "--measurement", "m7"])
    assert exc_info.value.code == 1
    assert "outside 4x3 frame" in capsys.readouterr().err


def test_missing_file_exits_with_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["info", str(tmp_path / "missing.json")])
    assert exc_info.value.code == 1
    assert "File not found" in capsys.readouterr().err


def test_info_exports_frame_csv(frame_file, tmp_path, capsys):
    csv_path = tmp_path / "frame.csv"
    main(["info", str(frame_file), "--export-csv", str(csv_path)])
    assert "Data exported to:" in capsys.readouterr().out
    lines = csv_path.read_text().splitlines()
    assert lines[0] == "X,Y,Temperature_C"
    assert len(lines) == 13
    main(["info", str(csv_path), "--stats"])
    assert "Average temperature: 25.50°C" in capsys.readouterr().out


def test_render_rejects_too_narrow_range(frame_file, tmp_path, capsys):
    """Both bounds pass the same epsilon guard as slider edits."""
    output = tmp_path / "out.png"
    main(["render", str(frame_file), "-o", str(output), "--min", "30", "--max", "30.5"])
    captured = capsys.readouterr()
    assert "Calibration bounds rejected" in captured.err
    assert "over [20.0, 31.0]" in captured.out


def test_render_clamps_range_to_frame(frame_file, tmp_path, capsys):
    main(["render", str(frame_file), "-o", str(tmp_path / "out.png"), "--min", "0", "--max", "100"])
    assert "over [20.0, 31.0]" in capsys.readouterr().out

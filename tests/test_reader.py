"""
Tests for frame files and the decoder boundary.
"""
import json

import numpy as np
import pytest

from thermal_canvas.exceptions import FrameDecodeError
from thermal_canvas.export import export_frame_csv
from thermal_canvas.models import ThermalFrame
from thermal_canvas.reader import FrameReader, decode_frame, get_supported_formats, read_frame

from conftest import make_frame


def test_read_frame_file_not_found():
    """read_frame raises FileNotFoundError for missing file."""
    with pytest.raises(FileNotFoundError, match="File not found"):
        read_frame("nonexistent.json")


def test_read_frame_unsupported_format(tmp_path):
    """read_frame raises ValueError for unknown extensions."""
    path = tmp_path / "file.txt"
    path.write_text("hello")
    with pytest.raises(ValueError, match="Unsupported file format"):
        read_frame(path)


def test_supported_formats():
    assert get_supported_formats() == [".json", ".csv", ".npy"]


def test_read_json_payload(tmp_path):
    """Decoder service payloads load with their reported bounds."""
    path = tmp_path / "frame.json"
    path.write_text(json.dumps({
        "width": 3, "height": 2, "minTemp": -5.0, "maxTemp": 60.0,
        "temperatures": [1, 2, 3, 4, 5, 6], "camera": "P2 Pro",
    }))
    frame = read_frame(path)
    assert frame.get_image_shape() == (2, 3)
    assert (frame.min_temp, frame.max_temp) == (-5.0, 60.0)
    assert frame.temperature_at(0, 1) == 4.0
    assert frame.metadata["camera"] == "P2 Pro"


def test_read_json_wrong_length(tmp_path):
    path = tmp_path / "frame.json"
    path.write_text(json.dumps({"width": 3, "height": 2, "temperatures": [1, 2, 3]}))
    with pytest.raises(ValueError, match="Expected 6 temperature samples"):
        read_frame(path)


def test_csv_round_trip(tmp_path):
    """Frames exported as X, Y, Temperature_C read back identically."""
    frame = make_frame(5, 4, start=-3.5, step=0.25)
    path = export_frame_csv(frame, tmp_path / "frame.csv")
    loaded = read_frame(path)
    assert loaded.get_image_shape() == (4, 5)
    assert np.array_equal(loaded.temperatures, frame.temperatures)


def test_csv_missing_pixels(tmp_path):
    path = tmp_path / "frame.csv"
    path.write_text("X,Y,Temperature_C\n0,0,1.0\n1,1,2.0\n")
    with pytest.raises(ValueError, match="rows but spans"):
        read_frame(path)


def test_read_npy_with_max_temp_hint(tmp_path):
    """The hint replaces the reported maximum."""
    path = tmp_path / "frame.npy"
    np.save(path, np.array([[10.0, 20.0], [30.0, 40.0]]))
    frame = read_frame(path, max_temp=120.0)
    assert (frame.min_temp, frame.max_temp) == (10.0, 120.0)
    assert frame.metadata["max_temp_hint"] == 120.0


def test_decode_frame_wraps_errors():
    def decoder(source, hint):
        raise RuntimeError("service unavailable")

    with pytest.raises(FrameDecodeError, match="service unavailable") as exc_info:
        decode_frame(decoder, "img.jpg")
    assert exc_info.value.source == "img.jpg"


def test_decode_frame_requires_thermal_frame():
    with pytest.raises(FrameDecodeError, match="expected ThermalFrame"):
        decode_frame(lambda source, hint: {"width": 1}, "img.jpg")


def test_frame_reader_directory(tmp_path):
    """Readable frames load; broken files are skipped."""
    np.save(tmp_path / "a.npy", np.ones((2, 2)))
    (tmp_path / "b.json").write_text("{broken")
    (tmp_path / "notes.txt").write_text("ignored")
    reader = FrameReader()
    frames = reader.read_directory(tmp_path)
    assert len(frames) == 1
    assert reader.validate_file(tmp_path / "a.npy")
    assert not reader.validate_file(tmp_path / "b.json")


def test_frame_reader_is_a_decoder(tmp_path):
    np.save(tmp_path / "a.npy", np.zeros((1, 3)))
    frame = decode_frame(FrameReader(), tmp_path / "a.npy", 9.0)
    assert frame.max_temp == 9.0


def test_frame_is_immutable():
    frame = make_frame(2, 2)
    with pytest.raises(ValueError):
        frame.temperatures[0, 0] = 99.0
    with pytest.raises(IndexError, match="out of image bounds"):
        frame.temperature_at(2, 0)


def test_frame_rejects_bad_dimensions():
    with pytest.raises(ValueError, match="positive"):
        ThermalFrame(0, 2, 0.0, 1.0, [])


def test_payload_written_by_frame_reads_back(tmp_path):
    """A frame serialized as a decoder payload loads with the same samples and bounds."""
    frame = make_frame(5, 2, start=-3.0, step=0.5, min_temp=-10.0, max_temp=40.0)
    path = tmp_path / "payload.json"
    path.write_text(json.dumps(frame.to_payload()))
    loaded = read_frame(path)
    assert (loaded.min_temp, loaded.max_temp) == (-10.0, 40.0)
    assert np.array_equal(loaded.temperatures, frame.temperatures)


def test_max_temp_hint_below_minimum_is_a_decode_failure(tmp_path):
    """A hint under the frame minimum cannot form a valid bounds pair."""
    path = tmp_path / "frame.npy"
    np.save(path, np.linspace(20.0, 40.0, 6).reshape(2, 3))
    with pytest.raises(ValueError, match="above max_temp"):
        read_frame(path, max_temp=10.0)
    with pytest.raises(FrameDecodeError, match="above max_temp"):
        decode_frame(FrameReader(), path, 10.0)


def test_frame_rejects_inverted_bounds():
    with pytest.raises(ValueError, match="min_temp 30.0 is above max_temp 20.0"):
        ThermalFrame(2, 1, 30.0, 20.0, [25.0, 26.0])


def test_json_payload_must_be_utf8(tmp_path):
    path = tmp_path / "frame.json"
    path.write_bytes(b'{"width": 1, "height": 1, "temperatures": [1.0], "camera": "\xff\xfe"}')
    with pytest.raises(ValueError, match="not valid UTF-8"):
        read_frame(path)
    assert not FrameReader().validate_file(path)

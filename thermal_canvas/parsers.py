"""Parse temperature-field files (.json decoder payloads, .csv X/Y/Temperature_C tables, .npy arrays)."""

import csv
import json
import os
from typing import Any, Dict, Optional

import numpy as np

from .models import ThermalFrame


class FrameParser:
    """Base parser: subclasses implement _read() returning a ThermalFrame."""

    extensions = ()

    def parse(self, file_path: str, max_temp_hint: Optional[float] = None) -> ThermalFrame:
        """Read file_path; a max_temp_hint replaces the reported upper bound."""
        if not os.path.exists(file_path):
            raise FileNotFoundError(f"File not found: {file_path}")
        frame = self._read(file_path)
        if max_temp_hint is not None:
            frame = ThermalFrame(
                frame.width, frame.height, frame.min_temp, float(max_temp_hint),
                frame.temperatures, dict(frame.metadata, max_temp_hint=float(max_temp_hint)),
            )
        return frame

    def _read(self, file_path: str) -> ThermalFrame:
        raise NotImplementedError


class JsonFrameParser(FrameParser):
    """Decoder service payload: {width, height, minTemp, maxTemp, temperatures}."""

    extensions = (".json",)

    def _read(self, file_path: str) -> ThermalFrame:
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                payload = json.load(f)
        except UnicodeDecodeError as e:
            raise ValueError(f"Frame payload is not valid UTF-8: {file_path}") from e
        if not isinstance(payload, dict):
            raise ValueError(f"Expected a JSON object in {file_path}")
        frame = ThermalFrame.from_payload(payload)
        metadata: Dict[str, Any] = {k: v for k, v in payload.items()
                                    if k not in ("width", "height", "minTemp", "maxTemp", "temperatures")}
        metadata["FileName"] = os.path.basename(file_path)
        return ThermalFrame(frame.width, frame.height, frame.min_temp, frame.max_temp,
                            frame.temperatures, metadata)


class CsvFrameParser(FrameParser):
    """Rows of X, Y, Temperature_C with a header line, in any order."""

    extensions = (".csv",)

    def _read(self, file_path: str) -> ThermalFrame:
        xs, ys, temps = [], [], []
        with open(file_path, 'r', newline='', encoding='utf-8') as csvfile:
            reader = csv.reader(csvfile)
            header = next(reader, None)
            if header is None:
                raise ValueError(f"Empty CSV file: {file_path}")
            columns = [h.strip() for h in header]
            try:
                ix, iy, it = columns.index('X'), columns.index('Y'), columns.index('Temperature_C')
            except ValueError:
                raise ValueError(f"CSV header must contain X, Y, Temperature_C; got {columns}") from None
            for line_no, row in enumerate(reader, start=2):
                if not row:
                    continue
                try:
                    xs.append(int(row[ix]))
                    ys.append(int(row[iy]))
                    temps.append(float(row[it]))
                except (IndexError, ValueError):
                    raise ValueError(f"Malformed CSV row {line_no} in {file_path}: {row}") from None
        if not temps:
            raise ValueError(f"No temperature rows in {file_path}")
        xs_arr, ys_arr = np.array(xs), np.array(ys)
        if xs_arr.min() < 0 or ys_arr.min() < 0:
            raise ValueError(f"Negative pixel coordinates in {file_path}")
        width, height = int(xs_arr.max()) + 1, int(ys_arr.max()) + 1
        if len(temps) != width * height:
            raise ValueError(f"CSV has {len(temps)} rows but spans {width}x{height} pixels")
        data = np.full((height, width), np.nan)
        data[ys_arr, xs_arr] = temps
        if np.isnan(data).any():
            raise ValueError(f"CSV does not cover every pixel of {width}x{height} (duplicate coordinates?)")
        return ThermalFrame.from_array(data, metadata={"FileName": os.path.basename(file_path)})


class NpyFrameParser(FrameParser):
    """2D numpy array of °C values."""

    extensions = (".npy",)

    def _read(self, file_path: str) -> ThermalFrame:
        data = np.load(file_path, allow_pickle=False)
        return ThermalFrame.from_array(data, metadata={"FileName": os.path.basename(file_path)})


PARSERS = (JsonFrameParser(), CsvFrameParser(), NpyFrameParser())

"""Load thermal frames from files and wrap external decoders so failures degrade to an error message."""

import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

from .exceptions import FrameDecodeError
from .models import ThermalFrame
from .parsers import PARSERS, FrameParser

logger = logging.getLogger(__name__)

Decoder = Callable[[Any, Optional[float]], ThermalFrame]


def _parser_for(file_path: Path) -> FrameParser:
    file_extension = file_path.suffix.lower()
    for parser in PARSERS:
        if file_extension in parser.extensions:
            return parser
    supported = ", ".join(get_supported_formats())
    raise ValueError(f"Unsupported file format: {file_extension}. Supported formats: {supported}")


def get_supported_formats() -> List[str]:
    return [ext for parser in PARSERS for ext in parser.extensions]


def read_frame(file_path: Union[str, Path], max_temp: Optional[float] = None) -> ThermalFrame:
    """Read a frame file (.json, .csv, .npy); max_temp overrides the reported upper bound."""
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    return _parser_for(file_path).parse(str(file_path), max_temp)


def decode_frame(decoder: Decoder, source: Any, max_temp_hint: Optional[float] = None) -> ThermalFrame:
    """
    Run an external decoder, converting any failure into FrameDecodeError.

    The decoder must return a ThermalFrame; anything else counts as a failure.
    """
    try:
        frame = decoder(source, max_temp_hint)
    except FrameDecodeError:
        raise
    except Exception as e:
        logger.warning("Thermal decode failed for %s: %s", source, e)
        raise FrameDecodeError(f"Failed to process thermal image: {e}", source) from e
    if not isinstance(frame, ThermalFrame):
        raise FrameDecodeError(f"Decoder returned {type(frame).__name__}, expected ThermalFrame", source)
    return frame


class FrameReader:
    """File-based decoder; instances are callable as decoder(source, max_temp_hint)."""

    def __call__(self, source: Union[str, Path], max_temp_hint: Optional[float] = None) -> ThermalFrame:
        return self.read_file(source, max_temp_hint)

    def read_file(self, file_path: Union[str, Path], max_temp: Optional[float] = None) -> ThermalFrame:
        return read_frame(file_path, max_temp)

    def read_directory(self, directory_path: Union[str, Path], recursive: bool = False) -> List[ThermalFrame]:
        """Return frames for every readable supported file in a directory; unreadable files are logged and skipped."""
        directory_path = Path(directory_path)
        if not directory_path.is_dir():
            raise NotADirectoryError(f"Not a directory: {directory_path}")
        out = []
        pattern = "**/*" if recursive else "*"
        for file_path in sorted(directory_path.glob(pattern)):
            if file_path.suffix.lower() in get_supported_formats():
                try:
                    out.append(self.read_file(file_path))
                except (OSError, ValueError) as e:
                    logger.warning("Skipping %s: %s", file_path, e)
        return out

    def get_supported_formats(self) -> List[str]:
        return get_supported_formats()

    def validate_file(self, file_path: Union[str, Path]) -> bool:
        """Return True if file can be read without error."""
        try:
            self.read_file(file_path)
            return True
        except (OSError, ValueError):
            return False

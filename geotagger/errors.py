"""Error taxonomy shared by the read, write and clear operations."""
from __future__ import annotations

from enum import Enum
from typing import Dict, Optional


class ErrorKind(str, Enum):
    IO = "Io"
    UNSUPPORTED_FILE_TYPE = "UnsupportedFileType"
    PARSE_FAILURE = "ParseFailure"
    WRITE_FAILURE = "WriteFailure"


class GeotagError(Exception):
    """Raised when a geotag operation fails.

    ``kind`` says which stage failed, ``message`` carries the underlying
    library or OS error text for diagnostics.
    """

    def __init__(self, kind: ErrorKind, message: Optional[str] = None):
        self.kind = kind
        self.message = message or ""
        super().__init__(f"{kind.value}: {self.message}" if self.message else kind.value)

    def to_dict(self) -> Dict[str, Optional[str]]:
        """Shape handed to the shell, e.g. ``{"ParseFailure": "bad IFD"}``."""
        if self.kind is ErrorKind.UNSUPPORTED_FILE_TYPE:
            return {self.kind.value: None}
        return {self.kind.value: self.message}

    def describe(self) -> str:
        """User-facing sentence for this failure."""
        if self.kind is ErrorKind.UNSUPPORTED_FILE_TYPE:
            return "Unsupported file type. Only JPEG/TIFF are supported."
        if self.kind is ErrorKind.PARSE_FAILURE:
            return f"Failed to parse metadata: {self.message}"
        if self.kind is ErrorKind.WRITE_FAILURE:
            return f"Failed to write metadata: {self.message}"
        return f"File error: {self.message}"


def io_error(exc: OSError) -> GeotagError:
    return GeotagError(ErrorKind.IO, str(exc))

"""Extension allow-list for files whose metadata may be written."""
from pathlib import Path

from .errors import ErrorKind, GeotagError

WRITABLE_EXTENSIONS = {".jpg", ".jpeg", ".tif", ".tiff"}


def is_writable(path) -> bool:
    return Path(path).suffix.lower() in WRITABLE_EXTENSIONS


def check_writable(path) -> None:
    """Raise UnsupportedFileType unless `path` has a JPEG/TIFF extension.

    Only looks at the name; the file is not opened.
    """
    if not is_writable(path):
        raise GeotagError(ErrorKind.UNSUPPORTED_FILE_TYPE, Path(path).suffix or str(path))

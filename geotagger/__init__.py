"""Photo Geotagger - read, write and clear GPS coordinates in image EXIF metadata."""

from .coordinates import Coordinate
from .errors import ErrorKind, GeotagError
from .reader import read_geotag
from .writer import write_geotag, embed_geotag
from .clearer import clear_geotag

__all__ = [
    "Coordinate",
    "ErrorKind",
    "GeotagError",
    "read_geotag",
    "write_geotag",
    "embed_geotag",
    "clear_geotag",
]

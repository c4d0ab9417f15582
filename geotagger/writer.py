"""Writer: store a coordinate as EXIF GPS tags."""
from __future__ import annotations

import logging

import piexif

from . import store
from .coordinates import Coordinate
from .dms import encode, latitude_ref, longitude_ref
from .errors import ErrorKind, GeotagError
from .formats import check_writable

_JPEG_MAGIC = b"\xff\xd8"


def apply_coordinate(tags: store.TagSet, coordinate: Coordinate) -> None:
    """Set the four GPS position tags on `tags` in place."""
    store.set_tag(tags, piexif.GPSIFD.GPSLatitude, encode(abs(coordinate.latitude)))
    store.set_tag(tags, piexif.GPSIFD.GPSLongitude, encode(abs(coordinate.longitude)))
    store.set_tag(tags, piexif.GPSIFD.GPSLatitudeRef, latitude_ref(coordinate.latitude))
    store.set_tag(tags, piexif.GPSIFD.GPSLongitudeRef, longitude_ref(coordinate.longitude))


def write_geotag(path, coordinate: Coordinate) -> None:
    """Write `coordinate` into the EXIF block of the JPEG/TIFF at `path`.

    A file without an EXIF block gets a new one. Raises GeotagError with
    kind UnsupportedFileType (checked before touching the file), Io,
    ParseFailure or WriteFailure.
    """
    check_writable(path)
    tags = store.load_tags(path)
    if tags is None:
        tags = store.new_tags()
    apply_coordinate(tags, coordinate)
    store.persist(path, tags)
    logging.info("Wrote geotag %.6f,%.6f to %s", coordinate.latitude, coordinate.longitude, path)


def embed_geotag(data: bytes, coordinate: Coordinate) -> bytes:
    """Return a copy of the JPEG `data` carrying `coordinate`.

    Nothing is written to disk; this is used to hand out tagged downloads.
    """
    if data[:2] != _JPEG_MAGIC:
        raise GeotagError(ErrorKind.UNSUPPORTED_FILE_TYPE, "Only JPEG data can be tagged in memory")
    tags = store.load_tags_from_bytes(data) or store.new_tags()
    apply_coordinate(tags, coordinate)
    return store.insert_into_jpeg(data, tags)

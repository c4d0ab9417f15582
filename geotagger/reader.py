"""Reader: extract GPS latitude/longitude from an image's EXIF block."""
from __future__ import annotations

from pathlib import Path
from typing import Any, List, Optional, Tuple

from PIL import ExifTags, Image, UnidentifiedImageError
from PIL.TiffImagePlugin import IFDRational

from .coordinates import Coordinate
from .dms import Rational, decode
from .errors import ErrorKind, GeotagError, io_error


def read_gps_entries(path) -> List[Tuple[int, Any]]:
    """Return the GPS IFD of `path` as ordered (tag id, value) pairs.

    Raises GeotagError: Io when the file cannot be opened, ParseFailure when
    it is not an image Pillow understands or its EXIF block is broken.
    """
    try:
        with Image.open(path) as img:
            exif = img.getexif()
            return list(exif.get_ifd(ExifTags.IFD.GPSInfo).items())
    except UnidentifiedImageError as exc:
        raise GeotagError(ErrorKind.PARSE_FAILURE, str(exc)) from exc
    except OSError as exc:
        raise io_error(exc) from exc
    except Exception as exc:
        raise GeotagError(ErrorKind.PARSE_FAILURE, str(exc) or exc.__class__.__name__) from exc


def _as_rational(value: Any) -> Optional[Rational]:
    if isinstance(value, IFDRational):
        return value.numerator, value.denominator
    if isinstance(value, tuple) and len(value) == 2 and all(isinstance(v, int) for v in value):
        return value
    return None


def _dms_from_value(value: Any) -> Optional[List[Rational]]:
    if not isinstance(value, (tuple, list)) or len(value) < 3:
        return None
    parts = [_as_rational(v) for v in value[:3]]
    if None in parts:
        return None
    return parts


def _ref_from_value(value: Any) -> Optional[str]:
    if isinstance(value, bytes):
        try:
            value = value.decode("ascii")
        except UnicodeDecodeError:
            return None
    if not isinstance(value, str):
        return None
    return value.replace("\x00", "").strip()


def read_geotag(path) -> Optional[Coordinate]:
    """Return the coordinate stored in `path`, or None if it has none.

    Extraction is best effort: a latitude/longitude that is not an array of
    at least three rationals, or a ref that is not text, counts as missing
    rather than as an error. A missing ref means the positive hemisphere.
    Only failing to open or parse the file raises GeotagError.
    """
    lat_dms = lon_dms = None
    lat_ref = lon_ref = None

    for tag, value in read_gps_entries(Path(path)):
        if tag == ExifTags.GPS.GPSLatitude:
            lat_dms = _dms_from_value(value)
        elif tag == ExifTags.GPS.GPSLongitude:
            lon_dms = _dms_from_value(value)
        elif tag == ExifTags.GPS.GPSLatitudeRef:
            lat_ref = _ref_from_value(value)
        elif tag == ExifTags.GPS.GPSLongitudeRef:
            lon_ref = _ref_from_value(value)

    if lat_dms is None or lon_dms is None:
        return None
    return Coordinate(latitude=decode(lat_dms, lat_ref), longitude=decode(lon_dms, lon_ref))

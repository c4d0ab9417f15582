"""Metadata store: load, edit and persist EXIF tag sets.

Tag sets are piexif dictionaries. JPEG files are rewritten by splicing a new
APP1 segment in with piexif, so the compressed image data is left alone.
piexif cannot insert into TIFF containers, so TIFF files are re-saved with
Pillow carrying the edited GPS IFD.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional
import io
import logging

import piexif
from piexif import TYPES
from PIL import ExifTags, Image, TiffTags
from PIL.TiffImagePlugin import IFDRational, ImageFileDirectory_v2

from .errors import ErrorKind, GeotagError, io_error

TagSet = Dict[str, Any]

IFD_NAMES = ("0th", "Exif", "GPS", "Interop", "1st")

GPS_POSITION_TAGS = (
    piexif.GPSIFD.GPSLatitude,
    piexif.GPSIFD.GPSLongitude,
    piexif.GPSIFD.GPSLatitudeRef,
    piexif.GPSIFD.GPSLongitudeRef,
)

_JPEG_MAGIC = b"\xff\xd8"
_TIFF_MAGIC = (b"II", b"MM")

_SANITIZED_IFDS = ("0th", "Exif", "Interop", "1st")
_INTEGER_TYPES = (TYPES.Byte, TYPES.Short, TYPES.Long, TYPES.SByte, TYPES.SShort, TYPES.SLong)

# strip/tile layout and sub-IFD pointers; Pillow recomputes these on save
_TIFF_LAYOUT_TAGS = frozenset({
    256, 257, 258, 259, 262, 266, 273, 277, 278, 279, 284, 317, 320,
    322, 323, 324, 325, 338, 339, 347, 530, 531, 532,
    ExifTags.IFD.Exif, ExifTags.IFD.GPSInfo,
})


def new_tags() -> TagSet:
    """Return an empty tag set."""
    tags: TagSet = {name: {} for name in IFD_NAMES}
    tags["thumbnail"] = None
    return tags


def _is_empty(tags: TagSet) -> bool:
    return not any(tags.get(name) for name in IFD_NAMES) and not tags.get("thumbnail")


def _parse(source) -> TagSet:
    try:
        return piexif.load(source)
    except OSError as exc:
        raise io_error(exc) from exc
    except Exception as exc:
        raise GeotagError(ErrorKind.PARSE_FAILURE, str(exc) or exc.__class__.__name__) from exc


def load_tags(path) -> Optional[TagSet]:
    """Load the EXIF tag set embedded in `path`.

    Returns None when the file carries no EXIF block at all. Raises
    GeotagError (Io or ParseFailure) for anything else that goes wrong.
    """
    tags = _parse(str(path))
    if _is_empty(tags):
        logging.debug("No EXIF block in %s", path)
        return None
    return tags


def load_tags_from_bytes(data: bytes) -> Optional[TagSet]:
    tags = _parse(data)
    return None if _is_empty(tags) else tags


def set_tag(tags: TagSet, tag: int, value: Any, ifd: str = "GPS") -> None:
    tags.setdefault(ifd, {})[tag] = value


def remove_tag(tags: TagSet, tag: int, ifd: str = "GPS") -> None:
    """Drop `tag` from `ifd`; missing tags are ignored."""
    tags.get(ifd, {}).pop(tag, None)


def _is_pair(value: Any) -> bool:
    return isinstance(value, tuple) and len(value) == 2 and all(isinstance(v, int) for v in value)


def _fits(value: Any, kind: int) -> bool:
    """Whether piexif can serialize `value` as an entry of type `kind`."""
    if kind in _INTEGER_TYPES:
        if kind == TYPES.Byte and isinstance(value, bytes):
            return True
        values = (value,) if isinstance(value, int) else value
        return isinstance(values, (tuple, list)) and bool(values) and all(isinstance(v, int) for v in values)
    if kind == TYPES.Ascii:
        if isinstance(value, str):
            try:
                value.encode("latin1")
            except UnicodeEncodeError:
                return False
            return True
        return isinstance(value, bytes)
    if kind == TYPES.Undefined:
        return isinstance(value, bytes)
    if kind in (TYPES.Rational, TYPES.SRational):
        return _is_pair(value) or (
            isinstance(value, tuple) and bool(value) and all(_is_pair(v) for v in value))
    if kind in (TYPES.Float, TYPES.DFloat):
        values = (value,) if isinstance(value, (int, float)) else value
        return isinstance(values, (tuple, list)) and bool(values) and all(isinstance(v, (int, float)) for v in values)
    return False


def drop_mistyped(tags: TagSet) -> None:
    """Remove entries of the non-GPS IFDs that piexif cannot serialize.

    Files written by other tools sometimes store a tag with a type other than
    the one piexif declares for it (SceneType as BYTE instead of UNDEFINED,
    for example). piexif loads those values as they are but refuses to dump
    them, so they are dropped and logged.
    """
    for ifd in _SANITIZED_IFDS:
        entries = tags.get(ifd) or {}
        for tag in list(entries):
            info = piexif.TAGS[ifd].get(tag)
            if info is None or not _fits(entries[tag], info["type"]):
                logging.warning("Dropping %s tag %s with unexpected value %r", ifd, tag, entries[tag])
                del entries[tag]


def _dump(tags: TagSet) -> bytes:
    drop_mistyped(tags)
    try:
        return piexif.dump(tags)
    except Exception as exc:
        raise GeotagError(ErrorKind.WRITE_FAILURE, f"Cannot serialize EXIF: {exc}") from exc


def insert_into_jpeg(data: bytes, tags: TagSet) -> bytes:
    """Return `data` (a JPEG) with its EXIF segment replaced by `tags`."""
    exif_bytes = _dump(tags)
    out = io.BytesIO()
    try:
        piexif.insert(exif_bytes, data, out)
    except Exception as exc:
        raise GeotagError(ErrorKind.WRITE_FAILURE, str(exc) or exc.__class__.__name__) from exc
    return out.getvalue()


def _pillow_gps_value(tag: int, value: Any) -> Any:
    # piexif gives rationals as (num, den) pairs and BYTE arrays as int tuples
    kind = TiffTags.lookup(tag, ExifTags.IFD.GPSInfo).type
    if kind in (TiffTags.RATIONAL, TiffTags.SIGNED_RATIONAL):
        pairs = (value,) if _is_pair(value) else value
        return tuple(IFDRational(num, den) for num, den in pairs)
    if kind == TiffTags.BYTE and isinstance(value, tuple):
        return bytes(value)
    return value


def _tiff_with_gps(data: bytes, gps: Dict[int, Any]) -> bytes:
    """Re-save the TIFF `data` with `gps` as its GPS IFD.

    libtiff cannot write the GPS sub-IFD, so the image is always written
    uncompressed by Pillow's own encoder. IFD0 tags other than the strip
    layout are carried over, as is the Exif IFD.
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            tiffinfo = ImageFileDirectory_v2()
            for tag, value in img.tag_v2.items():
                if tag in _TIFF_LAYOUT_TAGS:
                    continue
                tiffinfo[tag] = value
                tiffinfo.tagtype[tag] = img.tag_v2.tagtype[tag]

            exif_ifd = {
                tag: value for tag, value in img.getexif().get_ifd(ExifTags.IFD.Exif).items()
                if tag != ExifTags.IFD.Interop
            }
            if exif_ifd:
                tiffinfo[ExifTags.IFD.Exif] = exif_ifd
            if gps:
                tiffinfo[ExifTags.IFD.GPSInfo] = {
                    tag: _pillow_gps_value(tag, value) for tag, value in gps.items()
                }

            out = io.BytesIO()
            img.save(out, format="TIFF", tiffinfo=tiffinfo, compression="raw")
    except Exception as exc:
        raise GeotagError(ErrorKind.WRITE_FAILURE, str(exc) or exc.__class__.__name__) from exc
    return out.getvalue()


def persist(path, tags: TagSet) -> None:
    """Write `tags` back into the file at `path`.

    The new file content is built in memory first; the file is only
    rewritten once that succeeded. Every failure is a WriteFailure.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise GeotagError(ErrorKind.WRITE_FAILURE, str(exc)) from exc

    if data[:2] == _JPEG_MAGIC:
        new_data = insert_into_jpeg(data, tags)
    elif data[:2] in _TIFF_MAGIC:
        new_data = _tiff_with_gps(data, tags.get("GPS") or {})
    else:
        raise GeotagError(ErrorKind.WRITE_FAILURE, "Given file is neither JPEG nor TIFF.")

    try:
        path.write_bytes(new_data)
    except OSError as exc:
        raise GeotagError(ErrorKind.WRITE_FAILURE, str(exc)) from exc

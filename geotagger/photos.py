"""Photo records for the shell: thumbnail plus the current geotag."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict
import base64
import hashlib
import io
import logging

from PIL import Image, ImageOps

from .config import load_settings
from .errors import GeotagError
from .reader import read_geotag


def generate_thumbnail_bytes(path: Path, max_size=None):
    """Base64 JPEG thumbnail of `path`, or None if Pillow cannot render it."""
    max_size = max_size or load_settings()["thumbnail_size"]
    try:
        with Image.open(path) as img:
            img = ImageOps.exif_transpose(img).convert("RGB")
            img.thumbnail(max_size)
            buf = io.BytesIO()
            img.save(buf, format="JPEG", quality=70)
        return base64.b64encode(buf.getvalue()).decode("ascii")
    except Exception:
        logging.debug("Thumbnail failed for %s", path, exc_info=True)
        return None


def photo_id(path: Path) -> str:
    return hashlib.md5(str(path).encode("utf-8")).hexdigest()


def load_photo(path) -> Dict[str, Any]:
    """Build the record the shell lists: id, path, name, data_url, geotag, error.

    A geotag that cannot be read ends up in `error` instead of raising.
    """
    path = Path(path)
    record: Dict[str, Any] = {
        "id": photo_id(path),
        "path": str(path),
        "name": path.name,
        "data_url": None,
        "geotag": None,
        "error": None,
    }
    b64 = generate_thumbnail_bytes(path)
    if b64:
        record["data_url"] = f"data:image/jpeg;base64,{b64}"
    try:
        coordinate = read_geotag(path)
    except GeotagError as exc:
        record["error"] = exc.describe()
    else:
        if coordinate is not None:
            record["geotag"] = coordinate.to_dict()
    return record

"""Clearer: remove GPS position tags from an image."""
import logging

from . import store


def clear_geotag(path) -> None:
    """Remove latitude, longitude and their refs from `path`.

    A file without any EXIF block is already clear and is left untouched.
    Raises GeotagError (Io, ParseFailure or WriteFailure).
    """
    tags = store.load_tags(path)
    if tags is None:
        logging.debug("Nothing to clear in %s", path)
        return
    for tag in store.GPS_POSITION_TAGS:
        store.remove_tag(tags, tag)
    store.persist(path, tags)
    logging.info("Cleared geotag from %s", path)

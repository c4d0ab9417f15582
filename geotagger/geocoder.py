"""Geocoder module: place search through geopy's Nominatim."""
from typing import Dict, List
import time
import logging

from geopy.geocoders import Nominatim
from geopy.exc import GeocoderServiceError, GeocoderTimedOut

from .config import load_settings

_last_call = 0.0


def _throttle():
    # Nominatim usage policy: at most one request per second
    global _last_call
    delta = time.time() - _last_call
    if delta < 1.0:
        time.sleep(1.0 - delta)
    _last_call = time.time()


def _geolocator() -> Nominatim:
    return Nominatim(user_agent=load_settings()["user_agent"])


def search_places(query: str) -> List[Dict[str, object]]:
    """Return up to `search_limit` matches for `query` as name/lat/lng dicts.

    Short queries and lookup failures give an empty list.
    """
    settings = load_settings()
    query = (query or "").strip()
    if len(query) < settings["min_query_length"]:
        return []
    _throttle()
    try:
        found = _geolocator().geocode(query, exactly_one=False, limit=settings["search_limit"])
    except (GeocoderTimedOut, GeocoderServiceError) as e:
        logging.debug("Place search failed for %r: %s", query, e)
        return []
    except Exception:
        logging.exception("Unexpected geopy error")
        return []
    return [
        {"name": loc.address, "lat": loc.latitude, "lng": loc.longitude}
        for loc in (found or [])[: settings["search_limit"]]
    ]

"""Pytest configuration and fixtures for all tests."""

import piexif
import pytest
from PIL import Image


def _gps_dict(lat_dms=None, lat_ref=None, lon_dms=None, lon_ref=None):
    gps = {}
    if lat_dms is not None:
        gps[piexif.GPSIFD.GPSLatitude] = lat_dms
    if lat_ref is not None:
        gps[piexif.GPSIFD.GPSLatitudeRef] = lat_ref
    if lon_dms is not None:
        gps[piexif.GPSIFD.GPSLongitude] = lon_dms
    if lon_ref is not None:
        gps[piexif.GPSIFD.GPSLongitudeRef] = lon_ref
    return gps


@pytest.fixture
def make_jpeg(tmp_path):
    """
    Factory writing a small JPEG into tmp_path.

    With neither `zeroth` nor `gps` the file has no EXIF block at all.
    """

    def _make(name="photo.jpg", zeroth=None, gps=None, color="red"):
        path = tmp_path / name
        img = Image.new("RGB", (32, 24), color)
        if zeroth is None and gps is None:
            img.save(path, format="JPEG")
        else:
            exif = {"0th": zeroth or {}, "Exif": {}, "GPS": gps or {}, "Interop": {}, "1st": {}, "thumbnail": None}
            img.save(path, format="JPEG", exif=piexif.dump(exif))
        return path

    return _make


@pytest.fixture
def plain_jpeg(make_jpeg):
    """JPEG without any EXIF block."""
    return make_jpeg("plain.jpg")


@pytest.fixture
def camera_jpeg(make_jpeg):
    """JPEG with an EXIF block that holds a camera make but no GPS."""
    return make_jpeg("camera.jpg", zeroth={piexif.ImageIFD.Make: b"TestCam"})


@pytest.fixture
def tagged_jpeg(make_jpeg):
    """JPEG tagged with 51deg 30' 26.464" N, 0deg 7' 39.932" W (London)."""
    gps = _gps_dict(
        lat_dms=((51, 1), (30, 1), (26464, 1000)),
        lat_ref=b"N",
        lon_dms=((0, 1), (7, 1), (39932, 1000)),
        lon_ref=b"W",
    )
    return make_jpeg("tagged.jpg", zeroth={piexif.ImageIFD.Make: b"TestCam"}, gps=gps)


@pytest.fixture
def gps_dict():
    return _gps_dict


@pytest.fixture
def text_file(tmp_path):
    """A file that is not an image at all."""
    path = tmp_path / "notes.jpg"
    path.write_text("definitely not a picture", encoding="utf-8")
    return path


@pytest.fixture
def make_tiff(tmp_path):
    """
    Factory writing a small RGB TIFF into tmp_path.

    `compression` is any Pillow TIFF compression name; `make` becomes the
    IFD0 Make tag unless it is None.
    """

    def _make(name="photo.tif", compression="raw", make="TestCam"):
        path = tmp_path / name
        img = Image.new("RGB", (16, 16))
        img.putdata([(x * 16, y * 16, 128) for y in range(16) for x in range(16)])
        tiffinfo = {271: make} if make is not None else {}
        img.save(path, format="TIFF", compression=compression, tiffinfo=tiffinfo)
        return path

    return _make

"""Tests for write_geotag() and embed_geotag()."""

import io

import piexif
import pytest
from PIL import Image

from geotagger import Coordinate, ErrorKind, GeotagError, embed_geotag, read_geotag, write_geotag
from geotagger.formats import check_writable, is_writable

TOLERANCE = 1 / 3600000

SAN_FRANCISCO = Coordinate(latitude=37.7749, longitude=-122.4194)


def _pixels(path_or_bytes):
    source = io.BytesIO(path_or_bytes) if isinstance(path_or_bytes, bytes) else path_or_bytes
    with Image.open(source) as img:
        return img.tobytes()


class TestWriteThenRead:
    """Coordinates written to a file come back from read_geotag()."""

    def test_round_trip_on_plain_jpeg(self, plain_jpeg):
        write_geotag(plain_jpeg, SAN_FRANCISCO)

        coordinate = read_geotag(plain_jpeg)
        assert coordinate.latitude == pytest.approx(37.7749, abs=TOLERANCE)
        assert coordinate.longitude == pytest.approx(-122.4194, abs=TOLERANCE)

    def test_southern_and_eastern(self, plain_jpeg):
        write_geotag(plain_jpeg, Coordinate(latitude=-33.8688, longitude=151.2093))

        coordinate = read_geotag(plain_jpeg)
        assert coordinate.latitude == pytest.approx(-33.8688, abs=TOLERANCE)
        assert coordinate.longitude == pytest.approx(151.2093, abs=TOLERANCE)

    def test_overwrites_existing_geotag(self, tagged_jpeg):
        write_geotag(tagged_jpeg, SAN_FRANCISCO)

        coordinate = read_geotag(tagged_jpeg)
        assert coordinate.latitude == pytest.approx(37.7749, abs=TOLERANCE)
        assert coordinate.longitude == pytest.approx(-122.4194, abs=TOLERANCE)

    def test_upper_case_extension(self, make_jpeg):
        path = make_jpeg("IMG_0001.JPEG")

        write_geotag(path, SAN_FRANCISCO)

        assert read_geotag(path) is not None


class TestWrittenTags:
    """Inspect the raw EXIF written by write_geotag()."""

    def test_wire_shapes(self, plain_jpeg):
        write_geotag(plain_jpeg, SAN_FRANCISCO)

        gps = piexif.load(str(plain_jpeg))["GPS"]
        assert gps[piexif.GPSIFD.GPSLatitude] == ((37, 1), (46, 1), (29640, 1000))
        assert gps[piexif.GPSIFD.GPSLatitudeRef] == b"N"
        assert gps[piexif.GPSIFD.GPSLongitudeRef] == b"W"

    def test_zero_is_north_east(self, plain_jpeg):
        write_geotag(plain_jpeg, Coordinate(latitude=0.0, longitude=0.0))

        gps = piexif.load(str(plain_jpeg))["GPS"]
        assert gps[piexif.GPSIFD.GPSLatitude] == ((0, 1), (0, 1), (0, 1000))
        assert gps[piexif.GPSIFD.GPSLatitudeRef] == b"N"
        assert gps[piexif.GPSIFD.GPSLongitudeRef] == b"E"

    def test_keeps_other_tags(self, camera_jpeg):
        write_geotag(camera_jpeg, SAN_FRANCISCO)

        assert piexif.load(str(camera_jpeg))["0th"][piexif.ImageIFD.Make] == b"TestCam"

    def test_image_data_untouched(self, camera_jpeg):
        before = _pixels(camera_jpeg)

        write_geotag(camera_jpeg, SAN_FRANCISCO)

        assert _pixels(camera_jpeg) == before


class TestWriteFailures:
    """write_geotag() raises typed errors."""

    def test_png_rejected_before_io(self, tmp_path):
        path = tmp_path / "photo.png"
        Image.new("RGB", (8, 8), "green").save(path, format="PNG")
        original = path.read_bytes()

        with pytest.raises(GeotagError) as exc_info:
            write_geotag(path, SAN_FRANCISCO)

        assert exc_info.value.kind is ErrorKind.UNSUPPORTED_FILE_TYPE
        assert path.read_bytes() == original

    def test_gate_does_not_need_the_file(self, tmp_path):
        with pytest.raises(GeotagError) as exc_info:
            write_geotag(tmp_path / "missing.heic", SAN_FRANCISCO)
        assert exc_info.value.kind is ErrorKind.UNSUPPORTED_FILE_TYPE

    def test_missing_file(self, tmp_path):
        with pytest.raises(GeotagError) as exc_info:
            write_geotag(tmp_path / "missing.jpg", SAN_FRANCISCO)
        assert exc_info.value.kind is ErrorKind.IO

    def test_not_an_image(self, text_file):
        original = text_file.read_bytes()

        with pytest.raises(GeotagError) as exc_info:
            write_geotag(text_file, SAN_FRANCISCO)

        assert exc_info.value.kind is ErrorKind.PARSE_FAILURE
        assert text_file.read_bytes() == original


@pytest.mark.unit
class TestFormatGate:
    """Test the extension allow-list."""

    @pytest.mark.parametrize("name", ["a.jpg", "a.jpeg", "a.tif", "a.tiff", "A.JPG", "b.TiFf"])
    def test_writable(self, name):
        assert is_writable(name)
        check_writable(name)

    @pytest.mark.parametrize("name", ["a.png", "a.heic", "a.jpg.bak", "noext"])
    def test_not_writable(self, name):
        assert not is_writable(name)
        with pytest.raises(GeotagError):
            check_writable(name)


class TestEmbedGeotag:
    """Test embed_geotag() on in-memory JPEG data."""

    def test_returns_tagged_copy(self, plain_jpeg):
        data = plain_jpeg.read_bytes()

        tagged = embed_geotag(data, SAN_FRANCISCO)

        assert plain_jpeg.read_bytes() == data
        out = plain_jpeg.with_name("download.jpg")
        out.write_bytes(tagged)
        coordinate = read_geotag(out)
        assert coordinate.latitude == pytest.approx(37.7749, abs=TOLERANCE)
        assert coordinate.longitude == pytest.approx(-122.4194, abs=TOLERANCE)

    def test_rejects_non_jpeg(self):
        buf = io.BytesIO()
        Image.new("RGB", (8, 8)).save(buf, format="PNG")

        with pytest.raises(GeotagError) as exc_info:
            embed_geotag(buf.getvalue(), SAN_FRANCISCO)
        assert exc_info.value.kind is ErrorKind.UNSUPPORTED_FILE_TYPE

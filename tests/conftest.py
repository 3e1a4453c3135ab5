"""
Pytest configuration and fixtures for Remember tests
"""

import io

import pytest
from PIL import Image, ExifTags
from PIL.TiffImagePlugin import IFDRational

from remember.db import init_db, close_db


def make_image(fmt: str = "JPEG", size=(8, 6), exif=None) -> bytes:
    buf = io.BytesIO()
    im = Image.new("RGB", size, (200, 80, 40))
    if exif is not None:
        im.save(buf, fmt, exif=exif)
    else:
        im.save(buf, fmt)
    return buf.getvalue()


def camera_exif(
    date_time: str | None = "2024:03:05 14:30:00",
    with_settings: bool = True,
    with_gps: bool = True,
) -> Image.Exif:
    exif = Image.Exif()
    exif[ExifTags.Base.Make] = "Canon"
    exif[ExifTags.Base.Model] = "EOS R5"
    if date_time is not None:
        exif[ExifTags.Base.DateTime] = date_time
    if with_settings:
        exif[ExifTags.IFD.Exif] = {
            ExifTags.Base.ExposureTime: IFDRational(1, 125),
            ExifTags.Base.FNumber: IFDRational(28, 10),
            ExifTags.Base.ISOSpeedRatings: 200,
            ExifTags.Base.FocalLength: IFDRational(50, 1),
        }
    if with_gps:
        exif[ExifTags.IFD.GPSInfo] = {
            ExifTags.GPS.GPSLatitudeRef: "N",
            ExifTags.GPS.GPSLatitude: (IFDRational(37, 1), IFDRational(30, 1), IFDRational(0, 1)),
            ExifTags.GPS.GPSLongitudeRef: "W",
            ExifTags.GPS.GPSLongitude: (IFDRational(122, 1), IFDRational(15, 1), IFDRational(0, 1)),
        }
    return exif


@pytest.fixture
def image_factory():
    return make_image


@pytest.fixture
def exif_factory():
    return camera_exif


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image("JPEG")


@pytest.fixture
def camera_jpeg() -> bytes:
    return make_image("JPEG", exif=camera_exif())


@pytest.fixture(scope="function")
async def db_setup(tmp_path):
    """Initialize a fresh SQLite test database for each test."""
    await init_db(db_url=f"sqlite://{tmp_path / 'test.sqlite3'}")
    try:
        yield
    finally:
        await close_db()

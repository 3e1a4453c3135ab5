import logging
from datetime import datetime
from io import BytesIO
from typing import Any, Callable, Optional

from PIL import Image as PILImage, ExifTags, UnidentifiedImageError

from remember.errors import ExtractionWarning
from remember.schemas.file import ExifMetadata

logger = logging.getLogger(__name__)

EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


def _clean_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("utf-8", errors="ignore")
    value = str(value).strip("\x00 ").strip()
    return value or None


def _to_int_safe(v: Any) -> Optional[int]:
    if v is None:
        return None
    if isinstance(v, (list, tuple)):
        if not v:
            return None
        v = v[0]
    return int(v)


def parse_exif_datetime(raw: Any) -> Optional[datetime]:
    """Parse ``yyyy:MM:dd HH:mm:ss``; anything else yields None."""
    text = _clean_str(raw)
    if not text:
        return None
    try:
        return datetime.strptime(text, EXIF_DATETIME_FORMAT)
    except ValueError:
        return None


def describe_exposure_time(value: Any) -> Optional[str]:
    seconds = float(value)
    if seconds <= 0:
        return None
    if seconds >= 1:
        return f"{seconds:g} sec"
    return f"1/{round(1 / seconds)} sec"


def describe_f_number(value: Any) -> Optional[str]:
    return f"f/{float(value):.1f}"


def describe_iso(value: Any) -> Optional[str]:
    iso = _to_int_safe(value)
    return str(iso) if iso is not None else None


def describe_focal_length(value: Any) -> Optional[str]:
    return f"{round(float(value), 1):g} mm"


def _dms_to_degrees(dms: Any, ref: Any) -> float:
    d, m, s = (float(part) for part in dms)
    degrees = d + m / 60 + s / 3600
    if _clean_str(ref) in ("S", "W"):
        degrees = -degrees
    return degrees


def _tag(directory: dict, tag: int, describe: Callable[[Any], Optional[str]] = _clean_str) -> Optional[str]:
    if tag not in directory:
        return None
    try:
        return describe(directory[tag])
    except (TypeError, ValueError, ZeroDivisionError) as exc:
        logger.warning("Unreadable EXIF tag %s: %s", tag, exc)
        return None


def _read_gps(gps: dict) -> tuple[Optional[float], Optional[float]]:
    if ExifTags.GPS.GPSLatitude not in gps or ExifTags.GPS.GPSLongitude not in gps:
        return None, None
    try:
        lat = _dms_to_degrees(gps[ExifTags.GPS.GPSLatitude], gps.get(ExifTags.GPS.GPSLatitudeRef))
        lng = _dms_to_degrees(gps[ExifTags.GPS.GPSLongitude], gps.get(ExifTags.GPS.GPSLongitudeRef))
    except (TypeError, ValueError, ZeroDivisionError) as exc:
        raise ExtractionWarning(f"GPS coordinates unreadable: {exc}") from exc
    return lat, lng


def _read_size(im: PILImage.Image) -> tuple[Optional[int], Optional[int]]:
    try:
        width, height = im.size
        return int(width), int(height)
    except (TypeError, ValueError) as exc:
        raise ExtractionWarning(f"Image size unreadable: {exc}") from exc


def extract_exif(data: bytes) -> Optional[ExifMetadata]:
    """Read camera, exposure, GPS and geometry fields from image bytes.

    Missing metadata sections simply leave their fields empty. Returns None
    when the bytes cannot be opened as an image at all.
    """
    try:
        im = PILImage.open(BytesIO(data))
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, PILImage.DecompressionBombError) as exc:
        logger.info("No readable metadata in stream: %s", exc)
        return None

    with im:
        meta = ExifMetadata()
        try:
            exif = im.getexif()
        except (OSError, SyntaxError, ValueError) as exc:
            logger.warning("EXIF block unreadable: %s", exc)
            exif = {}

        if exif:
            meta.make = _tag(exif, ExifTags.Base.Make)
            meta.model = _tag(exif, ExifTags.Base.Model)
            meta.captured_at = parse_exif_datetime(exif.get(ExifTags.Base.DateTime))

            sub = _get_ifd(exif, ExifTags.IFD.Exif)
            if sub:
                meta.exposure_time = _tag(sub, ExifTags.Base.ExposureTime, describe_exposure_time)
                meta.f_number = _tag(sub, ExifTags.Base.FNumber, describe_f_number)
                meta.iso = _tag(sub, ExifTags.Base.ISOSpeedRatings, describe_iso)
                meta.focal_length = _tag(sub, ExifTags.Base.FocalLength, describe_focal_length)

            gps = _get_ifd(exif, ExifTags.IFD.GPSInfo)
            if gps:
                try:
                    meta.gps_lat, meta.gps_lng = _read_gps(gps)
                except ExtractionWarning as warning:
                    logger.warning("%s", warning)

        try:
            meta.width, meta.height = _read_size(im)
        except ExtractionWarning as warning:
            logger.warning("%s", warning)

    return meta


def _get_ifd(exif, tag: int) -> dict:
    try:
        return exif.get_ifd(tag)
    except (KeyError, OSError, SyntaxError, ValueError) as exc:
        logger.warning("EXIF directory %s unreadable: %s", tag, exc)
        return {}

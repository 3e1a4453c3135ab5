import logging
from io import BytesIO
from pathlib import PurePosixPath

from PIL import Image as PILImage, UnidentifiedImageError

from remember.errors import ValidationError

logger = logging.getLogger(__name__)

MAX_UPLOAD_SIZE = 50 * 1024 * 1024  # 50MiB

# extension -> declared content types accepted for it
ALLOWED_TYPES: dict[str, frozenset[str]] = {
    "jpg": frozenset({"image/jpeg", "image/pjpeg"}),
    "jpeg": frozenset({"image/jpeg", "image/pjpeg"}),
    "png": frozenset({"image/png"}),
    "gif": frozenset({"image/gif"}),
    "bmp": frozenset({"image/bmp", "image/x-ms-bmp"}),
    "webp": frozenset({"image/webp"}),
}

EXECUTABLE_SIGNATURE = b"MZ"


def sniff_content_type(content: bytes) -> str:
    """Detect the MIME type from the bytes themselves, ignoring the file name."""
    try:
        with PILImage.open(BytesIO(content)) as im:
            fmt = im.format
    except (UnidentifiedImageError, OSError, SyntaxError, ValueError, PILImage.DecompressionBombError):
        return "application/octet-stream"
    return PILImage.MIME.get(fmt or "", "application/octet-stream")


class FileValidator:
    def __init__(self, max_size: int = MAX_UPLOAD_SIZE, allowed_types: dict[str, frozenset[str]] | None = None):
        self.max_size = max_size
        self.allowed_types = allowed_types or ALLOWED_TYPES

    def validate(self, filename: str | None, content_type: str | None, content: bytes, size: int | None = None) -> None:
        """Raise ValidationError for the first failing check, in order."""
        if not content:
            raise ValidationError("File is empty", code="empty_file")

        if not filename or ".." in filename or "/" in filename or "\\" in filename:
            raise ValidationError(f"Invalid file name: {filename!r}", code="invalid_name")

        extension = PurePosixPath(filename).suffix.lower().lstrip(".")
        if not extension:
            raise ValidationError(f"File name has no extension: {filename!r}", code="missing_extension")
        allowed = self.allowed_types.get(extension)
        if allowed is None:
            raise ValidationError(f"Extension not allowed: .{extension}", code="extension_not_allowed")
        if (content_type or "").lower() not in allowed:
            raise ValidationError(
                f"Content type {content_type!r} does not match .{extension}",
                code="content_type_mismatch",
            )

        declared = size if size is not None else len(content)
        if declared > self.max_size:
            raise ValidationError(
                f"File exceeds {self.max_size // (1024 * 1024)}MB limit",
                code="file_too_large",
            )

        sniffed = sniff_content_type(content)
        if not sniffed.startswith("image/"):
            raise ValidationError(f"Only image files can be uploaded (detected {sniffed})", code="not_an_image")

        if content.startswith(EXECUTABLE_SIGNATURE):
            raise ValidationError("Executable content is not allowed", code="executable_content")

        logger.debug("Validated upload %s as %s", filename, sniffed)

"""Remember: photo library backend with EXIF metadata, tags, albums and search."""

__version__ = "1.0.0"

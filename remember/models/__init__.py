# Import all models for Tortoise ORM registration
from .base import BaseModel
from .file import FileRecord
from .exif import ExifRecord
from .tag import Tag, FileTag
from .album import Album, AlbumFile

__all__ = [
    "BaseModel",
    "FileRecord",
    "ExifRecord",
    "Tag",
    "FileTag",
    "Album",
    "AlbumFile",
]

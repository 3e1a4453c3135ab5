from pydantic import BaseModel, ConfigDict
from typing import List
from uuid import UUID
from datetime import datetime


class FileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    original_filename: str
    storage_path: str
    size_bytes: int
    content_type: str | None = None
    created_at: datetime


class ExifMetadata(BaseModel):
    """Fields read from an image's embedded metadata; any of them may be missing."""

    make: str | None = None
    model: str | None = None
    captured_at: datetime | None = None
    exposure_time: str | None = None
    f_number: str | None = None
    iso: str | None = None
    focal_length: str | None = None
    gps_lat: float | None = None
    gps_lng: float | None = None
    width: int | None = None
    height: int | None = None


class ExifOut(ExifMetadata):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    file_id: UUID


class TagOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    created_at: datetime


class TagIn(BaseModel):
    name: str


class FileWithTagsOut(FileOut):
    tags: List[TagOut] = []

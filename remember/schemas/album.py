from pydantic import BaseModel, ConfigDict
from typing import List
from uuid import UUID
from datetime import datetime


class AlbumIn(BaseModel):
    title: str
    description: str | None = None
    file_ids: List[UUID] = []


class AlbumUpdate(BaseModel):
    title: str
    description: str | None = None
    # None keeps the current members, [] empties the album
    file_ids: List[UUID] | None = None


class CoverUpdate(BaseModel):
    file_id: UUID
    position: str | None = None


class AlbumOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str | None = None
    photo_count: int = 0
    start_date: datetime | None = None
    cover_file_id: UUID | None = None
    cover_position: str | None = None
    created_at: datetime


class GeneratedAlbum(BaseModel):
    """An album proposed by the grouping engine; ``id`` is set once saved."""

    id: UUID | None = None
    title: str
    description: str
    photo_count: int
    start_date: datetime | None = None
    cover_file_id: UUID | None = None
    file_ids: List[UUID]


class GenerateRequest(BaseModel):
    group_by: str = "date"
    min_photos: int | None = None
    persist: bool = False

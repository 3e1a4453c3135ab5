from typing import List
from uuid import UUID

from fastapi import APIRouter

from remember.schemas.album import AlbumIn, AlbumOut, AlbumUpdate, CoverUpdate, GeneratedAlbum, GenerateRequest
from remember.schemas.file import FileOut
from remember.services.album_service import AlbumService

router = APIRouter(prefix="/api/albums", tags=["albums"])


@router.post("", response_model=AlbumOut, status_code=201)
async def create_album(payload: AlbumIn):
    return await AlbumService.create(payload.title, payload.description, payload.file_ids)


@router.get("", response_model=List[AlbumOut])
async def list_albums():
    return await AlbumService.list()


@router.post("/generate", response_model=List[GeneratedAlbum])
async def generate_albums(payload: GenerateRequest):
    """Group files into albums by day. Only saved when ``persist`` is set."""
    return await AlbumService.generate(payload.group_by, payload.min_photos, payload.persist)


@router.get("/{album_id}", response_model=AlbumOut)
async def get_album(album_id: UUID):
    return await AlbumService.get(album_id)


@router.get("/{album_id}/files", response_model=List[FileOut])
async def get_album_files(album_id: UUID):
    return await AlbumService.members(album_id)


@router.put("/{album_id}", response_model=AlbumOut)
async def update_album(album_id: UUID, payload: AlbumUpdate):
    return await AlbumService.update(album_id, payload.title, payload.description, payload.file_ids)


@router.put("/{album_id}/cover", response_model=AlbumOut)
async def update_cover(album_id: UUID, payload: CoverUpdate):
    return await AlbumService.set_cover(album_id, payload.file_id, payload.position)


@router.delete("/{album_id}")
async def delete_album(album_id: UUID):
    await AlbumService.delete(album_id)
    return {"message": "Album deleted successfully"}

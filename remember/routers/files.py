# remember/routers/files.py

from datetime import date
from functools import lru_cache
from typing import List, Optional, Set
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from fastapi.responses import FileResponse

from remember.config import settings
from remember.schemas.file import ExifOut, FileOut, FileWithTagsOut, TagOut
from remember.schemas.search import SearchCriteria
from remember.services.files import FileService
from remember.services.search import search_by_tags, search_files
from remember.services.storage import LocalStorage
from remember.services.validation import FileValidator

router = APIRouter(prefix="/api/files", tags=["files"])


@lru_cache
def get_file_service() -> FileService:
    return FileService(
        storage=LocalStorage(settings.UPLOAD_DIR),
        validator=FileValidator(max_size=settings.MAX_UPLOAD_SIZE),
    )


@router.post("/upload", response_model=List[FileOut], status_code=201)
async def upload_files(
    files: List[UploadFile] = File(...),
    service: FileService = Depends(get_file_service),
):
    items = []
    for upload in files:
        items.append((upload.filename, upload.content_type, await upload.read(), upload.size))
    return await service.upload_many(items)


@router.get("", response_model=List[FileWithTagsOut])
async def list_files(service: FileService = Depends(get_file_service)):
    records = await service.list()
    return [
        FileWithTagsOut(
            **FileOut.model_validate(r).model_dump(),
            tags=[TagOut.model_validate(link.tag) for link in r.tag_links],
        )
        for r in records
    ]


@router.get("/search", response_model=List[FileOut])
async def search_by_tag_names(tags: Optional[Set[str]] = Query(None)):
    return await search_by_tags(tags)


@router.get("/search/advanced", response_model=List[FileOut])
async def advanced_search(
    tags: Optional[Set[str]] = Query(None),
    start_date: Optional[date] = Query(None, description="First day, inclusive"),
    end_date: Optional[date] = Query(None, description="Last day, inclusive"),
    make: Optional[str] = None,
    model: Optional[str] = None,
    f_number: Optional[str] = None,
    exposure_time: Optional[str] = None,
    iso: Optional[str] = None,
):
    criteria = SearchCriteria.from_dates(
        start_date,
        end_date,
        tags=tags,
        make=make,
        model=model,
        f_number=f_number,
        exposure_time=exposure_time,
        iso=iso,
    )
    return await search_files(criteria)


@router.get("/{file_id}", response_model=FileOut)
async def get_file(file_id: UUID, service: FileService = Depends(get_file_service)):
    return await service.get(file_id)


@router.get("/{file_id}/exif", response_model=ExifOut)
async def get_exif(file_id: UUID, service: FileService = Depends(get_file_service)):
    exif = await service.get_exif(file_id)
    if exif is None:
        raise HTTPException(status_code=404, detail="No EXIF data for this file")
    return exif


@router.get("/{file_id}/content")
async def get_content(file_id: UUID, service: FileService = Depends(get_file_service)):
    record, path = await service.resolve_path(file_id)
    if not path.exists():
        raise HTTPException(status_code=404, detail="Stored file is missing")
    return FileResponse(
        path,
        media_type=record.content_type or "application/octet-stream",
        filename=record.original_filename,
        content_disposition_type="inline",
        headers={"Cache-Control": "private, max-age=3600"},
    )


@router.delete("/{file_id}")
async def delete_file(file_id: UUID, service: FileService = Depends(get_file_service)):
    await service.delete(file_id)
    return {"ok": True}

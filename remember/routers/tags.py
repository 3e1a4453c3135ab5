import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter

from remember.schemas.file import TagIn, TagOut
from remember.services.tags import TagService

router = APIRouter(prefix="/api", tags=["tags"])
log = logging.getLogger(__name__)


@router.get("/tags", response_model=List[TagOut])
async def list_tags():
    return await TagService.list_tags()


@router.get("/files/{file_id}/tags", response_model=List[TagOut])
async def get_file_tags(file_id: UUID):
    return await TagService.list_by_file(file_id)


@router.post("/files/{file_id}/tags", response_model=List[TagOut])
async def add_tag(file_id: UUID, payload: TagIn):
    log.info("Adding tag %r to file %s", payload.name, file_id)
    await TagService.attach(file_id, [payload.name])
    return await TagService.list_by_file(file_id)


@router.delete("/files/{file_id}/tags/{tag_id}")
async def remove_tag(file_id: UUID, tag_id: UUID):
    log.info("Removing tag %s from file %s", tag_id, file_id)
    await TagService.detach(file_id, tag_id)
    return {"ok": True}

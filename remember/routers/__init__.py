from fastapi import APIRouter
import logging

from .albums import router as albums_router
from .files import router as files_router
from .tags import router as tags_router


def build_router() -> APIRouter:
    router = APIRouter()
    log = logging.getLogger("routers")

    for name, sub in (("files", files_router), ("tags", tags_router), ("albums", albums_router)):
        router.include_router(sub)
        log.info("Loaded router: %s", name)
    return router


# Export module-level router so remember.main can import it
router = build_router()

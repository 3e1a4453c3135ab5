import logging
from typing import Iterable, List

from remember.models import ExifRecord, FileRecord, FileTag
from remember.schemas.search import SearchCriteria

logger = logging.getLogger(__name__)

# criteria field -> ExifRecord column, matched exactly
EXIF_CRITERIA = ("make", "model", "f_number", "exposure_time", "iso")


async def _file_ids_with_any_tag(tags: Iterable[str]) -> set:
    ids = await FileTag.filter(tag__name__in=sorted(tags)).values_list("file_id", flat=True)
    return set(ids)


async def search_files(criteria: SearchCriteria) -> List[FileRecord]:
    """Return each file matching every set criterion exactly once."""
    query = FileRecord.all()
    if criteria.is_empty():
        return await query

    if criteria.tags:
        ids = await _file_ids_with_any_tag(criteria.tags)
        if not ids:
            return []
        query = query.filter(id__in=list(ids))

    if criteria.start:
        query = query.filter(created_at__gte=criteria.start)
    if criteria.end:
        query = query.filter(created_at__lt=criteria.end)

    exif_filters = {field: getattr(criteria, field) for field in EXIF_CRITERIA if getattr(criteria, field)}
    if exif_filters:
        ids = await ExifRecord.filter(**exif_filters).values_list("file_id", flat=True)
        if not ids:
            return []
        query = query.filter(id__in=list(ids))

    results = await query
    logger.debug("Search %s matched %d files", criteria.model_dump(exclude_none=True), len(results))
    return results


async def search_by_tags(tags: Iterable[str] | None) -> List[FileRecord]:
    return await search_files(SearchCriteria(tags=set(tags or ())))

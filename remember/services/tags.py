import logging
from typing import Iterable, List
from uuid import UUID

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from remember.errors import NotFoundError, ValidationError
from remember.models import FileRecord, FileTag, Tag

logger = logging.getLogger(__name__)


async def _get_file(file_id: UUID | str) -> FileRecord:
    record = await FileRecord.filter(id=file_id).first()
    if not record:
        raise NotFoundError("File", file_id)
    return record


class TagService:
    """Free-form tags shared between files through explicit link rows."""

    @staticmethod
    async def ensure_tag(name: str) -> Tag:
        """Return the tag with exactly this name, creating it on first use."""
        if not name or not name.strip():
            raise ValidationError("Tag name must not be empty", code="invalid_tag")
        existing = await Tag.filter(name=name).first()
        if existing:
            return existing
        try:
            async with in_transaction():
                return await Tag.create(name=name)
        except IntegrityError:
            # Lost a creation race; the unique constraint kept the winner's row
            logger.info("Tag %r created concurrently; reusing it", name)
            return await Tag.get(name=name)

    @staticmethod
    async def attach(file_id: UUID | str, names: Iterable[str]) -> List[Tag]:
        record = await _get_file(file_id)
        tags = []
        for name in dict.fromkeys(names):
            tag = await TagService.ensure_tag(name)
            await FileTag.get_or_create(file=record, tag=tag)
            tags.append(tag)
        return tags

    @staticmethod
    async def detach(file_id: UUID | str, tag_id: UUID | str) -> None:
        """Remove one file-tag link. Unlinked pairs are left alone without error."""
        record = await _get_file(file_id)
        tag = await Tag.filter(id=tag_id).first()
        if not tag:
            raise NotFoundError("Tag", tag_id)
        removed = await FileTag.filter(file=record, tag=tag).delete()
        if not removed:
            logger.debug("File %s was not tagged %s", record.id, tag.name)

    @staticmethod
    async def list_by_file(file_id: UUID | str) -> List[Tag]:
        record = await _get_file(file_id)
        tag_ids = await FileTag.filter(file_id=record.id).values_list("tag_id", flat=True)
        if not tag_ids:
            return []
        return await Tag.filter(id__in=list(tag_ids))

    @staticmethod
    async def list_tags() -> List[Tag]:
        return await Tag.all()

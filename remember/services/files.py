import logging
from datetime import date
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple
from uuid import UUID

from tortoise.transactions import in_transaction

from remember.errors import NotFoundError, StorageError
from remember.models import ExifRecord, FileRecord
from remember.services.album_service import AlbumService
from remember.services.storage import LocalStorage, MillisClock, build_storage_path
from remember.services.validation import FileValidator
from remember.utils.exif import extract_exif

logger = logging.getLogger(__name__)

# (filename, content_type, content, declared size or None)
UploadItem = Tuple[str, Optional[str], bytes, Optional[int]]


class FileService:
    """Upload and delete files, keeping stored bytes and database rows together."""

    def __init__(
        self,
        storage: LocalStorage,
        validator: Optional[FileValidator] = None,
        clock: Optional[MillisClock] = None,
        today: Callable[[], date] = date.today,
    ):
        self.storage = storage
        self.validator = validator or FileValidator()
        self.clock = clock or MillisClock()
        self.today = today

    async def upload(
        self, filename: str, content_type: Optional[str], content: bytes, size: Optional[int] = None
    ) -> FileRecord:
        self.validator.validate(filename, content_type, content, size=size)
        return await self._store(filename, content_type, content)

    async def _store(self, filename: str, content_type: Optional[str], content: bytes) -> FileRecord:
        key = build_storage_path(filename, self.today(), self.clock.next())
        meta = extract_exif(content)
        if meta is None:
            logger.info("Upload %s stored without EXIF data", filename)

        self.storage.save(key, content)
        try:
            async with in_transaction():
                record = await FileRecord.create(
                    original_filename=filename,
                    storage_path=key,
                    size_bytes=len(content),
                    content_type=content_type,
                )
                if meta is not None:
                    await ExifRecord.create(file=record, **meta.model_dump())
        except Exception:
            logger.error("Database insert failed for %s; removing stored file", key)
            self.storage.delete(key)
            raise

        logger.info("Stored %s as %s", filename, key)
        return record

    async def upload_many(self, items: Iterable[UploadItem]) -> List[FileRecord]:
        """Store a batch of uploads; any failure leaves none of them behind."""
        batch = list(items)
        for name, content_type, content, size in batch:
            self.validator.validate(name, content_type, content, size=size)

        stored: List[FileRecord] = []
        try:
            for name, content_type, content, _ in batch:
                stored.append(await self._store(name, content_type, content))
        except Exception:
            logger.error("Batch upload failed after %d of %d files; rolling back", len(stored), len(batch))
            for record in stored:
                await record.delete()
                self.storage.delete(record.storage_path)
            raise
        return stored

    async def get(self, file_id: UUID | str) -> FileRecord:
        record = await FileRecord.filter(id=file_id).first()
        if not record:
            raise NotFoundError("File", file_id)
        return record

    async def list(self) -> List[FileRecord]:
        return await FileRecord.all().prefetch_related("tag_links__tag")

    async def get_exif(self, file_id: UUID | str) -> Optional[ExifRecord]:
        record = await self.get(file_id)
        return await ExifRecord.filter(file_id=record.id).first()

    async def resolve_path(self, file_id: UUID | str) -> Tuple[FileRecord, Path]:
        record = await self.get(file_id)
        return record, self.storage.path_for(record.storage_path)

    async def delete(self, file_id: UUID | str) -> None:
        record = await self.get(file_id)
        albums = await AlbumService.albums_containing(record.id)
        # Bytes are renamed aside first so a failed commit can put them back
        aside = self.storage.move_aside(record.storage_path)
        try:
            async with in_transaction():
                await record.delete()
                for album in albums:
                    await AlbumService.refresh_stats(album)
        except Exception:
            if aside is not None:
                self.storage.restore(aside, record.storage_path)
            raise
        if aside is not None:
            try:
                self.storage.delete(aside)
            except StorageError:
                logger.error("Row for %s deleted but %s was left on disk", record.id, aside)
        logger.info("Deleted file %s (%s)", record.id, record.storage_path)

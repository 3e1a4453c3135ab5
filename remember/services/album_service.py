import logging
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from tortoise.transactions import in_transaction

from remember.config import settings
from remember.errors import NotFoundError, ValidationError
from remember.models import Album, AlbumFile, FileRecord
from remember.schemas.album import GeneratedAlbum

logger = logging.getLogger(__name__)

GROUP_BY_DATE = "date"
GROUP_BY_TAG = "tag"
GROUP_BY_LOCATION = "location"


def group_files_by_date(files: Iterable[FileRecord], min_photos: int) -> List[Tuple[date, List[FileRecord]]]:
    """Bucket files by the calendar day they were created, newest day first.

    Days with fewer than ``min_photos`` files are dropped. Files inside a
    bucket keep creation order.
    """
    groups: Dict[date, List[FileRecord]] = {}
    for f in sorted(files, key=lambda f: f.created_at):
        groups.setdefault(f.created_at.date(), []).append(f)
    kept = [(day, members) for day, members in groups.items() if len(members) >= min_photos]
    kept.sort(key=lambda t: t[0], reverse=True)
    return kept


def build_date_album(day: date, members: Sequence[FileRecord], title_format: str) -> GeneratedAlbum:
    return GeneratedAlbum(
        title=day.strftime(title_format),
        description=f"{len(members)} photos",
        photo_count=len(members),
        start_date=min(f.created_at for f in members),
        cover_file_id=members[0].id,
        file_ids=[f.id for f in members],
    )


class AlbumService:
    """Album CRUD plus automatic grouping of uploaded files."""

    @staticmethod
    async def get(album_id: UUID | str) -> Album:
        album = await Album.filter(id=album_id).first()
        if not album:
            raise NotFoundError("Album", album_id)
        return album

    @staticmethod
    async def list() -> List[Album]:
        return await Album.all().order_by("-created_at")

    @staticmethod
    async def members(album_id: UUID | str) -> List[FileRecord]:
        album = await AlbumService.get(album_id)
        file_ids = await AlbumFile.filter(album=album).values_list("file_id", flat=True)
        if not file_ids:
            return []
        return await FileRecord.filter(id__in=list(file_ids)).order_by("created_at")

    @staticmethod
    async def refresh_stats(album: Album) -> Album:
        """Recompute photo count and start date; drop a cover that left the album."""
        file_ids = await AlbumFile.filter(album=album).values_list("file_id", flat=True)
        files = await FileRecord.filter(id__in=list(file_ids)) if file_ids else []
        album.photo_count = len(files)
        album.start_date = min((f.created_at for f in files), default=None)
        if album.cover_file_id and album.cover_file_id not in {f.id for f in files}:
            album.cover_file_id = None
            album.cover_position = None
        await album.save()
        return album

    @staticmethod
    async def _set_members(album: Album, file_ids: Iterable[UUID | str]) -> None:
        await AlbumFile.filter(album=album).delete()
        ids = list(dict.fromkeys(file_ids))
        # Unknown ids are skipped, like a find-by-ids lookup
        files = await FileRecord.filter(id__in=ids) if ids else []
        for f in files:
            await AlbumFile.create(album=album, file=f)

    @staticmethod
    async def create(
        title: str,
        description: Optional[str] = None,
        file_ids: Iterable[UUID | str] = (),
        cover_file_id: UUID | str | None = None,
    ) -> Album:
        if not title or not title.strip():
            raise ValidationError("Album title is required", code="invalid_album")
        async with in_transaction():
            album = await Album.create(
                title=title,
                description=description,
                cover_file_id=UUID(str(cover_file_id)) if cover_file_id else None,
            )
            await AlbumService._set_members(album, file_ids)
            await AlbumService.refresh_stats(album)
        logger.info("Created album %s with %d photos", album.id, album.photo_count)
        return album

    @staticmethod
    async def update(
        album_id: UUID | str,
        title: str,
        description: Optional[str] = None,
        file_ids: Optional[Iterable[UUID | str]] = None,
    ) -> Album:
        album = await AlbumService.get(album_id)
        async with in_transaction():
            album.title = title
            album.description = description
            await album.save()
            if file_ids is not None:
                await AlbumService._set_members(album, file_ids)
            await AlbumService.refresh_stats(album)
        return album

    @staticmethod
    async def delete(album_id: UUID | str) -> None:
        album = await AlbumService.get(album_id)
        await album.delete()
        logger.info("Deleted album %s", album_id)

    @staticmethod
    async def set_cover(album_id: UUID | str, file_id: UUID | str, position: Optional[str] = None) -> Album:
        album = await AlbumService.get(album_id)
        is_member = await AlbumFile.filter(album=album, file_id=file_id).exists()
        if not is_member:
            raise ValidationError("Selected file is not part of this album", code="cover_not_member")
        album.cover_file_id = UUID(str(file_id))
        album.cover_position = position
        await album.save()
        return album

    @staticmethod
    async def albums_containing(file_id: UUID | str) -> List[Album]:
        album_ids = await AlbumFile.filter(file_id=file_id).values_list("album_id", flat=True)
        if not album_ids:
            return []
        return await Album.filter(id__in=list(album_ids))

    @staticmethod
    async def generate(
        group_by: Optional[str] = GROUP_BY_DATE,
        min_photos: Optional[int] = None,
        persist: bool = False,
    ) -> List[GeneratedAlbum]:
        minimum = min_photos if min_photos is not None else settings.ALBUM_MIN_PHOTOS
        files = await FileRecord.all()

        if group_by == GROUP_BY_TAG:
            proposals = await AlbumService._generate_tag_albums(files, minimum)
        elif group_by == GROUP_BY_LOCATION:
            proposals = await AlbumService._generate_location_albums(files, minimum)
        else:
            if group_by not in (None, GROUP_BY_DATE):
                logger.info("Unknown group_by %r; grouping by date", group_by)
            proposals = [
                build_date_album(day, members, settings.ALBUM_TITLE_FORMAT)
                for day, members in group_files_by_date(files, minimum)
            ]

        if persist:
            for proposal in proposals:
                album = await AlbumService.create(
                    proposal.title,
                    proposal.description,
                    proposal.file_ids,
                    cover_file_id=proposal.cover_file_id,
                )
                proposal.id = album.id
        return proposals

    @staticmethod
    async def _generate_tag_albums(files: List[FileRecord], min_photos: int) -> List[GeneratedAlbum]:
        # TODO: group by shared tags once tag albums get a naming scheme
        return []

    @staticmethod
    async def _generate_location_albums(files: List[FileRecord], min_photos: int) -> List[GeneratedAlbum]:
        # TODO: cluster ExifRecord gps_lat/gps_lng into places
        return []

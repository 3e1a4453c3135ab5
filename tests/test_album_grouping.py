# tests/test_album_grouping.py
"""Test date-based album grouping and album bookkeeping"""

import datetime as dt
import uuid
from types import SimpleNamespace

import pytest

from remember.errors import NotFoundError, ValidationError
from remember.models import Album, AlbumFile, FileRecord
from remember.services.album_service import AlbumService, group_files_by_date

BASE = dt.datetime(2025, 3, 1, 12, 0, 0)


def _file(created_at):
    return SimpleNamespace(id=uuid.uuid4(), created_at=created_at)


async def _record(name: str, created_at: dt.datetime) -> FileRecord:
    record = await FileRecord.create(
        original_filename=name,
        storage_path=f"{created_at:%Y/%m/%d}/{uuid.uuid4().hex}_{name}",
        size_bytes=10,
        content_type="image/jpeg",
    )
    await FileRecord.filter(id=record.id).update(created_at=created_at)
    return await FileRecord.get(id=record.id)


def test_min_photos_threshold():
    day1 = [_file(BASE + dt.timedelta(hours=h)) for h in range(2)]
    day2 = [_file(BASE + dt.timedelta(days=1, hours=h)) for h in range(3)]

    groups = group_files_by_date(day1 + day2, min_photos=3)

    assert len(groups) == 1
    day, members = groups[0]
    assert day == dt.date(2025, 3, 2)
    assert len(members) == 3


def test_groups_newest_day_first_and_members_in_creation_order():
    files = [_file(BASE + dt.timedelta(days=d, hours=-h)) for d in range(3) for h in range(2)]

    groups = group_files_by_date(files, min_photos=1)

    assert [day for day, _ in groups] == [dt.date(2025, 3, 3), dt.date(2025, 3, 2), dt.date(2025, 3, 1)]
    for _, members in groups:
        assert members == sorted(members, key=lambda f: f.created_at)


@pytest.mark.asyncio
async def test_generate_date_albums(db_setup):
    pair = [await _record(f"a{i}.jpg", BASE + dt.timedelta(hours=i)) for i in range(2)]
    trio = [await _record(f"b{i}.jpg", BASE + dt.timedelta(days=3, hours=i)) for i in range(3)]

    proposals = await AlbumService.generate("date", min_photos=3)

    assert len(proposals) == 1
    album = proposals[0]
    assert album.photo_count == 3
    assert album.description == "3 photos"
    assert album.title == "March 04, 2025"
    assert set(album.file_ids) == {f.id for f in trio}
    assert album.cover_file_id == trio[0].id
    assert album.start_date == trio[0].created_at
    assert album.id is None
    assert not set(album.file_ids) & {f.id for f in pair}
    # proposals are not saved
    assert await Album.all().count() == 0


@pytest.mark.asyncio
async def test_generate_defaults_and_stubs(db_setup):
    for i in range(3):
        await _record(f"c{i}.jpg", BASE + dt.timedelta(minutes=i))

    assert len(await AlbumService.generate(None)) == 1
    assert len(await AlbumService.generate("unknown-mode")) == 1
    assert await AlbumService.generate("tag") == []
    assert await AlbumService.generate("location") == []


@pytest.mark.asyncio
async def test_generate_and_persist(db_setup):
    files = [await _record(f"d{i}.jpg", BASE + dt.timedelta(minutes=i)) for i in range(4)]

    proposals = await AlbumService.generate("date", min_photos=3, persist=True)

    assert len(proposals) == 1
    saved = await AlbumService.get(proposals[0].id)
    assert saved.photo_count == 4
    assert saved.cover_file_id == files[0].id
    assert await AlbumFile.filter(album=saved).count() == 4


@pytest.mark.asyncio
async def test_create_album_tracks_count_and_start_date(db_setup):
    early = await _record("early.jpg", BASE)
    late = await _record("late.jpg", BASE + dt.timedelta(days=2))

    album = await AlbumService.create("Trip", "Weekend away", [late.id, early.id, uuid.uuid4()])

    assert album.photo_count == 2
    assert album.start_date == early.created_at
    assert [f.id for f in await AlbumService.members(album.id)] == [early.id, late.id]


@pytest.mark.asyncio
async def test_create_album_requires_title(db_setup):
    with pytest.raises(ValidationError):
        await AlbumService.create("  ")


@pytest.mark.asyncio
async def test_cover_must_be_member(db_setup):
    inside = await _record("in.jpg", BASE)
    outside = await _record("out.jpg", BASE)
    album = await AlbumService.create("Cover test", None, [inside.id])

    with pytest.raises(ValidationError) as exc:
        await AlbumService.set_cover(album.id, outside.id, "center")
    assert exc.value.code == "cover_not_member"

    album = await AlbumService.set_cover(album.id, inside.id, "50% 30%")
    assert album.cover_file_id == inside.id
    assert album.cover_position == "50% 30%"


@pytest.mark.asyncio
async def test_update_membership_recomputes_and_drops_stale_cover(db_setup):
    a = await _record("a.jpg", BASE)
    b = await _record("b.jpg", BASE + dt.timedelta(days=1))
    album = await AlbumService.create("Edit me", None, [a.id, b.id])
    await AlbumService.set_cover(album.id, a.id)

    album = await AlbumService.update(album.id, "Edited", "new description", [b.id])

    assert album.title == "Edited"
    assert album.photo_count == 1
    assert album.start_date == b.created_at
    assert album.cover_file_id is None

    # None keeps the members
    album = await AlbumService.update(album.id, "Renamed", None, None)
    assert album.photo_count == 1


@pytest.mark.asyncio
async def test_list_and_delete(db_setup):
    first = await AlbumService.create("First")
    second = await AlbumService.create("Second")
    await Album.filter(id=first.id).update(created_at=BASE)

    assert [a.id for a in await AlbumService.list()] == [second.id, first.id]

    await AlbumService.delete(first.id)
    with pytest.raises(NotFoundError):
        await AlbumService.get(first.id)
    with pytest.raises(NotFoundError):
        await AlbumService.delete(first.id)

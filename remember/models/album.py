from tortoise import fields
from .base import BaseModel


class Album(BaseModel):
    title = fields.CharField(max_length=255)
    description = fields.TextField(null=True)
    photo_count = fields.IntField(default=0)
    start_date = fields.DatetimeField(null=True)
    # Must point at a current member; cleared when that file leaves the album
    cover_file = fields.ForeignKeyField(
        "models.FileRecord",
        related_name="cover_for_albums",
        null=True,
        on_delete=fields.SET_NULL,
    )
    cover_position = fields.CharField(max_length=64, null=True)

    class Meta:
        table = "albums"


class AlbumFile(BaseModel):
    album = fields.ForeignKeyField("models.Album", related_name="file_links", on_delete=fields.CASCADE)
    file = fields.ForeignKeyField("models.FileRecord", related_name="album_links", on_delete=fields.CASCADE)
    added_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "album_files"
        unique_together = ("album", "file")

from tortoise import fields
from .base import BaseModel


class Tag(BaseModel):
    name = fields.CharField(max_length=255, unique=True)

    class Meta:
        table = "tags"
        ordering = ["name"]


class FileTag(BaseModel):
    file = fields.ForeignKeyField("models.FileRecord", related_name="tag_links", on_delete=fields.CASCADE)
    tag = fields.ForeignKeyField("models.Tag", related_name="file_links", on_delete=fields.CASCADE)

    class Meta:
        table = "file_tags"
        unique_together = ("file", "tag")

from tortoise import fields
from .base import BaseModel


class FileRecord(BaseModel):
    original_filename = fields.CharField(max_length=512)
    storage_path = fields.CharField(max_length=1024, unique=True)
    size_bytes = fields.BigIntField()
    content_type = fields.CharField(max_length=100, null=True)

    class Meta:
        table = "files"
        ordering = ["created_at"]

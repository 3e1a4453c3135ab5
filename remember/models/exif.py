from tortoise import fields
from .base import BaseModel


class ExifRecord(BaseModel):
    file = fields.OneToOneField("models.FileRecord", related_name="exif", on_delete=fields.CASCADE)
    make = fields.CharField(max_length=255, null=True)
    model = fields.CharField(max_length=255, null=True)
    captured_at = fields.DatetimeField(null=True)
    exposure_time = fields.CharField(max_length=64, null=True)
    f_number = fields.CharField(max_length=32, null=True)
    iso = fields.CharField(max_length=32, null=True)
    focal_length = fields.CharField(max_length=64, null=True)
    gps_lat = fields.FloatField(null=True)
    gps_lng = fields.FloatField(null=True)
    width = fields.IntField(null=True)
    height = fields.IntField(null=True)

    class Meta:
        table = "exif_data"

# skatespot/api/spots/schemas.py
from marshmallow import Schema, fields, validate

class LocationSchema(Schema):
    """GeoJSON Point. coordinates는 [경도, 위도] 순서입니다."""
    type = fields.Str(load_default="Point", validate=validate.Equal("Point"))
    coordinates = fields.List(fields.Float(), required=True, validate=validate.Length(equal=2))
    address = fields.Str(load_default="")

class SpotImageSchema(Schema):
    url = fields.URL(required=True)
    caption = fields.Str(load_default="")

class SpotCreateSchema(Schema):
    """POST /api/spots"""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    description = fields.Str(load_default="")
    spotType = fields.Str(load_default="")
    location = fields.Nested(LocationSchema, required=True)
    images = fields.List(fields.Nested(SpotImageSchema), load_default=list)

class SpotVideoSchema(Schema):
    """POST /api/spots/{spot_id}/videos"""
    url = fields.URL(required=True, error_messages={"required": "url은 필수 항목입니다."})
    thumbnail = fields.URL(load_default=None, allow_none=True)
    caption = fields.Str(load_default="", validate=validate.Length(max=300))
    description = fields.Str(load_default="")

class EventCreateSchema(Schema):
    """POST /api/events"""
    title = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    description = fields.Str(load_default="")
    date = fields.DateTime(required=True)
    image = fields.URL(load_default=None, allow_none=True)
    location = fields.Nested(LocationSchema, required=True)

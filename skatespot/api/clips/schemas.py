# skatespot/api/clips/schemas.py
from marshmallow import Schema, fields, validate

class ClipCreateSchema(Schema):
    """POST /api/spots/{spot_id}/clips"""
    videoUrl = fields.URL(required=True, error_messages={"required": "videoUrl은 필수 항목입니다."})
    thumbnailUrl = fields.URL(load_default=None, allow_none=True)
    caption = fields.Str(load_default="", validate=validate.Length(max=300))

class ClipResponseSchema(Schema):
    clipId = fields.Str(required=True)
    spotId = fields.Str(required=True)
    userId = fields.Str(required=True)
    userName = fields.Str(required=True)
    videoUrl = fields.Str(required=True)
    thumbnailUrl = fields.Str(allow_none=True)
    caption = fields.Str()
    likeCount = fields.Int()
    isLiked = fields.Bool()
    createdAt = fields.DateTime(allow_none=True)

class ClipLikeResponseSchema(Schema):
    isLiked = fields.Bool(required=True)
    likeCount = fields.Int(required=True)

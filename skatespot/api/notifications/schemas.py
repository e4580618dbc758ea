# skatespot/api/notifications/schemas.py
from marshmallow import Schema, fields, validate

class ShareSpotSchema(Schema):
    """POST /api/spots/{spot_id}/share"""
    spotName = fields.Str(load_default="")
    friendIds = fields.List(
        fields.Str(validate=validate.Length(min=1)),
        required=True,
        validate=validate.Length(min=1, error="공유할 친구를 한 명 이상 선택해야 합니다.")
    )

class SenderSchema(Schema):
    userId = fields.Str(required=True)
    displayName = fields.Str()

class NotificationResponseSchema(Schema):
    notificationId = fields.Str(required=True)
    recipientId = fields.Str(required=True)
    sender = fields.Nested(SenderSchema)
    type = fields.Str(required=True)
    targetId = fields.Str(required=True)
    targetSummary = fields.Str(allow_none=True)
    read = fields.Bool()
    createdAt = fields.DateTime(allow_none=True)

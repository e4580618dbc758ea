# skatespot/api/users/schemas.py
from dataclasses import asdict
from marshmallow import Schema, fields

from skatespot.models.user_profile import FavoriteSpot

class FriendEntrySchema(Schema):
    userId = fields.Str(required=True)
    displayName = fields.Str(required=True)
    timestamp = fields.DateTime()
    profilePhoto = fields.Str(allow_none=True, dump_only=True)

class FriendRequestSchema(Schema):
    userId = fields.Str(required=True)
    displayName = fields.Str(required=True)
    status = fields.Str(required=True)
    timestamp = fields.DateTime()

class FavoriteSpotSchema(Schema):
    spotId = fields.Str(required=True)
    spotName = fields.Str()
    spotType = fields.Str()
    addedAt = fields.DateTime(allow_none=True)

class MyProfileResponseSchema(Schema):
    """
    GET /api/users/me
    본인 프로필 전체(친구, 받은 요청, 즐겨찾기 포함)를 응답할 때 사용하는 스키마.
    """
    displayName = fields.Str(required=True)
    email = fields.Str(allow_none=True)
    profilePhoto = fields.Str(allow_none=True)
    createdAt = fields.DateTime()
    friends = fields.List(fields.Nested(FriendEntrySchema), dump_default=list)
    friendRequests = fields.List(fields.Nested(FriendRequestSchema), dump_default=list)
    favoriteSpots = fields.Method("get_favorite_spots")

    def get_favorite_spots(self, obj):
        values = [asdict(FavoriteSpot.from_value(v)) for v in obj.get('favoriteSpots', [])]
        return FavoriteSpotSchema(many=True).dump(values)

class UserPublicResponseSchema(Schema):
    """
    GET /api/users/{user_id}
    다른 사용자의 프로필을 응답할 때 사용하는 스키마. 이메일 등 민감한 정보는 제외합니다.
    """
    id = fields.Str(required=True, dump_only=True)
    displayName = fields.Str(required=True)
    profilePhoto = fields.Str(allow_none=True)
    friendCount = fields.Int(required=True)
    favoriteCount = fields.Int(required=True)

class UserSearchResultSchema(Schema):
    id = fields.Str(required=True)
    displayName = fields.Str(required=True)
    profilePhoto = fields.Str(allow_none=True)
    isFriend = fields.Bool(required=True)
    requestSent = fields.Bool(required=True)

class ProfilePhotoSchema(Schema):
    """PATCH /api/users/me/profile-photo"""
    profilePhoto = fields.URL(required=True, error_messages={"required": "profilePhoto는 필수 항목입니다."})

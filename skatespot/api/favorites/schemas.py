# skatespot/api/favorites/schemas.py
from marshmallow import Schema, fields, validate

class FavoriteCreateSchema(Schema):
    """
    POST /api/favorites
    spotName/spotType을 생략하면 스팟 API에서 조회해 채웁니다.
    """
    spotId = fields.Str(required=True, validate=validate.Length(min=1))
    spotName = fields.Str(load_default=None)
    spotType = fields.Str(load_default=None)

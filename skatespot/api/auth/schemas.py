# skatespot/api/auth/schemas.py
from marshmallow import Schema, fields, validate, pre_load

class RegisterSchema(Schema):
    """POST /api/auth/register 요청 본문의 유효성을 검사하는 스키마"""
    email = fields.Email(required=True)
    # Firebase Auth는 6자 미만의 비밀번호를 허용하지 않습니다.
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6))
    username = fields.Str(load_default="", validate=validate.Length(max=50))

class LoginSchema(Schema):
    """POST /api/auth/login 요청 본문의 유효성을 검사하는 스키마"""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True)

class LogoutRequestSchema(Schema):
    """로그아웃 요청의 유효성을 검사하는 스키마"""
    access_token = fields.Str(required=True)
    refresh_token = fields.Str(required=True)

class DisplayNameSchema(Schema):
    """PATCH /api/auth/me/display-name"""
    displayName = fields.Str(required=True, validate=validate.Length(min=1, max=50, error="표시 이름은 1~50자 사이여야 합니다."))

    @pre_load
    def strip_display_name(self, data, **kwargs):
        # 길이 검사는 앞뒤 공백을 제거한 값으로 합니다.
        if isinstance(data, dict) and isinstance(data.get('displayName'), str):
            data = {**data, 'displayName': data['displayName'].strip()}
        return data

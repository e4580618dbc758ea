# skatespot/api/auth/routes.py

import logging
import jwt
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity,
)
from marshmallow import ValidationError

from skatespot.api.auth.schemas import RegisterSchema, LoginSchema, LogoutRequestSchema, DisplayNameSchema
from .services import auth_service

auth_bp = Blueprint('auth_bp', __name__)


def _token_response(user_id: str, status_code: int, **extra):
    return jsonify({
        "access_token": create_access_token(identity=user_id),
        "refresh_token": create_refresh_token(identity=user_id),
        "user_id": user_id,
        **extra
    }), status_code


@auth_bp.route('/register', methods=['POST'])
def register():
    """이메일/비밀번호 회원가입. 성공 시 토큰을 함께 발급합니다."""
    try:
        data = RegisterSchema().load(request.get_json() or {})
        user_id = auth_service.register(data['email'], data['password'], data.get('username', ""))
        return _token_response(user_id, 201, is_new_user=True)
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except ValueError as e:
        return jsonify({"error_code": "EMAIL_ALREADY_EXISTS", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"회원가입 중 예외 발생: {e}", exc_info=True)
        return jsonify({"error_code": "REGISTRATION_FAILED", "message": "회원가입 처리 중 오류가 발생했습니다."}), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    """이메일/비밀번호 로그인."""
    try:
        data = LoginSchema().load(request.get_json() or {})
        user_id = auth_service.login(data['email'], data['password'])
        return _token_response(user_id, 200)
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PermissionError as e:
        return jsonify({"error_code": "INVALID_CREDENTIALS", "message": str(e)}), 401
    except Exception as e:
        logging.error(f"로그인 중 예외 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부 오류가 발생했습니다."}), 500


# --- 토큰 재발급 엔드포인트 ---
@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True)  # Refresh Token만 허용
def refresh_token():
    """유효한 Refresh Token으로 새로운 Access Token을 발급합니다."""
    current_user_id = get_jwt_identity()
    new_access_token = create_access_token(identity=current_user_id)
    return jsonify(access_token=new_access_token), 200


# --- 로그아웃 엔드포인트 ---
@auth_bp.route('/logout', methods=['POST'])
def logout():
    """로그아웃. 전달받은 Access/Refresh 토큰을 무효화 목록에 추가합니다."""
    try:
        data = LogoutRequestSchema().load(request.get_json() or {})
        secret_key = current_app.config['JWT_SECRET_KEY']
        algorithm = current_app.config.get('JWT_ALGORITHM', 'HS256')

        # 만료된 토큰도 해독할 수 있도록 'verify_exp=False' 옵션을 사용합니다.
        decoded_access = jwt.decode(data['access_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})
        decoded_refresh = jwt.decode(data['refresh_token'], secret_key, algorithms=[algorithm], options={"verify_exp": False})

        auth_service.logout_user(decoded_access['jti'], decoded_access['exp'], decoded_refresh['jti'], decoded_refresh['exp'])
        return jsonify({"message": "로그아웃 되었습니다."}), 200

    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400
    except jwt.PyJWTError as e:
        logging.error(f"JWT 해독 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INVALID_TOKEN", "message": "유효하지 않은 토큰입니다."}), 422
    except Exception as e:
        logging.error(f"로그아웃 처리 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "LOGOUT_FAILED", "message": "로그아웃 처리 중 오류가 발생했습니다."}), 500


@auth_bp.route('/me/display-name', methods=['PATCH'])
@jwt_required()
def update_display_name():
    """현재 로그인된 사용자의 표시 이름을 변경합니다."""
    user_id = get_jwt_identity()
    try:
        data = DisplayNameSchema().load(request.get_json() or {})
        auth_service.update_display_name(user_id, data['displayName'])
        return jsonify({"displayName": data['displayName']}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"표시 이름 변경 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPDATE_FAILED", "message": "표시 이름 변경 중 오류가 발생했습니다."}), 500

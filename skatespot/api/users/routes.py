# skatespot/api/users/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from skatespot.api.users.schemas import (
    MyProfileResponseSchema, UserPublicResponseSchema, UserSearchResultSchema, ProfilePhotoSchema
)

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_profile():
    """현재 로그인된 사용자의 프로필을 조회합니다. 프로필이 없으면 새로 생성합니다."""
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        profile = user_service.get_or_create_profile(user_id)
        return jsonify(MyProfileResponseSchema().dump(profile)), 200
    except Exception as e:
        logging.error(f"내 프로필 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PROFILE_FETCH_FAILED", "message": "프로필 조회 중 오류가 발생했습니다."}), 500


@users_bp.route('/search', methods=['GET'])
@jwt_required()
def search_users():
    """표시 이름/이메일로 친구로 추가할 사용자를 검색합니다."""
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    term = request.args.get('q', '', type=str)
    try:
        results = user_service.search_users(user_id, term)
        return jsonify({"users": UserSearchResultSchema(many=True).dump(results)}), 200
    except Exception as e:
        logging.error(f"사용자 검색 중 오류 발생 (term: {term}): {e}", exc_info=True)
        return jsonify({"error_code": "SEARCH_FAILED", "message": "사용자 검색 중 오류가 발생했습니다."}), 500


@users_bp.route('/<string:user_id>', methods=['GET'])
@jwt_required(optional=True)
def get_user_profile(user_id: str):
    """특정 사용자의 공개 프로필 정보를 조회합니다."""
    user_service = current_app.services['users']
    profile = user_service.get_public_profile(user_id)
    if not profile:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
    return jsonify(UserPublicResponseSchema().dump(profile)), 200


@users_bp.route('/me/profile-photo', methods=['PATCH'])
@jwt_required()
def update_my_profile_photo():
    """현재 로그인된 사용자의 프로필 사진 URL을 업데이트합니다."""
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        data = ProfilePhotoSchema().load(request.get_json() or {})
        updated = user_service.update_profile_photo(user_id, data['profilePhoto'])
        if not updated:
            return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
        return jsonify(MyProfileResponseSchema().dump(updated)), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"프로필 사진 업데이트 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "프로필 사진 업데이트 중 서버 오류가 발생했습니다."}), 500

# skatespot/api/favorites/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from skatespot.api.favorites.schemas import FavoriteCreateSchema
from skatespot.api.users.schemas import FavoriteSpotSchema
from skatespot.services.spot_api_client import SpotApiError

favorites_bp = Blueprint('favorites_bp', __name__)


def _resolve_spot_details(spot_id: str, spot_name, spot_type):
    """이름/유형이 비어 있으면 스팟 API에서 조회합니다. 조회 실패 시 빈 값으로 저장합니다."""
    if spot_name and spot_type:
        return spot_name, spot_type
    try:
        spot = current_app.services['spot_api'].get_spot(spot_id) or {}
    except SpotApiError as e:
        logging.warning(f"스팟 정보 조회 실패, 빈 값으로 저장합니다 (spot_id: {spot_id}): {e}")
        return spot_name or "", spot_type or ""
    return spot_name or spot.get('name', ""), spot_type or spot.get('type', "")


@favorites_bp.route('', methods=['GET'])
@jwt_required()
def list_favorites():
    favorite_service = current_app.services['favorites']
    user_id = get_jwt_identity()
    try:
        favorites = favorite_service.list_favourite_spots(user_id)
        return jsonify({"favoriteSpots": FavoriteSpotSchema(many=True).dump(favorites)}), 200
    except LookupError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404


@favorites_bp.route('', methods=['POST'])
@jwt_required()
def add_favorite():
    """스팟을 즐겨찾기에 추가합니다. 새로 추가되면 201, 이미 있으면 200을 반환합니다."""
    favorite_service = current_app.services['favorites']
    user_id = get_jwt_identity()
    try:
        data = FavoriteCreateSchema().load(request.get_json() or {})
        spot_name, spot_type = _resolve_spot_details(data['spotId'], data.get('spotName'), data.get('spotType'))
        added = favorite_service.add_favourite_spot(user_id, data['spotId'], spot_name, spot_type)
        return jsonify({"spotId": data['spotId'], "isFavourited": True, "added": added}), 201 if added else 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except LookupError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"즐겨찾기 추가 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FAVORITE_UPDATE_FAILED", "message": "즐겨찾기 변경 중 오류가 발생했습니다."}), 500


@favorites_bp.route('/<string:spot_id>', methods=['GET'])
@jwt_required()
def get_favorite_status(spot_id: str):
    favorite_service = current_app.services['favorites']
    user_id = get_jwt_identity()
    return jsonify({"spotId": spot_id, "isFavourited": favorite_service.is_spot_favourited(user_id, spot_id)}), 200


@favorites_bp.route('/<string:spot_id>', methods=['DELETE'])
@jwt_required()
def remove_favorite(spot_id: str):
    favorite_service = current_app.services['favorites']
    user_id = get_jwt_identity()
    try:
        removed = favorite_service.remove_favourite_spot(user_id, spot_id)
        return jsonify({"spotId": spot_id, "isFavourited": False, "removed": removed}), 200
    except LookupError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"즐겨찾기 삭제 중 오류 발생 (user_id: {user_id}, spot_id: {spot_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FAVORITE_UPDATE_FAILED", "message": "즐겨찾기 변경 중 오류가 발생했습니다."}), 500

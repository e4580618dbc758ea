# skatespot/api/clips/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from skatespot.api.clips.schemas import ClipCreateSchema, ClipResponseSchema, ClipLikeResponseSchema

clips_bp = Blueprint('clips_bp', __name__)

@clips_bp.route('/spots/<string:spot_id>/clips', methods=['POST'])
@jwt_required()
def create_clip(spot_id: str):
    """스팟에 새 영상 클립을 등록합니다. 성공 시 201을 반환합니다."""
    clip_service = current_app.services['clips']
    user_id = get_jwt_identity()
    try:
        data = ClipCreateSchema().load(request.get_json() or {})
        new_clip = clip_service.create_clip(
            user_id, spot_id, data['videoUrl'],
            thumbnail_url=data.get('thumbnailUrl'), caption=data.get('caption', "")
        )
        return jsonify(ClipResponseSchema().dump(new_clip)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except LookupError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"클립 생성 중 오류 발생 (spot_id: {spot_id}): {e}", exc_info=True)
        return jsonify({"error_code": "CLIP_CREATION_FAILED", "message": "클립 생성 중 오류가 발생했습니다."}), 500


@clips_bp.route('/spots/<string:spot_id>/clips', methods=['GET'])
@jwt_required(optional=True)
def get_clips(spot_id: str):
    clip_service = current_app.services['clips']
    user_id = get_jwt_identity()
    try:
        clips = clip_service.get_clips_for_spot(spot_id, user_id)
        return jsonify({"clips": ClipResponseSchema(many=True).dump(clips)}), 200
    except Exception as e:
        logging.error(f"클립 목록 조회 중 오류 발생 (spot_id: {spot_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "클립 목록 조회 중 오류가 발생했습니다."}), 500


@clips_bp.route('/clips/<string:clip_id>/like', methods=['POST'])
@jwt_required()
def toggle_clip_like(clip_id: str):
    """클립 좋아요를 토글합니다."""
    clip_service = current_app.services['clips']
    user_id = get_jwt_identity()
    try:
        result = clip_service.toggle_clip_like(user_id, clip_id)
        return jsonify(ClipLikeResponseSchema().dump(result)), 200
    except LookupError as e:
        return jsonify({"error_code": "CLIP_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"클립 좋아요 처리 중 오류 발생 (clip_id: {clip_id}): {e}", exc_info=True)
        return jsonify({"error_code": "LIKE_FAILED", "message": "좋아요 처리 중 오류가 발생했습니다."}), 500

# skatespot/api/notifications/routes.py
import logging
from flask import Blueprint, request, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from skatespot.api.notifications.schemas import ShareSpotSchema, NotificationResponseSchema

notifications_bp = Blueprint('notifications_bp', __name__)

@notifications_bp.route('/spots/<string:spot_id>/share', methods=['POST'])
@jwt_required()
def share_spot(spot_id: str):
    """
    선택한 친구들에게 스팟을 공유합니다.
    - 친구가 아닌 사용자는 제외되며, 실제로 알림을 받은 친구 ID 목록을 반환합니다.
    """
    notification_service = current_app.services['notifications']
    user_id = get_jwt_identity()
    try:
        data = ShareSpotSchema().load(request.get_json() or {})
        shared_with = notification_service.share_spot(user_id, spot_id, data['spotName'], data['friendIds'])
        return jsonify({"spotId": spot_id, "sharedWith": shared_with}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except LookupError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"error_code": "INVALID_SHARE_TARGET", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"스팟 공유 중 오류 발생 (spot_id: {spot_id}): {e}", exc_info=True)
        return jsonify({"error_code": "SHARE_FAILED", "message": "스팟 공유 중 오류가 발생했습니다."}), 500


@notifications_bp.route('/notifications', methods=['GET'])
@jwt_required()
def list_notifications():
    notification_service = current_app.services['notifications']
    user_id = get_jwt_identity()
    limit = request.args.get('limit', 20, type=int)
    try:
        notifications = notification_service.list_notifications(user_id, limit=max(1, min(limit, 100)))
        return jsonify({"notifications": NotificationResponseSchema(many=True).dump(notifications)}), 200
    except Exception as e:
        logging.error(f"알림 목록 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "알림 목록 조회 중 오류가 발생했습니다."}), 500


@notifications_bp.route('/notifications/<string:notification_id>/read', methods=['PATCH'])
@jwt_required()
def mark_notification_as_read(notification_id: str):
    notification_service = current_app.services['notifications']
    user_id = get_jwt_identity()
    try:
        notification_service.mark_as_read(user_id, notification_id)
        return Response(status=204)
    except LookupError as e:
        return jsonify({"error_code": "NOTIFICATION_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403

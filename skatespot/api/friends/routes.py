# skatespot/api/friends/routes.py
import logging
from flask import Blueprint, jsonify, Response, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity

from skatespot.api.users.schemas import FriendEntrySchema, FriendRequestSchema

friends_bp = Blueprint('friends_bp', __name__)


@friends_bp.route('', methods=['GET'])
@jwt_required()
def list_friends():
    """내 친구 목록을 수락 순서대로 조회합니다."""
    friend_service = current_app.services['friends']
    user_id = get_jwt_identity()
    try:
        friends = friend_service.list_friends(user_id)
        return jsonify({"friends": FriendEntrySchema(many=True).dump(friends)}), 200
    except LookupError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404


@friends_bp.route('/requests', methods=['GET'])
@jwt_required()
def list_friend_requests():
    """내가 받은 대기 중인 친구 요청 목록을 조회합니다."""
    friend_service = current_app.services['friends']
    user_id = get_jwt_identity()
    try:
        requests = friend_service.list_friend_requests(user_id)
        return jsonify({"friendRequests": FriendRequestSchema(many=True).dump(requests)}), 200
    except LookupError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404


@friends_bp.route('/requests/<string:target_id>', methods=['POST'])
@jwt_required()
def send_friend_request(target_id: str):
    """
    대상 사용자에게 친구 요청을 보냅니다.
    - 새 요청이면 201, 이미 대기 중인 요청이 있으면 200을 반환합니다.
    """
    friend_service = current_app.services['friends']
    user_id = get_jwt_identity()
    try:
        created = friend_service.send_friend_request(user_id, target_id)
        return jsonify({"created": created}), 201 if created else 200
    except LookupError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except ValueError as e:
        return jsonify({"error_code": "INVALID_FRIEND_REQUEST", "message": str(e)}), 400
    except Exception as e:
        logging.error(f"친구 요청 전송 중 오류 발생 ({user_id} -> {target_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FRIEND_REQUEST_FAILED", "message": "친구 요청 전송 중 오류가 발생했습니다."}), 500


@friends_bp.route('/requests/<string:requester_id>/accept', methods=['POST'])
@jwt_required()
def accept_friend_request(requester_id: str):
    friend_service = current_app.services['friends']
    user_id = get_jwt_identity()
    try:
        new_friend = friend_service.accept_friend_request(user_id, requester_id)
        return jsonify(FriendEntrySchema().dump(new_friend)), 200
    except LookupError as e:
        return jsonify({"error_code": "FRIEND_REQUEST_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"친구 요청 수락 중 오류 발생 ({requester_id} -> {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "ACCEPT_FAILED", "message": "친구 요청 수락 중 오류가 발생했습니다."}), 500


@friends_bp.route('/requests/<string:requester_id>/reject', methods=['POST'])
@jwt_required()
def reject_friend_request(requester_id: str):
    friend_service = current_app.services['friends']
    user_id = get_jwt_identity()
    try:
        friend_service.reject_friend_request(user_id, requester_id)
        return Response(status=204)
    except LookupError as e:
        return jsonify({"error_code": "FRIEND_REQUEST_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"친구 요청 거절 중 오류 발생 ({requester_id} -> {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "REJECT_FAILED", "message": "친구 요청 거절 중 오류가 발생했습니다."}), 500


@friends_bp.route('/<string:friend_id>', methods=['DELETE'])
@jwt_required()
def remove_friend(friend_id: str):
    """친구를 삭제합니다. 상대방 목록에서도 함께 제거됩니다."""
    friend_service = current_app.services['friends']
    user_id = get_jwt_identity()
    try:
        friend_service.remove_friend(user_id, friend_id)
        return Response(status=204)
    except LookupError as e:
        return jsonify({"error_code": "FRIEND_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"친구 삭제 중 오류 발생 ({user_id} -x- {friend_id}): {e}", exc_info=True)
        return jsonify({"error_code": "REMOVE_FRIEND_FAILED", "message": "친구 삭제 중 오류가 발생했습니다."}), 500

# skatespot/api/spots/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from skatespot.api.spots.schemas import SpotCreateSchema, SpotVideoSchema, EventCreateSchema
from skatespot.services.spot_api_client import SpotApiError
from skatespot.utils.datetime_utils import DateTimeUtils

spots_bp = Blueprint('spots_bp', __name__)


def _spot_api_error_response(e: SpotApiError):
    # 스팟 백엔드의 404는 그대로 전달하고 나머지는 502로 응답합니다.
    if e.status_code == 404:
        return jsonify({"error_code": "RESOURCE_NOT_FOUND", "message": str(e)}), 404
    return jsonify({"error_code": "SPOT_API_UNAVAILABLE", "message": str(e)}), 502


@spots_bp.route('/spots', methods=['GET'])
@jwt_required(optional=True)
def list_spots():
    """
    스팟 목록을 조회합니다.
    - latitude/longitude가 주어지면 주변 스팟만 조회합니다. (maxDistance 기본 5000m)
    """
    spot_api = current_app.services['spot_api']
    latitude = request.args.get('latitude', type=float)
    longitude = request.args.get('longitude', type=float)
    max_distance = request.args.get('maxDistance', 5000, type=int)
    try:
        if latitude is not None and longitude is not None:
            spots = spot_api.get_nearby_spots(latitude, longitude, max_distance)
        else:
            spots = spot_api.get_all_spots()
        return jsonify({"spots": spots or []}), 200
    except SpotApiError as e:
        return _spot_api_error_response(e)


@spots_bp.route('/spots/<string:spot_id>', methods=['GET'])
@jwt_required(optional=True)
def get_spot(spot_id: str):
    spot_api = current_app.services['spot_api']
    try:
        return jsonify(spot_api.get_spot(spot_id)), 200
    except ValueError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "message": str(e)}), 400
    except SpotApiError as e:
        return _spot_api_error_response(e)


@spots_bp.route('/spots', methods=['POST'])
@jwt_required()
def create_spot():
    """새 스팟을 등록합니다. 성공 시 백엔드가 돌려준 스팟을 201로 반환합니다."""
    spot_api = current_app.services['spot_api']
    user_id = get_jwt_identity()
    try:
        data = SpotCreateSchema().load(request.get_json() or {})
        spot = spot_api.create_spot(data)
        logging.info(f"스팟 등록 완료 (user_id: {user_id}, name: {data['name']})")
        return jsonify(spot), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except SpotApiError as e:
        return _spot_api_error_response(e)


@spots_bp.route('/spots/<string:spot_id>/videos', methods=['POST'])
@jwt_required()
def add_video_to_spot(spot_id: str):
    """
    업로드가 끝난 영상을 스팟에 추가합니다.
    - 작성자 이름은 프로필의 displayName, uploadedBy는 현재 사용자 ID로 채웁니다.
    """
    spot_api = current_app.services['spot_api']
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        data = SpotVideoSchema().load(request.get_json() or {})
        profile = user_service.fetch_user_profile_with_cache(user_id) or {}
        video_data = {
            **data,
            "userName": profile.get('displayName') or (profile.get('email') or "").split('@')[0],
            "uploadedBy": user_id,
        }
        return jsonify(spot_api.add_video_to_spot(spot_id, video_data)), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except SpotApiError as e:
        return _spot_api_error_response(e)


@spots_bp.route('/spots/<string:spot_id>/videos/<string:video_id>/like', methods=['POST'])
@jwt_required()
def like_spot_video(spot_id: str, video_id: str):
    spot_api = current_app.services['spot_api']
    try:
        return jsonify(spot_api.like_video(spot_id, video_id)), 200
    except SpotApiError as e:
        return _spot_api_error_response(e)


@spots_bp.route('/events', methods=['GET'])
@jwt_required(optional=True)
def list_events():
    """
    이벤트 목록을 조회합니다.
    - start/end(ISO 8601)가 모두 주어지면 기간으로 조회하며, UTC 'Z' 형식으로 맞춰 전달합니다.
    """
    spot_api = current_app.services['spot_api']
    start = request.args.get('start')
    end = request.args.get('end')
    try:
        if start and end:
            start_at = DateTimeUtils.parse_iso_datetime(start)
            end_at = DateTimeUtils.parse_iso_datetime(end)
            if start_at > end_at:
                raise ValueError("start는 end보다 늦을 수 없습니다.")
            events = spot_api.get_events_by_date_range(
                DateTimeUtils.to_iso_string(start_at), DateTimeUtils.to_iso_string(end_at)
            )
        else:
            events = spot_api.get_all_events()
        return jsonify({"events": events or []}), 200
    except ValueError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "message": str(e)}), 400
    except SpotApiError as e:
        logging.warning(f"이벤트 목록 조회 실패: {e}")
        return _spot_api_error_response(e)


@spots_bp.route('/events/<string:event_id>', methods=['GET'])
@jwt_required(optional=True)
def get_event(event_id: str):
    spot_api = current_app.services['spot_api']
    try:
        return jsonify(spot_api.get_event(event_id)), 200
    except SpotApiError as e:
        return _spot_api_error_response(e)


@spots_bp.route('/events', methods=['POST'])
@jwt_required()
def create_event():
    """새 이벤트를 등록합니다. 주최자(userId)는 현재 사용자입니다."""
    spot_api = current_app.services['spot_api']
    user_id = get_jwt_identity()
    try:
        data = EventCreateSchema().load(request.get_json() or {})
        data['date'] = DateTimeUtils.to_iso_string(data['date'])
        data['userId'] = user_id
        event = spot_api.create_event(data)
        logging.info(f"이벤트 등록 완료 (user_id: {user_id}, title: {data['title']})")
        return jsonify(event), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except SpotApiError as e:
        return _spot_api_error_response(e)

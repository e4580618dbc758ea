# skatespot/services/spot_api_client.py
import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
from flask import Flask

class SpotApiError(Exception):
    """스팟 REST 백엔드 호출이 실패했을 때 발생합니다."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class SpotApiClient:
    """
    스팟/이벤트 데이터를 제공하는 REST 백엔드와의 통신을 담당하는 서비스 클래스입니다.
    실제 base URL과 타임아웃은 init_app을 통해 설정됩니다.
    """

    def __init__(self, base_url: Optional[str] = None, timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = (base_url or "").rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def init_app(self, app: Flask):
        """Flask 앱 초기화 과정에서 호출되어 base URL과 타임아웃을 설정합니다."""
        base_url = app.config.get('SPOT_API_BASE_URL')
        if not base_url:
            raise ValueError("SPOT_API_BASE_URL 설정이 .env 또는 설정 파일에 필요합니다.")
        self.base_url = base_url.rstrip('/')
        self.timeout = app.config.get('SPOT_API_TIMEOUT', self.timeout)
        logging.info(f"SpotApiClient: {self.base_url} 로 초기화되었습니다.")

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
            response.raise_for_status()
            return response.json() if response.content else None
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logging.error(f"스팟 API 오류 응답 ({method} {url}): status={status}, body={e.response.text if e.response is not None else ''}")
            raise SpotApiError(f"스팟 API 요청 실패: {method} {path}", status_code=status) from e
        except requests.RequestException as e:
            logging.error(f"스팟 API 응답 없음 ({method} {url}): {e}", exc_info=True)
            raise SpotApiError(f"스팟 API에 연결할 수 없습니다: {method} {path}") from e

    # --- spots ---
    def get_all_spots(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/spots")

    def get_nearby_spots(self, latitude: float, longitude: float, max_distance: int = 5000) -> List[Dict[str, Any]]:
        params = {"latitude": latitude, "longitude": longitude, "maxDistance": max_distance}
        return self._request("GET", "/spots/nearby", params=params)

    def get_spot(self, spot_id: str) -> Dict[str, Any]:
        spot_id = str(spot_id).strip()
        if not spot_id:
            raise ValueError("spot_id가 필요합니다.")
        return self._request("GET", f"/spots/{quote(spot_id, safe='')}")

    def create_spot(self, spot_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/spots", json=spot_data)

    def add_video_to_spot(self, spot_id: str, video_data: Dict[str, Any]) -> Dict[str, Any]:
        """스팟에 영상 정보를 추가합니다. userName이 없으면 'Anonymous'로 보냅니다."""
        if not spot_id:
            raise ValueError("spot_id가 필요합니다.")
        if not video_data.get('userName'):
            logging.warning(f"userName 없이 영상 추가 요청 (spot_id: {spot_id})")

        payload = {
            "url": video_data.get('url'),
            "thumbnail": video_data.get('thumbnail') or video_data.get('url'),
            "caption": video_data.get('caption') or "",
            "description": video_data.get('description') or "",
            "userName": video_data.get('userName') or "Anonymous",
            "uploadedBy": video_data.get('uploadedBy') or "unknown",
        }
        return self._request("POST", f"/spots/{spot_id}/videos", json=payload)

    def like_video(self, spot_id: str, video_id: str) -> Dict[str, Any]:
        if not spot_id or not video_id:
            raise ValueError("spot_id와 video_id가 모두 필요합니다.")
        return self._request("POST", f"/spots/{spot_id}/videos/{video_id}/like")

    # --- events ---
    def get_all_events(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/events")

    def get_events_by_date_range(self, start: str, end: str) -> List[Dict[str, Any]]:
        return self._request("GET", "/events/range", params={"start": start, "end": end})

    def get_event(self, event_id: str) -> Dict[str, Any]:
        return self._request("GET", f"/events/{quote(str(event_id), safe='')}")

    def create_event(self, event_data: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/events", json=event_data)


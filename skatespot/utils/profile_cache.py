# skatespot/utils/profile_cache.py
"""
사용자 프로필 조회 결과를 메모리에 보관하는 캐시.

TTL이 지난 항목은 무시되고, 최대 크기를 넘으면 가장 오래 사용되지 않은 항목부터 제거됩니다.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60
DEFAULT_MAX_SIZE = 1024


class ProfileCache:
    """user_id -> 프로필 딕셔너리를 보관하는 스레드 안전 TTL/LRU 캐시"""

    def __init__(self, ttl_seconds: float = DEFAULT_TTL_SECONDS, max_size: int = DEFAULT_MAX_SIZE,
                 timer: Callable[[], float] = time.monotonic):
        self._cache = TTLCache(maxsize=max_size, ttl=ttl_seconds, timer=timer)
        self._lock = threading.Lock()

    def get(self, user_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._cache.get(user_id)

    def set(self, user_id: str, profile: Dict[str, Any]) -> None:
        with self._lock:
            self._cache[user_id] = profile

    def invalidate(self, *user_ids: str) -> None:
        """프로필이 변경된 사용자들의 캐시 항목을 제거합니다."""
        with self._lock:
            for user_id in user_ids:
                self._cache.pop(user_id, None)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def get_or_load(self, user_id: str, loader: Callable[[str], Optional[Dict[str, Any]]]) -> Optional[Dict[str, Any]]:
        """
        캐시에 유효한 항목이 있으면 그대로 반환하고, 없으면 loader로 조회한 결과를 저장합니다.
        loader가 None을 반환하면(프로필 없음) 캐시에 저장하지 않습니다.
        """
        if not user_id:
            return None

        cached = self.get(user_id)
        if cached is not None:
            return cached

        profile = loader(user_id)
        if profile is not None:
            self.set(user_id, profile)
            logger.debug(f"프로필 캐시 저장 (user_id: {user_id})")
        return profile

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

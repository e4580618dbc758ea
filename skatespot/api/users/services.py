# skatespot/api/users/services.py
import logging
from typing import Optional, Dict, Any, List
from firebase_admin import firestore

from skatespot.models.user_profile import UserProfile, build_search_prefixes, normalize_search_term
from skatespot.utils.datetime_utils import DateTimeUtils
from skatespot.utils.profile_cache import ProfileCache

class UserService:
    """
    사용자 프로필 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 프로필 지연 생성, 캐시 조회, 사용자 검색을 담당합니다.
    - ProfileCache는 의존성 주입을 통해 받습니다.
    """
    def __init__(self, profile_cache: ProfileCache, search_limit: int = 20):
        self.db = firestore.client()
        self.users_ref = self.db.collection('users')
        self.profile_cache = profile_cache
        self.search_limit = search_limit

    def get_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        사용자 ID로 프로필 문서를 조회합니다.
        :return: 프로필 딕셔너리 또는 None
        """
        if not user_id:
            return None
        try:
            doc = self.users_ref.document(user_id).get()
            if doc.exists:
                return DateTimeUtils.from_firestore(doc.to_dict())
            return None
        except Exception as e:
            logging.error(f"프로필 조회 실패 (user_id: {user_id}): {e}", exc_info=True)
            raise

    def get_or_create_profile(self, user_id: str, email: Optional[str] = None, display_name: Optional[str] = None) -> Dict[str, Any]:
        """
        프로필이 있으면 반환하고, 없으면 기본값으로 생성한 뒤 반환합니다.
        인증된 사용자가 처음 접근할 때 호출됩니다.
        """
        profile = self.get_profile(user_id)
        if profile is not None:
            return profile

        logging.info(f"프로필이 없어 새로 생성합니다 (user_id: {user_id})")
        new_profile = UserProfile.new(display_name or "", email).to_firestore()
        self.users_ref.document(user_id).set(new_profile)
        return new_profile

    def fetch_user_profile_with_cache(self, user_id: str) -> Optional[Dict[str, Any]]:
        """
        캐시를 거쳐 프로필을 조회합니다. TTL 이내의 재조회는 Firestore를 읽지 않습니다.
        조회 오류는 None으로 처리합니다. (화면 보조 정보 용도)
        """
        try:
            return self.profile_cache.get_or_load(user_id, self.get_profile)
        except Exception as e:
            logging.error(f"캐시 프로필 조회 실패 (user_id: {user_id}): {e}")
            return None

    def get_public_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """다른 사용자에게 보여줄 공개 프로필 정보를 반환합니다."""
        profile = self.fetch_user_profile_with_cache(user_id)
        if profile is None:
            return None
        return {
            "id": user_id,
            "displayName": profile.get('displayName', ""),
            "profilePhoto": profile.get('profilePhoto'),
            "friendCount": len(profile.get('friends', [])),
            "favoriteCount": len(profile.get('favoriteSpots', [])),
        }

    def update_profile_photo(self, user_id: str, photo_url: str) -> Optional[Dict[str, Any]]:
        """사용자의 프로필 사진 URL을 업데이트합니다."""
        try:
            user_ref = self.users_ref.document(user_id)
            if not user_ref.get().exists:
                return None
            user_ref.update({'profilePhoto': photo_url})
            self.profile_cache.invalidate(user_id)
            return self.get_profile(user_id)
        except Exception as e:
            logging.error(f"프로필 사진 업데이트 실패 (user_id: {user_id}): {e}", exc_info=True)
            raise

    def update_display_name(self, user_id: str, display_name: str) -> None:
        """표시 이름과 검색 색인을 함께 갱신합니다."""
        user_ref = self.users_ref.document(user_id)
        doc = user_ref.get()
        email = doc.to_dict().get('email') if doc.exists else None
        user_ref.set({
            'displayName': display_name,
            'searchPrefixes': build_search_prefixes(display_name, email),
        }, merge=True)
        self.profile_cache.invalidate(user_id)

    def search_users(self, current_user_id: str, search_term: str) -> List[Dict[str, Any]]:
        """
        표시 이름/이메일로 사용자를 검색합니다. (대소문자 무시, 단어 접두어 일치)
        'searchPrefixes' 색인 필드에 대한 array_contains 쿼리를 사용하며 전체 컬렉션을 읽지 않습니다.

        :return: [{id, displayName, profilePhoto, isFriend, requestSent}, ...]
        """
        term = normalize_search_term(search_term)
        if not term:
            return []

        try:
            me = self.get_profile(current_user_id) or {}
            friend_ids = {f.get('userId') for f in me.get('friends', [])}

            # 자기 자신이 결과에 포함될 수 있으므로 1개 더 조회합니다.
            query = self.users_ref.where('searchPrefixes', 'array_contains', term).limit(self.search_limit + 1)

            results = []
            for doc in query.stream():
                if doc.id == current_user_id:
                    continue
                user_data = doc.to_dict()
                request_sent = any(req.get('userId') == current_user_id for req in user_data.get('friendRequests', []))
                results.append({
                    "id": doc.id,
                    "displayName": user_data.get('displayName', ""),
                    "profilePhoto": user_data.get('profilePhoto'),
                    "isFriend": doc.id in friend_ids,
                    "requestSent": request_sent,
                })
            return results[:self.search_limit]
        except Exception as e:
            logging.error(f"사용자 검색 실패 (term: {search_term}): {e}", exc_info=True)
            raise

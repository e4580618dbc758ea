# skatespot/api/favorites/services.py
import logging
from dataclasses import asdict
from firebase_admin import firestore
from typing import Dict, Any, List

from skatespot.models.user_profile import FavoriteSpot
from skatespot.utils.datetime_utils import DateTimeUtils
from skatespot.utils.profile_cache import ProfileCache


def _spot_id_of(entry: Any) -> str:
    # 초기 버전에서 저장된 문자열 항목도 함께 처리합니다.
    return entry if isinstance(entry, str) else entry.get('spotId')


class FavoriteService:
    """사용자의 즐겨찾기 스팟(favoriteSpots 배열)을 관리하는 서비스 클래스"""

    def __init__(self, profile_cache: ProfileCache):
        self.db = firestore.client()
        self.users_ref = self.db.collection('users')
        self.profile_cache = profile_cache

    def add_favourite_spot(self, user_id: str, spot_id: str, spot_name: str = "", spot_type: str = "") -> bool:
        """
        스팟을 즐겨찾기에 추가합니다. 이미 추가된 spotId면 아무것도 쓰지 않습니다.
        :return: 새로 추가되었으면 True
        """
        transaction = self.db.transaction()

        @firestore.transactional
        def _add_in_transaction(transaction, user_id, spot_id):
            user_ref = self.users_ref.document(user_id)
            snapshot = user_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise LookupError("사용자 프로필을 찾을 수 없습니다.")

            favorites = snapshot.to_dict().get('favoriteSpots', [])
            if any(_spot_id_of(f) == spot_id for f in favorites):
                return False

            new_favorite = FavoriteSpot(spotId=spot_id, spotName=spot_name or "", spotType=spot_type or "")
            transaction.update(user_ref, {
                'favoriteSpots': favorites + [DateTimeUtils.for_firestore(asdict(new_favorite))]
            })
            return True

        try:
            added = _add_in_transaction(transaction, user_id, spot_id)
        except LookupError:
            raise
        except Exception as e:
            logging.error(f"즐겨찾기 추가 실패 (user_id: {user_id}, spot_id: {spot_id}): {e}", exc_info=True)
            raise

        self.profile_cache.invalidate(user_id)
        return added

    def remove_favourite_spot(self, user_id: str, spot_id: str) -> bool:
        """
        spotId가 일치하는 즐겨찾기 항목을 모두 제거합니다.
        :return: 제거된 항목이 있으면 True
        """
        transaction = self.db.transaction()

        @firestore.transactional
        def _remove_in_transaction(transaction, user_id, spot_id):
            user_ref = self.users_ref.document(user_id)
            snapshot = user_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise LookupError("사용자 프로필을 찾을 수 없습니다.")

            favorites = snapshot.to_dict().get('favoriteSpots', [])
            remaining = [f for f in favorites if _spot_id_of(f) != spot_id]
            if len(remaining) == len(favorites):
                return False
            transaction.update(user_ref, {'favoriteSpots': remaining})
            return True

        try:
            removed = _remove_in_transaction(transaction, user_id, spot_id)
        except LookupError:
            raise
        except Exception as e:
            logging.error(f"즐겨찾기 삭제 실패 (user_id: {user_id}, spot_id: {spot_id}): {e}", exc_info=True)
            raise

        self.profile_cache.invalidate(user_id)
        return removed

    def is_spot_favourited(self, user_id: str, spot_id: str) -> bool:
        """프로필의 favoriteSpots에 해당 spotId가 있는지 확인합니다."""
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            return False
        return any(_spot_id_of(f) == spot_id for f in doc.to_dict().get('favoriteSpots', []))

    def list_favourite_spots(self, user_id: str) -> List[Dict[str, Any]]:
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            raise LookupError("사용자 프로필을 찾을 수 없습니다.")
        favorites = [FavoriteSpot.from_value(f) for f in doc.to_dict().get('favoriteSpots', [])]
        return [DateTimeUtils.from_firestore(asdict(f)) for f in favorites]

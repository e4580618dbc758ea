# skatespot/api/friends/services.py

import logging
from dataclasses import asdict
from firebase_admin import firestore
from typing import Optional, Dict, Any, List

from skatespot.models.notification import NotificationType
from skatespot.models.user_profile import FriendEntry, FriendRequest
from skatespot.services.notification_service import NotificationService
from skatespot.utils.datetime_utils import DateTimeUtils
from skatespot.utils.profile_cache import ProfileCache


def _display_name(profile: Dict[str, Any]) -> str:
    return profile.get('displayName') or (profile.get('email') or "").split('@')[0]


class FriendService:
    """
    친구 관계 관련 비즈니스 로직을 담당하는 서비스 클래스.

    상태 흐름: 요청 없음 -> 대기(pending, 받는 사람의 friendRequests) -> 수락(양쪽 friends) / 거절(요청 삭제)
    - 두 사용자 문서를 함께 변경하는 작업(수락, 친구 삭제)은 하나의 트랜잭션에서 처리합니다.
    - 요청/친구 항목은 트랜잭션 안에서 새로 읽은 문서의 userId로 찾습니다.
    """
    def __init__(self, notification_service: NotificationService, profile_cache: ProfileCache):
        """서비스 초기화 시 Firestore 클라이언트 및 컬렉션 참조를 설정합니다."""
        self.db = firestore.client()
        self.users_ref = self.db.collection('users')
        self.notification_service = notification_service
        self.profile_cache = profile_cache

    def send_friend_request(self, sender_id: str, target_id: str) -> bool:
        """
        대상 사용자의 friendRequests 배열에 대기 중인 요청을 추가합니다.
        같은 발신자의 대기 요청이 이미 있으면 추가하지 않습니다.

        :return: 새 요청이 생성되었으면 True, 이미 대기 중이면 False
        """
        if sender_id == target_id:
            raise ValueError("자기 자신에게 친구 요청을 보낼 수 없습니다.")

        transaction = self.db.transaction()

        @firestore.transactional
        def _send_in_transaction(transaction, sender_id, target_id):
            sender_ref = self.users_ref.document(sender_id)
            target_ref = self.users_ref.document(target_id)
            sender_snapshot = sender_ref.get(transaction=transaction)
            target_snapshot = target_ref.get(transaction=transaction)

            if not target_snapshot.exists:
                raise LookupError("친구 요청을 받을 사용자를 찾을 수 없습니다.")
            if not sender_snapshot.exists:
                raise LookupError("요청을 보내는 사용자의 프로필을 찾을 수 없습니다.")

            target_data = target_snapshot.to_dict()
            if any(f.get('userId') == sender_id for f in target_data.get('friends', [])):
                raise ValueError("이미 친구인 사용자입니다.")

            pending = target_data.get('friendRequests', [])
            if any(r.get('userId') == sender_id for r in pending):
                return False

            new_request = FriendRequest(userId=sender_id, displayName=_display_name(sender_snapshot.to_dict()))
            transaction.update(target_ref, {
                'friendRequests': pending + [DateTimeUtils.for_firestore(asdict(new_request))]
            })
            return True

        try:
            created = _send_in_transaction(transaction, sender_id, target_id)
        except (LookupError, ValueError):
            raise
        except Exception as e:
            logging.error(f"친구 요청 전송 실패 ({sender_id} -> {target_id}): {e}", exc_info=True)
            raise

        if created:
            self.profile_cache.invalidate(target_id)
            self.notification_service.create_notification(
                recipient_id=target_id, sender_id=sender_id,
                n_type=NotificationType.FRIEND_REQUEST, target_id=sender_id
            )
            logging.info(f"친구 요청 전송 완료: {sender_id} -> {target_id}")
        else:
            logging.info(f"이미 대기 중인 친구 요청이 있어 건너뜁니다: {sender_id} -> {target_id}")
        return created

    def accept_friend_request(self, accepter_id: str, requester_id: str) -> Dict[str, Any]:
        """
        받은 친구 요청을 수락합니다.
        - 수락한 사람과 요청한 사람의 friends 배열에 서로의 항목을 추가합니다.
        - 수락한 사람의 friendRequests에서 해당 요청을 제거합니다.
        두 문서의 변경은 하나의 트랜잭션으로 커밋되므로 한쪽만 친구가 되는 상태가 생기지 않습니다.

        :return: 수락한 사람의 friends 배열에 추가된 항목
        """
        transaction = self.db.transaction()

        @firestore.transactional
        def _accept_in_transaction(transaction, accepter_id, requester_id):
            accepter_ref = self.users_ref.document(accepter_id)
            requester_ref = self.users_ref.document(requester_id)
            accepter_snapshot = accepter_ref.get(transaction=transaction)
            requester_snapshot = requester_ref.get(transaction=transaction)

            if not accepter_snapshot.exists:
                raise LookupError("사용자 프로필을 찾을 수 없습니다.")
            if not requester_snapshot.exists:
                raise LookupError("친구 요청을 보낸 사용자를 찾을 수 없습니다.")

            accepter_data = accepter_snapshot.to_dict()
            requester_data = requester_snapshot.to_dict()

            requests = accepter_data.get('friendRequests', [])
            remaining = [r for r in requests if r.get('userId') != requester_id]
            if len(remaining) == len(requests):
                raise LookupError("친구 요청을 찾을 수 없습니다.")

            now = DateTimeUtils.now()
            entry_for_accepter = asdict(FriendEntry(requester_id, _display_name(requester_data), now))
            entry_for_requester = asdict(FriendEntry(accepter_id, _display_name(accepter_data), now))

            accepter_friends = [f for f in accepter_data.get('friends', []) if f.get('userId') != requester_id]
            requester_friends = [f for f in requester_data.get('friends', []) if f.get('userId') != accepter_id]
            # 서로 요청을 보낸 경우 반대 방향의 대기 요청도 함께 정리합니다.
            requester_requests = [r for r in requester_data.get('friendRequests', []) if r.get('userId') != accepter_id]

            transaction.update(accepter_ref, {
                'friends': accepter_friends + [entry_for_accepter],
                'friendRequests': remaining,
            })
            transaction.update(requester_ref, {
                'friends': requester_friends + [entry_for_requester],
                'friendRequests': requester_requests,
            })
            return entry_for_accepter

        try:
            new_friend = _accept_in_transaction(transaction, accepter_id, requester_id)
        except LookupError:
            raise
        except Exception as e:
            logging.error(f"친구 요청 수락 실패 ({requester_id} -> {accepter_id}): {e}", exc_info=True)
            raise

        self.profile_cache.invalidate(accepter_id, requester_id)
        self.notification_service.create_notification(
            recipient_id=requester_id, sender_id=accepter_id,
            n_type=NotificationType.FRIEND_ACCEPTED, target_id=accepter_id
        )
        logging.info(f"친구 요청 수락 완료: {requester_id} <-> {accepter_id}")
        return new_friend

    def reject_friend_request(self, accepter_id: str, requester_id: str) -> None:
        """받은 친구 요청을 거절합니다. 요청한 사람에게는 알리지 않습니다."""
        transaction = self.db.transaction()

        @firestore.transactional
        def _reject_in_transaction(transaction, accepter_id, requester_id):
            accepter_ref = self.users_ref.document(accepter_id)
            accepter_snapshot = accepter_ref.get(transaction=transaction)
            if not accepter_snapshot.exists:
                raise LookupError("사용자 프로필을 찾을 수 없습니다.")

            requests = accepter_snapshot.to_dict().get('friendRequests', [])
            remaining = [r for r in requests if r.get('userId') != requester_id]
            if len(remaining) == len(requests):
                raise LookupError("친구 요청을 찾을 수 없습니다.")

            transaction.update(accepter_ref, {'friendRequests': remaining})

        try:
            _reject_in_transaction(transaction, accepter_id, requester_id)
        except LookupError:
            raise
        except Exception as e:
            logging.error(f"친구 요청 거절 실패 ({requester_id} -> {accepter_id}): {e}", exc_info=True)
            raise

        self.profile_cache.invalidate(accepter_id)
        logging.info(f"친구 요청 거절 완료: {requester_id} -> {accepter_id}")

    def remove_friend(self, user_id: str, friend_id: str) -> None:
        """
        친구를 삭제합니다. 상대방 문서의 friends 배열에서도 함께 제거합니다.
        상대방 문서가 없으면 내 목록에서만 제거합니다.
        """
        transaction = self.db.transaction()

        @firestore.transactional
        def _remove_in_transaction(transaction, user_id, friend_id):
            user_ref = self.users_ref.document(user_id)
            friend_ref = self.users_ref.document(friend_id)
            user_snapshot = user_ref.get(transaction=transaction)
            friend_snapshot = friend_ref.get(transaction=transaction)

            if not user_snapshot.exists:
                raise LookupError("사용자 프로필을 찾을 수 없습니다.")

            friends = user_snapshot.to_dict().get('friends', [])
            remaining = [f for f in friends if f.get('userId') != friend_id]
            if len(remaining) == len(friends):
                raise LookupError("친구 목록에서 해당 사용자를 찾을 수 없습니다.")

            transaction.update(user_ref, {'friends': remaining})

            if not friend_snapshot.exists:
                logging.warning(f"상대방 프로필이 없어 내 목록에서만 삭제합니다 (friend_id: {friend_id})")
                return
            their_friends = friend_snapshot.to_dict().get('friends', [])
            their_remaining = [f for f in their_friends if f.get('userId') != user_id]
            if len(their_remaining) != len(their_friends):
                transaction.update(friend_ref, {'friends': their_remaining})

        try:
            _remove_in_transaction(transaction, user_id, friend_id)
        except LookupError:
            raise
        except Exception as e:
            logging.error(f"친구 삭제 실패 ({user_id} -x- {friend_id}): {e}", exc_info=True)
            raise

        self.profile_cache.invalidate(user_id, friend_id)
        logging.info(f"친구 삭제 완료: {user_id} -x- {friend_id}")

    def _load_profile(self, user_id: str) -> Dict[str, Any]:
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            raise LookupError("사용자 프로필을 찾을 수 없습니다.")
        return DateTimeUtils.from_firestore(doc.to_dict())

    def list_friends(self, user_id: str) -> List[Dict[str, Any]]:
        """친구 목록을 수락 순서대로 반환합니다. 각 항목에 친구의 프로필 사진을 붙입니다."""
        friends = self._load_profile(user_id).get('friends', [])
        for friend in friends:
            friend_profile = self.profile_cache.get_or_load(friend.get('userId'), self._find_profile)
            friend['profilePhoto'] = friend_profile.get('profilePhoto') if friend_profile else None
        return friends

    def list_friend_requests(self, user_id: str) -> List[Dict[str, Any]]:
        return self._load_profile(user_id).get('friendRequests', [])

    def _find_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        doc = self.users_ref.document(user_id).get()
        return doc.to_dict() if doc.exists else None

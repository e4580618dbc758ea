# skatespot/services/notification_service.py
import logging
import uuid
from dataclasses import asdict
from firebase_admin import firestore
from typing import Optional, List, Dict, Any

from skatespot.models.notification import Notification, NotificationType
from skatespot.utils.datetime_utils import DateTimeUtils

class NotificationService:
    """
    알림 관련 비즈니스 로직을 담당하는 공용 서비스 클래스.
    친구 요청/수락 알림과 스팟 공유 알림을 'notifications' 컬렉션에 저장합니다.
    """
    def __init__(self):
        self.db = firestore.client()
        self.notifications_ref = self.db.collection('notifications')
        self.users_ref = self.db.collection('users')

    def _sender_info(self, sender_id: str) -> Optional[Dict[str, Any]]:
        sender_doc = self.users_ref.document(sender_id).get()
        if not sender_doc.exists:
            return None
        sender_data = sender_doc.to_dict()
        display_name = sender_data.get('displayName') or (sender_data.get('email') or "").split('@')[0]
        return {"userId": sender_id, "displayName": display_name}

    def create_notification(self, recipient_id: str, sender_id: str, n_type: NotificationType, target_id: str, target_summary: Optional[str] = None) -> Optional[str]:
        """
        알림을 생성하여 Firestore에 저장하고 문서 ID를 반환합니다.
        - 자기 자신에게 보내는 알림은 생성하지 않습니다.
        - 알림 생성 실패는 호출한 작업을 실패시키지 않습니다. (로그만 남김)

        :param recipient_id: 알림을 받을 사용자 ID
        :param sender_id: 알림을 유발한 사용자 ID
        :param n_type: 알림 유형 (NotificationType Enum)
        :param target_id: 알림의 대상 ID (spotId, 요청을 보낸 userId 등)
        :param target_summary: 알림에 표시될 요약 텍스트 (예: 스팟 이름)
        """
        if recipient_id == sender_id:
            return None

        try:
            sender_data = self._sender_info(sender_id)
            if sender_data is None:
                logging.warning(f"알림 생성 실패: 발신자(sender)를 찾을 수 없음 (ID: {sender_id})")
                return None

            notification = Notification(
                notificationId=str(uuid.uuid4()),
                recipientId=recipient_id,
                sender=sender_data,
                type=n_type,
                targetId=target_id,
                targetSummary=target_summary
            )

            # Enum 멤버를 문자열 값으로 변환하여 저장
            notification_dict = asdict(notification)
            notification_dict['type'] = notification.type.value

            self.notifications_ref.document(notification.notificationId).set(DateTimeUtils.for_firestore(notification_dict))
            logging.info(f"{n_type.value} 알림 생성 완료: {sender_id} -> {recipient_id}")
            return notification.notificationId

        except Exception as e:
            logging.error(f"알림 생성 중 오류 발생: {e}", exc_info=True)
            return None

    def share_spot(self, sender_id: str, spot_id: str, spot_name: str, friend_ids: List[str]) -> List[str]:
        """
        선택한 친구들에게 스팟 공유 알림을 보냅니다.
        친구 목록에 없는 사용자는 대상에서 제외됩니다.
        :return: 알림을 받은 친구 ID 목록
        """
        unique_ids = list(dict.fromkeys(fid for fid in friend_ids if fid))
        if not unique_ids:
            raise ValueError("공유할 친구를 한 명 이상 선택해야 합니다.")

        sender_doc = self.users_ref.document(sender_id).get()
        if not sender_doc.exists:
            raise LookupError("사용자 프로필을 찾을 수 없습니다.")
        friend_set = {f.get('userId') for f in sender_doc.to_dict().get('friends', [])}

        shared_with = []
        for friend_id in unique_ids:
            if friend_id not in friend_set:
                logging.warning(f"친구가 아닌 사용자에게 공유 시도 (sender: {sender_id}, target: {friend_id})")
                continue
            if self.create_notification(friend_id, sender_id, NotificationType.SPOT_SHARED, spot_id, spot_name):
                shared_with.append(friend_id)

        if not shared_with:
            raise ValueError("공유할 수 있는 친구가 없습니다.")
        return shared_with

    def list_notifications(self, user_id: str, limit: int = 20) -> List[Dict[str, Any]]:
        """사용자가 받은 알림을 최신순으로 조회합니다."""
        query = (self.notifications_ref
                 .where('recipientId', '==', user_id)
                 .order_by('createdAt', direction=firestore.Query.DESCENDING)
                 .limit(limit))
        return [DateTimeUtils.from_firestore(doc.to_dict()) for doc in query.stream()]

    def mark_as_read(self, user_id: str, notification_id: str) -> None:
        notification_ref = self.notifications_ref.document(notification_id)
        doc = notification_ref.get()
        if not doc.exists:
            raise LookupError("알림을 찾을 수 없습니다.")
        if doc.to_dict().get('recipientId') != user_id:
            raise PermissionError("알림을 변경할 권한이 없습니다.")
        notification_ref.update({'read': True})

# skatespot/models/notification.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Any, Optional

from skatespot.utils.datetime_utils import DateTimeUtils

class NotificationType(Enum):
    """알림 유형을 정의하는 Enum 클래스"""
    SPOT_SHARED = "SPOT_SHARED"
    FRIEND_REQUEST = "FRIEND_REQUEST"
    FRIEND_ACCEPTED = "FRIEND_ACCEPTED"

@dataclass
class Notification:
    """
    Firestore 'notifications' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    notificationId: str
    recipientId: str         # 알림을 받는 사용자 ID
    sender: Dict[str, Any]   # {userId, displayName}
    type: NotificationType
    targetId: str            # spotId 또는 친구 요청을 보낸 userId
    targetSummary: Optional[str] = None  # 예: 공유된 스팟 이름
    read: bool = False
    createdAt: datetime = field(default_factory=DateTimeUtils.now)

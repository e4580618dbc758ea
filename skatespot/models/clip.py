# skatespot/models/clip.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from skatespot.utils.datetime_utils import DateTimeUtils

@dataclass
class Clip:
    """
    Firestore 'clips' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    스팟에 첨부된 짧은 영상 하나를 나타냅니다.
    """
    clipId: str
    spotId: str
    userId: str
    userName: str
    videoUrl: str
    thumbnailUrl: Optional[str] = None
    caption: str = ""
    likedBy: List[str] = field(default_factory=list)
    likeCount: int = 0
    createdAt: datetime = field(default_factory=DateTimeUtils.now)

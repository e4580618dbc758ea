# skatespot/models/user_profile.py
import re
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Dict, List, Optional

from skatespot.utils.datetime_utils import DateTimeUtils

# 검색어 한 단어당 색인할 최대 접두어 길이
MAX_PREFIX_LENGTH = 20

REQUEST_STATUS_PENDING = "pending"


@dataclass
class FriendEntry:
    """'friends' 배열의 한 항목. 배열 순서 = 친구 수락 순서."""
    userId: str
    displayName: str
    timestamp: datetime = field(default_factory=DateTimeUtils.now)


@dataclass
class FriendRequest:
    """'friendRequests' 배열의 한 항목. 받은 요청만 저장됩니다."""
    userId: str
    displayName: str
    status: str = REQUEST_STATUS_PENDING
    timestamp: datetime = field(default_factory=DateTimeUtils.now)


@dataclass
class FavoriteSpot:
    """'favoriteSpots' 배열의 한 항목."""
    spotId: str
    spotName: str = ""
    spotType: str = ""
    addedAt: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_value(cls, value: Any) -> "FavoriteSpot":
        # 초기 버전 클라이언트는 spotId 문자열만 배열에 저장했습니다.
        if isinstance(value, str):
            return cls(spotId=value, addedAt=None)
        return cls(
            spotId=value.get('spotId'),
            spotName=value.get('spotName') or "",
            spotType=value.get('spotType') or "",
            addedAt=value.get('addedAt'),
        )


@dataclass
class UserProfile:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    문서 ID는 Firebase Auth uid 입니다.
    """
    displayName: str = ""
    email: Optional[str] = None
    friends: List[Dict[str, Any]] = field(default_factory=list)
    friendRequests: List[Dict[str, Any]] = field(default_factory=list)
    favoriteSpots: List[Any] = field(default_factory=list)
    profilePhoto: Optional[str] = None
    createdAt: datetime = field(default_factory=DateTimeUtils.now)
    searchPrefixes: List[str] = field(default_factory=list)

    @classmethod
    def new(cls, display_name: str = "", email: Optional[str] = None) -> "UserProfile":
        """신규 프로필을 생성합니다. 검색 색인도 함께 채웁니다."""
        return cls(
            displayName=display_name,
            email=email,
            searchPrefixes=build_search_prefixes(display_name, email),
        )

    def to_firestore(self) -> Dict[str, Any]:
        return DateTimeUtils.for_firestore(asdict(self))


def build_search_prefixes(display_name: Optional[str], email: Optional[str] = None) -> List[str]:
    """
    사용자 검색용 색인을 만듭니다.
    displayName의 각 단어, 전체 이름, 이메일 주소의 소문자 접두어를 모두 포함합니다.
    이름의 연속된 공백은 하나로 합칩니다. 이메일 접두어는 로컬 파트와 전체 주소 검색을 함께 커버합니다.
    예) "Joe Haskins" -> ["j", "jo", "joe", "h", "ha", ..., "joe haskins" 접두어 ...]
    """
    sources: List[str] = []
    if display_name:
        name = re.sub(r'\s+', ' ', display_name.strip().lower())
        sources.append(name)
        sources.extend(w for w in name.split(' ') if w)
    if email:
        sources.append(email.strip().lower())

    prefixes: List[str] = []
    seen = set()
    for source in sources:
        for i in range(1, min(len(source), MAX_PREFIX_LENGTH) + 1):
            prefix = source[:i]
            if prefix not in seen:
                seen.add(prefix)
                prefixes.append(prefix)
    return prefixes


def normalize_search_term(term: Optional[str]) -> str:
    """검색어를 색인과 같은 형태(소문자, 공백 정리, 최대 길이)로 맞춥니다."""
    if not term:
        return ""
    return re.sub(r'\s+', ' ', term.strip().lower())[:MAX_PREFIX_LENGTH]

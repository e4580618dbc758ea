# skatespot/api/clips/services.py
import logging
import uuid
from dataclasses import asdict
from datetime import datetime, timezone
from firebase_admin import firestore
from typing import Optional, Dict, Any, List

from skatespot.models.clip import Clip
from skatespot.utils.datetime_utils import DateTimeUtils

class ClipService:
    """
    스팟 영상 클립 관련 비즈니스 로직을 담당하는 서비스 클래스.
    - 클립 생성/조회, 좋아요 토글을 포함합니다.
    """
    def __init__(self):
        self.db = firestore.client()
        self.clips_ref = self.db.collection('clips')
        self.users_ref = self.db.collection('users')

    def create_clip(self, user_id: str, spot_id: str, video_url: str, thumbnail_url: Optional[str] = None, caption: str = "") -> Dict[str, Any]:
        """새 클립을 생성합니다. 작성자 이름은 프로필의 displayName을 사용합니다."""
        user_doc = self.users_ref.document(user_id).get()
        if not user_doc.exists:
            raise LookupError("클립 작성자를 찾을 수 없습니다.")
        user_data = user_doc.to_dict()
        user_name = user_data.get('displayName') or (user_data.get('email') or "").split('@')[0] or "Anonymous"

        clip = Clip(
            clipId=str(uuid.uuid4()),
            spotId=spot_id,
            userId=user_id,
            userName=user_name,
            videoUrl=video_url,
            thumbnailUrl=thumbnail_url or video_url,
            caption=caption or ""
        )
        clip_data = DateTimeUtils.for_firestore(asdict(clip))
        try:
            self.clips_ref.document(clip.clipId).set(clip_data)
        except Exception as e:
            logging.error(f"클립 생성 실패 (user_id: {user_id}, spot_id: {spot_id}): {e}", exc_info=True)
            raise
        logging.info(f"클립 생성 완료 (clip_id: {clip.clipId}, spot_id: {spot_id})")
        clip_data['isLiked'] = False
        return clip_data

    def get_clips_for_spot(self, spot_id: str, current_user_id: Optional[str]) -> List[Dict[str, Any]]:
        """스팟의 클립 목록을 최신순으로 반환합니다. 각 클립에 isLiked를 채웁니다."""
        clips = []
        for doc in self.clips_ref.where('spotId', '==', spot_id).stream():
            clip_data = DateTimeUtils.from_firestore(doc.to_dict())
            clip_data.setdefault('clipId', doc.id)
            clip_data['isLiked'] = bool(current_user_id) and current_user_id in (clip_data.get('likedBy') or [])
            clips.append(clip_data)

        # createdAt이 없는 클립은 가장 오래된 것으로 취급합니다.
        epoch = datetime.fromtimestamp(0, tz=timezone.utc)
        clips.sort(key=lambda c: c.get('createdAt') or epoch, reverse=True)
        return clips

    def toggle_clip_like(self, user_id: str, clip_id: str) -> Dict[str, Any]:
        """
        클립 좋아요를 누르거나 취소합니다.
        likedBy 배열과 likeCount를 트랜잭션 안에서 함께 갱신하며, likeCount는 0 미만이 되지 않습니다.
        :return: {"isLiked": bool, "likeCount": int}
        """
        transaction = self.db.transaction()

        @firestore.transactional
        def _toggle_like_in_transaction(transaction, user_id, clip_id):
            clip_ref = self.clips_ref.document(clip_id)
            clip_doc = clip_ref.get(transaction=transaction)
            if not clip_doc.exists:
                raise LookupError("클립을 찾을 수 없습니다.")

            clip_data = clip_doc.to_dict()
            liked_by = list(clip_data.get('likedBy') or [])
            like_count = clip_data.get('likeCount') or 0

            if user_id in liked_by:
                liked_by = [uid for uid in liked_by if uid != user_id]
                like_count = max(like_count - 1, 0)
                is_liked = False
            else:
                liked_by.append(user_id)
                like_count += 1
                is_liked = True

            transaction.update(clip_ref, {'likedBy': liked_by, 'likeCount': like_count})
            return {"isLiked": is_liked, "likeCount": like_count}

        try:
            return _toggle_like_in_transaction(transaction, user_id, clip_id)
        except LookupError:
            raise
        except Exception as e:
            logging.error(f"클립 좋아요 토글 실패 (user_id: {user_id}, clip_id: {clip_id}): {e}", exc_info=True)
            raise

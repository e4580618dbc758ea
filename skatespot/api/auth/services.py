# skatespot/api/auth/services.py
import logging
from datetime import datetime, timezone
from typing import Optional

import requests
from firebase_admin import firestore, auth as firebase_auth
from flask import Flask

from skatespot.api.users.services import UserService
from skatespot.models.user_profile import UserProfile
from skatespot.utils.datetime_utils import DateTimeUtils

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1/accounts:signInWithPassword"

# Identity Toolkit이 돌려주는 자격 증명 오류 코드
INVALID_CREDENTIAL_ERRORS = {
    "EMAIL_NOT_FOUND",
    "INVALID_PASSWORD",
    "INVALID_LOGIN_CREDENTIALS",
    "USER_DISABLED",
}


class AuthService:
    def __init__(self):
        self.db = None
        self.users_ref = None
        self.revoked_tokens_ref = None
        self.user_service: Optional[UserService] = None
        self.api_key: Optional[str] = None
        self.app: Optional[Flask] = None

    def init_app(self, app: Flask, user_service: UserService):
        """앱 초기화 과정에서 호출되어 DB 연결 및 앱 컨텍스트를 설정합니다."""
        self.db = firestore.client()
        self.users_ref = self.db.collection('users')
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')
        self.user_service = user_service
        self.api_key = app.config.get('FIREBASE_WEB_API_KEY')
        self.app = app

    # --- 회원가입 / 로그인 ---
    def register(self, email: str, password: str, username: str = "") -> str:
        """
        Firebase Auth에 사용자를 만들고 Firestore 프로필 문서를 생성합니다.
        :return: 생성된 사용자의 uid
        """
        display_name = username or email.split('@')[0]
        try:
            if username:
                user_record = firebase_auth.create_user(email=email, password=password, display_name=username)
            else:
                user_record = firebase_auth.create_user(email=email, password=password)
        except firebase_auth.EmailAlreadyExistsError:
            raise ValueError("이미 사용 중인 이메일입니다.")

        try:
            profile = UserProfile.new(display_name, email).to_firestore()
            self.users_ref.document(user_record.uid).set(profile)
        except Exception as e:
            logging.error(f"회원가입 프로필 생성 실패 (uid: {user_record.uid}): {e}", exc_info=True)
            raise

        logging.info(f"회원가입 완료 (uid: {user_record.uid})")
        return user_record.uid

    def login(self, email: str, password: str) -> str:
        """
        이메일/비밀번호를 Identity Toolkit REST API로 검증하고 프로필이 없으면 생성합니다.
        :return: 로그인한 사용자의 uid
        """
        if not self.api_key:
            raise RuntimeError("FIREBASE_WEB_API_KEY가 설정되지 않았습니다.")

        response = requests.post(
            IDENTITY_TOOLKIT_URL,
            params={"key": self.api_key},
            json={"email": email, "password": password, "returnSecureToken": True},
            timeout=10,
        )
        if response.status_code != 200:
            error_message = response.json().get('error', {}).get('message', '') if response.content else ''
            # 예: "INVALID_PASSWORD" 또는 "TOO_MANY_ATTEMPTS_TRY_LATER : ..."
            error_code = error_message.split(' ')[0]
            if error_code in INVALID_CREDENTIAL_ERRORS:
                raise PermissionError("이메일 또는 비밀번호가 올바르지 않습니다.")
            logging.error(f"Identity Toolkit 로그인 실패: status={response.status_code}, error={error_message}")
            response.raise_for_status()

        data = response.json()
        uid = data['localId']
        self.user_service.get_or_create_profile(uid, email=data.get('email', email), display_name=data.get('displayName'))
        logging.info(f"로그인 성공 (uid: {uid})")
        return uid

    def update_display_name(self, user_id: str, display_name: str) -> None:
        """Firebase Auth와 프로필 문서의 표시 이름을 함께 변경합니다."""
        try:
            firebase_auth.update_user(user_id, display_name=display_name)
            self.user_service.update_display_name(user_id, display_name)
        except Exception as e:
            logging.error(f"표시 이름 변경 실패 (user_id: {user_id}): {e}", exc_info=True)
            raise

    # --- Blocklist 관련 로직 ---
    def add_token_to_blocklist(self, jti: str, expires: datetime):
        """전달받은 토큰의 jti를 만료 시간과 함께 Firestore에 저장합니다."""
        try:
            token_data = DateTimeUtils.for_firestore({
                'revoked_at': DateTimeUtils.now(),
                'expires_at': expires
            })
            self.revoked_tokens_ref.document(jti).set(token_data)
        except Exception as e:
            logging.error(f"Blocklist 토큰 추가 실패 (jti: {jti}): {e}")
            raise

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        """jti를 이용해 해당 토큰이 무효화 목록에 있는지 확인합니다."""
        jti = jwt_payload['jti']
        doc = self.revoked_tokens_ref.document(jti).get()
        return doc.exists

    def logout_user(self, access_jti: str, access_exp: int, refresh_jti: str, refresh_exp: int):
        """Access 토큰과 Refresh 토큰을 모두 Blocklist에 추가합니다."""
        self.add_token_to_blocklist(access_jti, datetime.fromtimestamp(access_exp, tz=timezone.utc))
        self.add_token_to_blocklist(refresh_jti, datetime.fromtimestamp(refresh_exp, tz=timezone.utc))
        logging.info(f"사용자 로그아웃 처리 완료. JTI: {access_jti[:8]}..., {refresh_jti[:8]}...")

auth_service = AuthService()

# skatespot/core/config.py

import os  # 환경 변수를 읽기 위해 사용합니다.
from datetime import timedelta

class Config:
    """모든 환경 설정의 기반이 되는 공통 설정 클래스입니다."""
    # JWT 토큰 서명에 사용되는 키. 토큰 위변조를 방지합니다.
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY')
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=1)
    JWT_REFRESH_TOKEN_EXPIRES = timedelta(days=14)

    # 이메일/비밀번호 로그인 검증(Identity Toolkit REST API)에 사용하는 Web API 키
    FIREBASE_WEB_API_KEY = os.getenv('FIREBASE_WEB_API_KEY')

    # 스팟/이벤트/미디어 데이터를 제공하는 REST 백엔드
    SPOT_API_BASE_URL = os.getenv('SPOT_API_BASE_URL', 'http://localhost:8000/api')
    SPOT_API_TIMEOUT = float(os.getenv('SPOT_API_TIMEOUT', 10))

    # 프로필 캐시: 5분 동안 유효, 최대 항목 수 제한
    PROFILE_CACHE_TTL_SECONDS = int(os.getenv('PROFILE_CACHE_TTL_SECONDS', 300))
    PROFILE_CACHE_MAX_SIZE = int(os.getenv('PROFILE_CACHE_MAX_SIZE', 1024))

    # 사용자 검색 결과 최대 개수
    USER_SEARCH_LIMIT = int(os.getenv('USER_SEARCH_LIMIT', 20))

class DevelopmentConfig(Config):
    """개발 환경 설정. 코드 변경 시 자동 재시작, 상세 디버그 정보를 표시합니다."""
    DEBUG = True
    FIREBASE_CREDENTIALS_PATH = os.getenv('DEV_FIREBASE_CREDENTIALS_PATH')

class TestingConfig(Config):
    """테스트 환경을 위한 설정 클래스입니다."""
    TESTING = True
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('TEST_FIREBASE_CREDENTIALS_PATH')
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'testing-secret-key-with-enough-length')

class ProductionConfig(Config):
    DEBUG = False
    FIREBASE_CREDENTIALS_PATH = os.getenv('FIREBASE_CREDENTIALS_PATH')

# FLASK_ENV 값에 따라 create_app에서 적절한 설정 클래스를 선택합니다.
config_by_name = dict(
    development=DevelopmentConfig,
    testing=TestingConfig,
    production=ProductionConfig
)

# skatespot/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials

# - 설정
from skatespot.core.config import config_by_name

# - API 블루프린트
from skatespot.api.auth.routes import auth_bp
from skatespot.api.users.routes import users_bp
from skatespot.api.friends.routes import friends_bp
from skatespot.api.favorites.routes import favorites_bp
from skatespot.api.clips.routes import clips_bp
from skatespot.api.notifications.routes import notifications_bp
from skatespot.api.spots.routes import spots_bp

# - 서비스 모듈
from skatespot.services.notification_service import NotificationService
from skatespot.services.spot_api_client import SpotApiClient
from skatespot.api.auth import services as auth_service_module
from skatespot.api.users.services import UserService
from skatespot.api.friends.services import FriendService
from skatespot.api.favorites.services import FavoriteService
from skatespot.api.clips.services import ClipService
from skatespot.utils.profile_cache import ProfileCache

def create_app(config_name=None):
    """
    Flask 애플리케이션 팩토리 함수.
    config_name이 없으면 FLASK_ENV 환경 변수로 설정을 선택합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.config.get('JWT_SECRET_KEY'):
        raise ValueError("필수 환경 변수가 설정되지 않았습니다: JWT_SECRET_KEY")

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt_manager = JWTManager(app)

    @jwt_manager.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        return auth_service_module.auth_service.is_token_revoked(jwt_payload)

    # 테스트 환경에서는 Firestore 클라이언트를 대체하므로 Firebase 앱을 만들지 않습니다.
    if not app.config.get('TESTING') and not firebase_admin._apps:
        cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
        if not cred_path or not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        cred = credentials.Certificate(cred_path)
        firebase_admin.initialize_app(cred)

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {}

    # 5-1. 다른 서비스의 기반이 되는 공용 서비스 먼저 생성
    app.services['profile_cache'] = ProfileCache(
        ttl_seconds=app.config['PROFILE_CACHE_TTL_SECONDS'],
        max_size=app.config['PROFILE_CACHE_MAX_SIZE']
    )
    app.services['notifications'] = NotificationService()

    try:
        spot_api_instance = SpotApiClient()
        spot_api_instance.init_app(app)
        app.services['spot_api'] = spot_api_instance
    except Exception as e:
        logging.error(f"Failed to initialize spot API client: {e}")
        raise

    # 5-2. 다른 서비스를 주입받아야 하는 도메인 서비스 생성
    app.services['users'] = UserService(
        profile_cache=app.services['profile_cache'],
        search_limit=app.config['USER_SEARCH_LIMIT']
    )
    app.services['friends'] = FriendService(
        notification_service=app.services['notifications'],
        profile_cache=app.services['profile_cache']
    )
    app.services['favorites'] = FavoriteService(profile_cache=app.services['profile_cache'])
    app.services['clips'] = ClipService()

    # - 인증 서비스 (앱 컨텍스트 필요)
    auth_service_module.auth_service.init_app(app, user_service=app.services['users'])
    app.services['auth'] = auth_service_module.auth_service

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(friends_bp, url_prefix='/api/friends')
    app.register_blueprint(favorites_bp, url_prefix='/api/favorites')

    # - 스팟 하위 경로(/spots/<id>/clips, /spots/<id>/share)를 함께 다루는 블루프린트
    app.register_blueprint(clips_bp, url_prefix='/api')
    app.register_blueprint(notifications_bp, url_prefix='/api')
    app.register_blueprint(spots_bp, url_prefix='/api')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        if isinstance(err, HTTPException):
            return err
        # 다른 핸들러에서 처리되지 않은 모든 예외를 여기서 처리
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app

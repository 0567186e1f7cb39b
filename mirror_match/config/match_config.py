"""
Mirror Match 설정 파일
분석 프록시와 게임 클라이언트가 공유하는 모든 설정값들을 관리
"""

import os
from typing import Dict, Any, Optional, Tuple
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


@dataclass
class VisionConfig:
    """외부 비전 API 설정"""
    # 인증 (없으면 모든 요청이 설정 오류로 응답)
    API_KEY: Optional[str] = None

    # 모델 설정
    MODEL: str = "gpt-4o-mini"
    MAX_TOKENS: int = 1000

    # 네트워크 설정
    TIMEOUT: float = 30.0  # 업스트림 응답 대기 한도 (초)
    MAX_CONNECTIONS: int = 50
    MAX_KEEPALIVE: int = 20


@dataclass
class ImageConfig:
    """입력 이미지 검증 설정"""
    MIN_IMAGE_BYTES: int = 75  # base64 100자에 해당하는 디코딩 크기
    DEFAULT_MEDIA_TYPE: str = "image/jpeg"
    ALLOWED_MEDIA_TYPES: Tuple[str, ...] = (
        "image/jpeg",
        "image/png",
        "image/gif",
        "image/webp",
    )
    JPEG_QUALITY: int = 80  # 카메라 캡처 인코딩 품질


@dataclass
class GameConfig:
    """게임 클라이언트 설정"""
    CATALOG: str = "classic"  # "classic" (4종) 또는 "extended" (5종)

    # 피드백 임계값 (None이면 감정별 기본값 0.7 / 0.4)
    SUCCESS_THRESHOLD: Optional[float] = None
    PARTIAL_THRESHOLD: Optional[float] = None

    # 프록시 연결
    PROXY_URL: str = "http://localhost:15040"
    CLIENT_TIMEOUT: float = 35.0

    # 점수 저장 위치
    SESSION_FILE: str = field(
        default_factory=lambda: os.path.join(os.path.expanduser("~"), ".mirror_match", "session.json")
    )

    CAMERA_INDEX: int = 0


@dataclass
class ServerConfig:
    """API 서버 설정"""
    HOST: str = "0.0.0.0"
    PORT: int = 15040
    LOG_LEVEL: str = "INFO"


class MatchConfig:
    """통합 설정 클래스"""

    def __init__(self):
        self.vision = VisionConfig()
        self.image = ImageConfig()
        self.game = GameConfig()
        self.server = ServerConfig()

        # 환경 변수에서 설정 오버라이드
        self._load_from_env()

    def _load_from_env(self):
        """환경 변수에서 설정값 로드"""
        # 비전 API 설정
        self.vision.API_KEY = os.getenv("OPENAI_API_KEY") or None

        if os.getenv("VISION_MODEL"):
            self.vision.MODEL = os.getenv("VISION_MODEL")

        if os.getenv("VISION_MAX_TOKENS"):
            self.vision.MAX_TOKENS = int(os.getenv("VISION_MAX_TOKENS"))

        if os.getenv("VISION_TIMEOUT"):
            self.vision.TIMEOUT = float(os.getenv("VISION_TIMEOUT"))

        if os.getenv("HTTP_MAX_CONN"):
            self.vision.MAX_CONNECTIONS = int(os.getenv("HTTP_MAX_CONN"))

        if os.getenv("HTTP_MAX_KEEPALIVE"):
            self.vision.MAX_KEEPALIVE = int(os.getenv("HTTP_MAX_KEEPALIVE"))

        # 이미지 설정
        if os.getenv("MIN_IMAGE_BYTES"):
            self.image.MIN_IMAGE_BYTES = int(os.getenv("MIN_IMAGE_BYTES"))

        # 게임 설정
        if os.getenv("EMOTION_CATALOG"):
            self.game.CATALOG = os.getenv("EMOTION_CATALOG").lower()

        if os.getenv("SUCCESS_THRESHOLD"):
            self.game.SUCCESS_THRESHOLD = float(os.getenv("SUCCESS_THRESHOLD"))

        if os.getenv("PARTIAL_THRESHOLD"):
            self.game.PARTIAL_THRESHOLD = float(os.getenv("PARTIAL_THRESHOLD"))

        if os.getenv("MIRROR_MATCH_URL"):
            self.game.PROXY_URL = os.getenv("MIRROR_MATCH_URL").rstrip("/")

        if os.getenv("CLIENT_TIMEOUT"):
            self.game.CLIENT_TIMEOUT = float(os.getenv("CLIENT_TIMEOUT"))

        if os.getenv("MIRROR_MATCH_SESSION_FILE"):
            self.game.SESSION_FILE = os.getenv("MIRROR_MATCH_SESSION_FILE")

        if os.getenv("CAMERA_INDEX"):
            self.game.CAMERA_INDEX = int(os.getenv("CAMERA_INDEX"))

        # 서버 설정
        if os.getenv("HOST"):
            self.server.HOST = os.getenv("HOST")

        if os.getenv("PORT"):
            self.server.PORT = int(os.getenv("PORT"))

        if os.getenv("LOG_LEVEL"):
            self.server.LOG_LEVEL = os.getenv("LOG_LEVEL").upper()

    @property
    def has_credential(self) -> bool:
        return bool(self.vision.API_KEY)

    def get_client_params(self) -> Dict[str, Any]:
        """비전 클라이언트 생성 파라미터 반환"""
        return {
            'api_key': self.vision.API_KEY,
            'timeout': self.vision.TIMEOUT,
            'max_connections': self.vision.MAX_CONNECTIONS,
            'max_keepalive': self.vision.MAX_KEEPALIVE,
        }

    def to_dict(self) -> Dict[str, Any]:
        """모든 설정을 딕셔너리로 변환 (API 키는 제외)"""
        vision = dict(self.vision.__dict__)
        vision['API_KEY'] = "***" if self.vision.API_KEY else None
        return {
            'vision': vision,
            'image': dict(self.image.__dict__),
            'game': dict(self.game.__dict__),
            'server': dict(self.server.__dict__),
        }


# 전역 설정 인스턴스
config = MatchConfig()

# 편의 함수들
def get_config() -> MatchConfig:
    """설정 인스턴스 반환"""
    return config

def update_config(**kwargs):
    """설정 업데이트"""
    for key, value in kwargs.items():
        if hasattr(config, key):
            setattr(config, key, value)

def reset_config() -> MatchConfig:
    """설정 초기화 (환경 변수 다시 읽기)"""
    global config
    config = MatchConfig()
    return config

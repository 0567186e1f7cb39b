"""
분석 백엔드
게임 루프는 analyze(image) 하나만 알면 되고, 실제 프록시 호출과
무작위 데모 분석을 바꿔 끼울 수 있다.
"""

import logging
import random
from typing import Dict, List, Optional

import requests

from mirror_match.game.emotions import TargetEmotion
from mirror_match.services.response_parser import AnalysisResult, normalize_fields

logger = logging.getLogger(__name__)


class AnalysisRequestError(Exception):
    """프록시 호출 실패 (연결 오류 또는 에러 봉투)"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AnalysisBackend:
    """분석 백엔드 인터페이스"""

    def analyze(self, image: str) -> AnalysisResult:
        raise NotImplementedError


class MockAnalysisBackend(AnalysisBackend):
    """API 없이 동작하는 데모용 분석기 (결과는 무작위)"""

    def __init__(self, catalog: List[TargetEmotion], rng: Optional[random.Random] = None):
        if not catalog:
            raise ValueError("catalog must not be empty")
        self.catalog = catalog
        self.rng = rng or random.Random()

    def analyze(self, image: str) -> AnalysisResult:
        emotion = self.rng.choice(self.catalog)
        low, high = emotion.mock_confidence
        confidence = min(0.99, low + self.rng.random() * (high - low))
        messages = emotion.messages or (emotion.feedback.success,)
        return AnalysisResult(
            emotion=emotion.name,
            confidence=confidence,
            feedback=self.rng.choice(messages),
        )


class RemoteAnalysisBackend(AnalysisBackend):
    """Mirror Match 프록시 클라이언트"""

    def __init__(self, base_url: str = "http://localhost:15040", timeout: float = 35.0,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def health_check(self) -> Dict:
        """헬스체크 (프록시 상태와 비전 API 키 설정 여부)"""
        try:
            response = self.session.get(f"{self.base_url}/api/health", timeout=self.timeout)
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"헬스체크 실패: {e}")
            raise AnalysisRequestError(f"Could not reach analysis service: {e}")

        if not response.ok or not isinstance(data, dict):
            raise AnalysisRequestError("Analysis service is unhealthy", response.status_code)
        return data

    def analyze(self, image: str) -> AnalysisResult:
        try:
            response = self.session.post(
                f"{self.base_url}/analyze-emotion",
                json={"image": image},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"프록시 연결 실패: {e}")
            raise AnalysisRequestError(f"Could not reach analysis service: {e}")

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            message = data.get("error") if isinstance(data, dict) else None
            logger.error(f"분석 API 오류 ({response.status_code}): {data}")
            raise AnalysisRequestError(message or "Failed to analyze emotion", response.status_code)

        if not isinstance(data, dict):
            raise AnalysisRequestError("Malformed analysis response", response.status_code)

        result, _ = normalize_fields(data)
        return result

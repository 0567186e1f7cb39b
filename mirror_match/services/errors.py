"""
에러 처리 모듈
분석 프록시의 예외 분류와 JSON 에러 응답 변환
"""

import logging
from enum import Enum
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class ErrorLevel(Enum):
    """에러 레벨 정의"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class MirrorMatchError(Exception):
    """호출자에게 에러 봉투로 전달되는 예외의 기본 클래스"""

    status_code: int = 500
    level: ErrorLevel = ErrorLevel.HIGH

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ConfigurationError(MirrorMatchError):
    """API 키 누락 등 프로세스 설정 문제"""
    status_code = 503
    level = ErrorLevel.CRITICAL


class InputError(MirrorMatchError):
    """요청 바디 파싱 실패, image 필드 누락"""
    status_code = 400
    level = ErrorLevel.LOW


class FormatError(MirrorMatchError):
    """data URI 형식 오류, 너무 작은 이미지"""
    status_code = 400
    level = ErrorLevel.LOW


class UpstreamError(MirrorMatchError):
    """외부 비전 API 호출 실패"""
    status_code = 502
    level = ErrorLevel.HIGH


class UpstreamTimeoutError(UpstreamError):
    """외부 비전 API 응답 시간 초과"""
    status_code = 504
    level = ErrorLevel.MEDIUM


def log_error(error: MirrorMatchError, context: Optional[Dict[str, Any]] = None):
    """에러 레벨에 맞춰 로깅"""
    suffix = f" ({error.details})" if error.details else ""
    ctx = f" {context}" if context else ""
    message = f"[{type(error).__name__}] {error.message}{suffix}{ctx}"

    if error.level in (ErrorLevel.CRITICAL, ErrorLevel.HIGH):
        logger.error(message)
    elif error.level == ErrorLevel.MEDIUM:
        logger.warning(message)
    else:
        logger.info(message)

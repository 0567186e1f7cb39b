"""
비전 모델 응답 정규화
모델이 돌려준 자유 텍스트에서 {emotion, confidence, feedback} 결과를 만들어 낸다.
파싱이 실패해도 항상 형태가 올바른 AnalysisResult를 반환한다.
"""

import logging
import math
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional, Tuple

import orjson

logger = logging.getLogger(__name__)

DEFAULT_EMOTION = "unknown"
DEFAULT_CONFIDENCE = 0.5

EMPTY_RESPONSE_FEEDBACK = "Received empty response from AI service."
NO_STRUCTURE_FEEDBACK = "Could not extract structured data from AI response."
UNPARSEABLE_FEEDBACK = "Could not analyze the expression accurately. AI response could not be parsed."
INCOMPLETE_FEEDBACK = "Received incomplete analysis from AI."


class ParseOutcome(Enum):
    """결과가 만들어진 경로"""
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    NO_STRUCTURE = "no_structure"
    UNPARSEABLE = "unparseable"
    EMPTY = "empty"


@dataclass(frozen=True)
class AnalysisResult:
    emotion: str
    confidence: float
    feedback: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def fallback_result(feedback: str) -> AnalysisResult:
    return AnalysisResult(emotion=DEFAULT_EMOTION, confidence=DEFAULT_CONFIDENCE, feedback=feedback)


def _balanced_end(text: str, start: int) -> Optional[int]:
    """start 위치의 '{' 와 짝이 맞는 '}' 의 인덱스 (없으면 None)"""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue

        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return None


def extract_json_object(text: str) -> Optional[str]:
    """
    텍스트에서 첫 번째 균형 잡힌 {...} 구간을 잘라낸다.

    문자열 리터럴 안의 중괄호는 세지 않으므로 feedback 안에 '{' 가 들어가도
    구간이 깨지지 않는다. 어떤 '{' 가 끝까지 닫히지 않으면 그 다음 '{' 부터
    다시 찾고, 닫히는 구간이 하나도 없을 때만 None.
    """
    start = text.find("{")
    while start >= 0:
        end = _balanced_end(text, start)
        if end is not None:
            return text[start:end + 1]
        start = text.find("{", start + 1)
    return None


def _clean_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _clean_confidence(value: Any) -> Optional[float]:
    # bool은 int의 하위 클래스라 먼저 걸러낸다
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return max(0.0, min(1.0, number))


def normalize_fields(data: Dict[str, Any]) -> Tuple[AnalysisResult, ParseOutcome]:
    """파싱된 객체에서 세 필드를 뽑고, 빠진 필드는 각각 기본값으로 채운다."""
    emotion = _clean_text(data.get("emotion"))
    confidence = _clean_confidence(data.get("confidence"))
    feedback = _clean_text(data.get("feedback"))

    outcome = ParseOutcome.COMPLETE
    if emotion is None or confidence is None or feedback is None:
        outcome = ParseOutcome.INCOMPLETE

    result = AnalysisResult(
        emotion=emotion if emotion is not None else DEFAULT_EMOTION,
        confidence=confidence if confidence is not None else DEFAULT_CONFIDENCE,
        feedback=feedback if feedback is not None else INCOMPLETE_FEEDBACK,
    )
    return result, outcome


def parse_analysis_text(text: Optional[str]) -> Tuple[AnalysisResult, ParseOutcome]:
    """모델 응답 텍스트 → (AnalysisResult, ParseOutcome)"""
    if text is None or not text.strip():
        logger.warning("비전 API 응답이 비어 있음")
        return fallback_result(EMPTY_RESPONSE_FEEDBACK), ParseOutcome.EMPTY

    json_text = extract_json_object(text)
    if json_text is None:
        logger.warning("응답에서 JSON 구간을 찾지 못함")
        return fallback_result(NO_STRUCTURE_FEEDBACK), ParseOutcome.NO_STRUCTURE

    try:
        data = orjson.loads(json_text)
    except orjson.JSONDecodeError as e:
        logger.warning(f"응답 JSON 파싱 실패: {e}")
        return fallback_result(UNPARSEABLE_FEEDBACK), ParseOutcome.UNPARSEABLE

    if not isinstance(data, dict):
        return fallback_result(UNPARSEABLE_FEEDBACK), ParseOutcome.UNPARSEABLE

    result, outcome = normalize_fields(data)
    if outcome is ParseOutcome.INCOMPLETE:
        logger.warning(f"불완전한 분석 결과: {data}")
    return result, outcome

"""
신뢰도 → 피드백 매핑
프록시가 돌려준 feedback과 별개로, 목표 감정별 임계값으로 고정 문구를 고른다.
"""

from enum import Enum

from mirror_match.game.emotions import TargetEmotion
from mirror_match.services.response_parser import AnalysisResult


class FeedbackTier(Enum):
    SUCCESS = "success"
    PARTIAL = "partial"
    HINT = "hint"
    MISMATCH = "mismatch"


def classify_confidence(target: TargetEmotion, result: AnalysisResult) -> FeedbackTier:
    if result.emotion.strip().lower() != target.name:
        return FeedbackTier.MISMATCH
    if result.confidence > target.success_threshold:
        return FeedbackTier.SUCCESS
    if result.confidence > target.partial_threshold:
        return FeedbackTier.PARTIAL
    return FeedbackTier.HINT


def feedback_message(target: TargetEmotion, result: AnalysisResult, tier: FeedbackTier) -> str:
    if tier is FeedbackTier.SUCCESS:
        return target.feedback.success
    if tier is FeedbackTier.PARTIAL:
        return target.feedback.partial
    if tier is FeedbackTier.HINT:
        return target.feedback.hint
    return (f'I see you\'re showing "{result.emotion}" - '
            f'try to show "{target.name}" instead! {target.feedback.hint}')


def confidence_class(confidence: float) -> str:
    if confidence >= 0.85:
        return "excellent"
    if confidence >= 0.70:
        return "good"
    if confidence >= 0.55:
        return "fair"
    return "poor"


def accuracy_text(confidence: float) -> str:
    return {
        "excellent": "Excellent",
        "good": "Good",
        "fair": "Fair",
        "poor": "Low",
    }[confidence_class(confidence)]


def points_for(confidence: float) -> int:
    """0~100점"""
    return int(round(max(0.0, min(1.0, confidence)) * 100))

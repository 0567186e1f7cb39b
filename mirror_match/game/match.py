import logging
import random
from dataclasses import dataclass
from typing import List, Optional

from mirror_match.game.backends import AnalysisBackend, AnalysisRequestError
from mirror_match.game.emotions import TargetEmotion, next_emotion, random_emotion
from mirror_match.game.feedback import (
    FeedbackTier, classify_confidence, feedback_message, points_for,
)
from mirror_match.game.session import SessionCounters, SessionStore
from mirror_match.services.response_parser import AnalysisResult

logger = logging.getLogger(__name__)

ROUND_FAILED_MESSAGE = "Something went wrong. Please try again."


@dataclass(frozen=True)
class RoundOutcome:
    target: TargetEmotion
    result: Optional[AnalysisResult]
    tier: Optional[FeedbackTier]
    message: str
    points: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MirrorMatchGame:
    """목표 감정 제시 → 캡처 이미지 분석 → 피드백/점수 갱신"""

    def __init__(self, catalog: List[TargetEmotion], backend: AnalysisBackend,
                 store: Optional[SessionStore] = None, rng: Optional[random.Random] = None):
        if not catalog:
            raise ValueError("catalog must not be empty")
        self.catalog = catalog
        self.backend = backend
        self.store = store
        self.rng = rng or random.Random()
        self.target = catalog[0]
        self.counters = store.load() if store else SessionCounters()

    def play_round(self, image: str) -> RoundOutcome:
        try:
            result = self.backend.analyze(image)
        except AnalysisRequestError as e:
            logger.error(f"분석 실패: {e}")
            return RoundOutcome(
                target=self.target, result=None, tier=None,
                message=ROUND_FAILED_MESSAGE, error=str(e),
            )

        tier = classify_confidence(self.target, result)
        points = points_for(result.confidence)
        self.counters.record(points, success=tier is FeedbackTier.SUCCESS)
        if self.store:
            self.store.save(self.counters)

        return RoundOutcome(
            target=self.target,
            result=result,
            tier=tier,
            message=feedback_message(self.target, result, tier),
            points=points,
        )

    def next_emotion(self) -> TargetEmotion:
        self.target = next_emotion(self.catalog, self.target)
        return self.target

    def random_emotion(self) -> TargetEmotion:
        self.target = random_emotion(self.catalog, self.target, self.rng)
        return self.target

    def reset_counters(self):
        if self.store:
            self.store.clear(self.counters)
        else:
            self.counters.reset()

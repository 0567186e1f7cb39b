import random

import pytest

from mirror_match.game.backends import AnalysisBackend, AnalysisRequestError, MockAnalysisBackend
from mirror_match.game.emotions import (
    CLASSIC_EMOTIONS, EXTENDED_EMOTIONS, configure_catalog, find_emotion, get_catalog, next_emotion,
    random_emotion,
)
from mirror_match.game.feedback import (
    FeedbackTier, accuracy_text, classify_confidence, confidence_class, feedback_message, points_for,
)
from mirror_match.game.match import ROUND_FAILED_MESSAGE, MirrorMatchGame
from mirror_match.game.session import SessionCounters, SessionStore
from mirror_match.services.response_parser import AnalysisResult

HAPPY = CLASSIC_EMOTIONS[0]


class StaticBackend(AnalysisBackend):
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.images = []

    def analyze(self, image):
        self.images.append(image)
        if self.error:
            raise self.error
        return self.result


@pytest.mark.parametrize("confidence,tier", [
    (0.95, FeedbackTier.SUCCESS),
    (0.71, FeedbackTier.SUCCESS),
    (0.7, FeedbackTier.PARTIAL),
    (0.41, FeedbackTier.PARTIAL),
    (0.4, FeedbackTier.HINT),
    (0.0, FeedbackTier.HINT),
])
def test_confidence_tiers(confidence, tier):
    result = AnalysisResult("happy", confidence, "model text")
    assert classify_confidence(HAPPY, result) is tier


def test_tier_messages_come_from_the_catalog():
    result = AnalysisResult("Happy", 0.9, "model text")
    tier = classify_confidence(HAPPY, result)
    assert tier is FeedbackTier.SUCCESS
    assert feedback_message(HAPPY, result, tier) == HAPPY.feedback.success


def test_mismatch_mentions_both_emotions():
    result = AnalysisResult("sad", 0.99, "model text")
    tier = classify_confidence(HAPPY, result)
    assert tier is FeedbackTier.MISMATCH
    message = feedback_message(HAPPY, result, tier)
    assert '"sad"' in message and '"happy"' in message
    assert message.endswith(HAPPY.feedback.hint)


def test_display_helpers():
    assert [confidence_class(c) for c in (0.9, 0.7, 0.6, 0.2)] == ["excellent", "good", "fair", "poor"]
    assert accuracy_text(0.2) == "Low"
    assert points_for(0.876) == 88
    assert points_for(1.4) == 100


def test_catalog_navigation():
    assert len(get_catalog("classic")) == 4
    assert len(get_catalog("EXTENDED")) == 5
    with pytest.raises(ValueError):
        get_catalog("nope")

    assert next_emotion(CLASSIC_EMOTIONS, CLASSIC_EMOTIONS[-1]) is CLASSIC_EMOTIONS[0]
    assert find_emotion(CLASSIC_EMOTIONS, " MAD ").name == "mad"
    rng = random.Random(3)
    for _ in range(20):
        assert random_emotion(CLASSIC_EMOTIONS, HAPPY, rng) is not HAPPY


def test_configured_thresholds_change_the_tier():
    catalog = configure_catalog("classic", success_threshold=0.9, partial_threshold=0.5)
    strict_happy = catalog[0]
    result = AnalysisResult("happy", 0.8, "model text")

    assert classify_confidence(strict_happy, result) is FeedbackTier.PARTIAL
    assert classify_confidence(HAPPY, result) is FeedbackTier.SUCCESS
    assert CLASSIC_EMOTIONS[0].success_threshold == 0.7


def test_configure_catalog_without_overrides_returns_the_catalog():
    assert configure_catalog("extended") is EXTENDED_EMOTIONS
    assert configure_catalog("classic", partial_threshold=0.2)[0].success_threshold == 0.7
    with pytest.raises(ValueError):
        configure_catalog("nope", success_threshold=0.8)


@pytest.mark.parametrize("success,partial", [(0.4, 0.6), (1.2, None), (None, -0.1)])
def test_configure_catalog_rejects_bad_thresholds(success, partial):
    with pytest.raises(ValueError):
        configure_catalog("classic", success_threshold=success, partial_threshold=partial)


def test_mock_backend_stays_in_range():
    backend = MockAnalysisBackend(EXTENDED_EMOTIONS, rng=random.Random(7))
    for _ in range(50):
        result = backend.analyze("data:image/jpeg;base64,AAAA")
        emotion = find_emotion(EXTENDED_EMOTIONS, result.emotion)
        low, high = emotion.mock_confidence
        assert low <= result.confidence <= min(0.99, high)
        assert result.feedback in emotion.messages


def test_round_updates_and_persists_counters(tmp_path):
    store = SessionStore(str(tmp_path / "nested" / "session.json"))
    backend = StaticBackend(AnalysisResult("happy", 0.83, "nice"))
    game = MirrorMatchGame(CLASSIC_EMOTIONS, backend, store=store)

    outcome = game.play_round("img")
    assert outcome.ok
    assert outcome.tier is FeedbackTier.SUCCESS
    assert outcome.points == 83
    assert outcome.message == HAPPY.feedback.success

    backend.result = AnalysisResult("happy", 0.5, "meh")
    game.play_round("img")

    assert store.load() == SessionCounters(score=133, matches=2, streak=1)


def test_backend_error_leaves_counters_alone(tmp_path):
    store = SessionStore(str(tmp_path / "session.json"))
    game = MirrorMatchGame(CLASSIC_EMOTIONS, StaticBackend(error=AnalysisRequestError("down", 502)), store=store)

    outcome = game.play_round("img")
    assert not outcome.ok
    assert outcome.message == ROUND_FAILED_MESSAGE
    assert outcome.error == "down"
    assert game.counters == SessionCounters()


def test_reset_clears_file(tmp_path):
    path = tmp_path / "session.json"
    store = SessionStore(str(path))
    store.save(SessionCounters(score=10, matches=1, streak=1))

    game = MirrorMatchGame(CLASSIC_EMOTIONS, StaticBackend(), store=store)
    assert game.counters.score == 10
    game.reset_counters()
    assert game.counters == SessionCounters()
    assert not path.exists()


def test_corrupt_session_file_starts_fresh(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("{not json")
    assert SessionStore(str(path)).load() == SessionCounters()

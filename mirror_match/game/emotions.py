"""
목표 감정 카탈로그
classic: React 앱의 4종, extended: 정적 데모의 5종
"""

import random
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class FeedbackTiers:
    success: str
    partial: str
    hint: str


@dataclass(frozen=True)
class TargetEmotion:
    name: str
    emoji: str
    description: str
    feedback: FeedbackTiers
    success_threshold: float = 0.7
    partial_threshold: float = 0.4
    # MockAnalysisBackend 전용
    mock_confidence: Tuple[float, float] = (0.60, 0.90)
    messages: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, str]:
        return {"name": self.name, "emoji": self.emoji, "description": self.description}


CLASSIC_EMOTIONS: List[TargetEmotion] = [
    TargetEmotion(
        name="happy",
        emoji="😊",
        description="Show your biggest smile!",
        feedback=FeedbackTiers(
            success="Wonderful smile! Your happiness is contagious! 🌟",
            partial="Almost there! Try making your smile bigger 😊",
            hint="Think of something that makes you really happy!",
        ),
    ),
    TargetEmotion(
        name="sad",
        emoji="😢",
        description="Turn your smile upside down",
        feedback=FeedbackTiers(
            success="Great expression! You showed feeling sad very well 💙",
            partial="Getting closer! Try turning down the corners of your mouth more 😢",
            hint="Think about a rainy day when you couldn't play outside",
        ),
    ),
    TargetEmotion(
        name="mad",
        emoji="😠",
        description="Make an angry face",
        feedback=FeedbackTiers(
            success="Wow! That's a powerful angry face! 💪",
            partial="Almost there! Try furrowing your eyebrows more 😠",
            hint="Think about something that really bothers you!",
        ),
    ),
    TargetEmotion(
        name="scared",
        emoji="😨",
        description="Show me your scared face",
        feedback=FeedbackTiers(
            success="Perfect scared face! You're getting so good at this! 🌟",
            partial="Close! Try opening your eyes wider to show surprise 😨",
            hint="Imagine seeing a friendly ghost that startled you!",
        ),
    ),
]

EXTENDED_EMOTIONS: List[TargetEmotion] = [
    TargetEmotion(
        name="happy",
        emoji="😊",
        description="Show your brightest smile!",
        feedback=FeedbackTiers(
            success="Perfect happiness detected! Your smile is absolutely radiant! ✨",
            partial="Nearly there! Let that smile reach your eyes 😊",
            hint="Think of your favourite joke!",
        ),
        mock_confidence=(0.75, 0.99),
        messages=(
            "Perfect happiness detected! Your smile is absolutely radiant! ✨",
            "Amazing joy radiating from your expression! Keep shining! 🌟",
            "Your happiness is contagious! Beautiful smile detected! 😊",
            "Incredible positive energy! Your smile lights up the screen! 💫",
            "Pure joy captured! Your smile is picture-perfect! 📸",
        ),
    ),
    TargetEmotion(
        name="excited",
        emoji="🤩",
        description="Look absolutely thrilled!",
        feedback=FeedbackTiers(
            success="Wow! Incredible excitement detected! You're glowing! ⭐",
            partial="More energy! Open your eyes wide and grin 🤩",
            hint="Imagine you just won a prize!",
        ),
        mock_confidence=(0.65, 0.95),
        messages=(
            "Wow! Incredible excitement detected! You're glowing! ⭐",
            "Amazing energy! Your excitement is off the charts! 🚀",
            "Star-struck expression captured perfectly! ✨",
            "Your enthusiasm is absolutely infectious! 🎉",
            "Spectacular excitement! You're radiating pure joy! 💖",
        ),
    ),
    TargetEmotion(
        name="surprised",
        emoji="😮",
        description="Show me your surprised face!",
        feedback=FeedbackTiers(
            success="Perfect surprise captured! Your expression is priceless! 😮",
            partial="Raise your eyebrows a little more 😮",
            hint="Imagine a surprise party jumping out at you!",
        ),
        mock_confidence=(0.60, 0.95),
        messages=(
            "Perfect surprise captured! Your expression is priceless! 😮",
            "Amazing surprise detected! What a reaction! 🎊",
            "Incredible surprise! Your eyes say it all! 👀",
            "Beautiful surprise expression! Perfectly captured! 📷",
            "Wonderful surprise! Your reaction is fantastic! ⚡",
        ),
    ),
    TargetEmotion(
        name="content",
        emoji="😌",
        description="Look calm and content",
        feedback=FeedbackTiers(
            success="Perfect contentment detected! So peaceful and serene! 🌸",
            partial="Relax your face and try a soft smile 😌",
            hint="Think of a lazy sunny afternoon",
        ),
        mock_confidence=(0.70, 0.95),
        messages=(
            "Perfect contentment detected! So peaceful and serene! 🌸",
            "Beautiful calm energy! Your inner peace shows! ☮️",
            "Wonderful serenity captured! Very zen-like! 🧘",
            "Amazing tranquility! Your peaceful vibe is lovely! 🌿",
            "Perfect balance detected! Such a calming presence! 💚",
        ),
    ),
    TargetEmotion(
        name="neutral",
        emoji="😐",
        description="Give me your best poker face",
        feedback=FeedbackTiers(
            success="Neutral expression captured. Perfectly composed! 😎",
            partial="Almost neutral! Relax your mouth a bit more 😐",
            hint="Pretend you're waiting for a bus",
        ),
        mock_confidence=(0.55, 0.95),
        messages=(
            "Neutral expression captured. Perfectly composed! 😎",
            "Cool and collected! Great poker face! 🎭",
            "Balanced expression detected. Very professional! 💼",
            "Steady and calm. Your composure is admirable! 🎯",
            "Neutral but confident! Strong presence detected! 💪",
        ),
    ),
]

CATALOGS: Dict[str, List[TargetEmotion]] = {
    "classic": CLASSIC_EMOTIONS,
    "extended": EXTENDED_EMOTIONS,
}


def get_catalog(name: str = "classic") -> List[TargetEmotion]:
    try:
        return CATALOGS[name.lower()]
    except KeyError:
        raise ValueError(f"unknown emotion catalog: {name!r} (choose from {', '.join(CATALOGS)})")


def configure_catalog(name: str, success_threshold: Optional[float] = None,
                      partial_threshold: Optional[float] = None) -> List[TargetEmotion]:
    """
    카탈로그 조회 + 설정 임계값 적용
    None인 임계값은 감정별 기본값을 그대로 쓴다. 원본 카탈로그는 바뀌지 않는다.
    """
    catalog = get_catalog(name)
    overrides = {}
    if success_threshold is not None:
        overrides["success_threshold"] = success_threshold
    if partial_threshold is not None:
        overrides["partial_threshold"] = partial_threshold
    if not overrides:
        return catalog

    configured = [replace(e, **overrides) for e in catalog]
    for e in configured:
        if not 0.0 <= e.partial_threshold < e.success_threshold <= 1.0:
            raise ValueError(
                f"invalid thresholds for {e.name!r}: "
                f"partial={e.partial_threshold}, success={e.success_threshold}"
            )
    return configured


def emotion_names(catalog: List[TargetEmotion]) -> List[str]:
    return [e.name for e in catalog]


def find_emotion(catalog: List[TargetEmotion], name: str) -> Optional[TargetEmotion]:
    name = name.strip().lower()
    for emotion in catalog:
        if emotion.name == name:
            return emotion
    return None


def next_emotion(catalog: List[TargetEmotion], current: TargetEmotion) -> TargetEmotion:
    """카탈로그 순서대로 다음 감정 (마지막이면 처음으로)"""
    names = emotion_names(catalog)
    index = names.index(current.name) if current.name in names else -1
    return catalog[(index + 1) % len(catalog)]


def random_emotion(catalog: List[TargetEmotion], current: Optional[TargetEmotion] = None,
                   rng: Optional[random.Random] = None) -> TargetEmotion:
    """현재 감정과 다른 감정을 무작위로 선택"""
    rng = rng or random
    candidates = [e for e in catalog if current is None or e.name != current.name]
    return rng.choice(candidates or catalog)

"""
세션 카운터 (점수, 매치 수, 연속 성공)
브라우저 localStorage 대신 로컬 JSON 파일에 저장
"""

import logging
import os
from dataclasses import dataclass, asdict
from typing import Optional

import orjson

logger = logging.getLogger(__name__)


@dataclass
class SessionCounters:
    score: int = 0
    matches: int = 0
    streak: int = 0

    def record(self, points: int, success: bool):
        self.score += points
        self.matches += 1
        if success:
            self.streak += 1

    def reset(self):
        self.score = 0
        self.matches = 0
        self.streak = 0


class SessionStore:
    """카운터 파일 입출력"""

    def __init__(self, path: str):
        self.path = path

    def load(self) -> SessionCounters:
        if not os.path.exists(self.path):
            return SessionCounters()
        try:
            with open(self.path, "rb") as f:
                data = orjson.loads(f.read())
            return SessionCounters(
                score=max(0, int(data.get("score", 0))),
                matches=max(0, int(data.get("matches", 0))),
                streak=max(0, int(data.get("streak", 0))),
            )
        except (OSError, ValueError, TypeError, AttributeError) as e:
            # 손상된 파일은 0부터 다시 시작
            logger.warning(f"세션 파일을 읽을 수 없습니다 ({self.path}): {e}")
            return SessionCounters()

    def save(self, counters: SessionCounters):
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.path, "wb") as f:
            f.write(orjson.dumps(asdict(counters), option=orjson.OPT_INDENT_2))

    def clear(self, counters: Optional[SessionCounters] = None):
        if counters is not None:
            counters.reset()
        if os.path.exists(self.path):
            os.remove(self.path)

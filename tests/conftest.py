import asyncio
import base64
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from mirror_match.config import MatchConfig
from mirror_match.main import create_app
from mirror_match.services.clients import VisionClientHandle


def make_data_uri(size: int = 200, media_type: str = "image/jpeg") -> str:
    payload = base64.b64encode(bytes(i % 256 for i in range(size))).decode("ascii")
    return f"data:{media_type};base64,{payload}"


def completion(text):
    """chat.completions.create 응답 흉내"""
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


class FakeCompletions:
    def __init__(self):
        self.calls = []
        self.reply = completion('{"emotion": "happy", "confidence": 0.9, "feedback": "Big smile"}')
        self.error = None
        self.delay = 0.0

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


class FakeVisionClient:
    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


@pytest.fixture
def valid_image():
    return make_data_uri()


@pytest.fixture
def match_config(monkeypatch, tmp_path):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("EMOTION_CATALOG", raising=False)
    monkeypatch.delenv("SUCCESS_THRESHOLD", raising=False)
    monkeypatch.delenv("PARTIAL_THRESHOLD", raising=False)
    monkeypatch.setenv("MIRROR_MATCH_SESSION_FILE", str(tmp_path / "session.json"))
    return MatchConfig()


@pytest.fixture
def fake_vision():
    return FakeVisionClient()


@pytest.fixture
def app(match_config, fake_vision):
    app = create_app(match_config)
    app.state.vision = VisionClientHandle(
        client=fake_vision, model="test-model", max_tokens=1000, timeout=1.0,
    )
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def unconfigured_client(match_config):
    return TestClient(create_app(match_config))

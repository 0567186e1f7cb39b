import pytest
import requests

from mirror_match.game import play
from mirror_match.game.backends import RemoteAnalysisBackend
from mirror_match.game.session import SessionStore


class DownSession:
    def get(self, url, timeout=None):
        raise requests.ConnectionError("refused")


@pytest.fixture
def face_image(tmp_path):
    path = tmp_path / "face.png"
    path.write_bytes(b"\x89PNG" + bytes(200))
    return str(path)


@pytest.fixture
def cli_config(monkeypatch, match_config):
    monkeypatch.setattr(play, "get_config", lambda: match_config)
    return match_config


def test_mock_round_from_image_file_is_scored(cli_config, face_image, capsys):
    assert play.main(["--backend", "mock", "--image", face_image]) == 0

    counters = SessionStore(cli_config.game.SESSION_FILE).load()
    assert counters.matches == 1
    assert "목표 감정" in capsys.readouterr().out


def test_bad_catalog_setting_exits_with_usage_error(cli_config, face_image, capsys):
    cli_config.game.CATALOG = "nope"
    with pytest.raises(SystemExit) as exc:
        play.main(["--backend", "mock", "--image", face_image])
    assert exc.value.code == 2
    assert "nope" in capsys.readouterr().err


def test_unreachable_proxy_stops_before_playing(cli_config, face_image, monkeypatch, capsys):
    monkeypatch.setattr(
        play, "build_backend",
        lambda kind, catalog, url, timeout: RemoteAnalysisBackend(url, timeout, session=DownSession()),
    )
    assert play.main(["--image", face_image]) == 1
    assert "연결할 수 없습니다" in capsys.readouterr().out
    assert not SessionStore(cli_config.game.SESSION_FILE).load().matches

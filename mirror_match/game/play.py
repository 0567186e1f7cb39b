#!/usr/bin/env python3
"""
Mirror Match 터미널 게임
목표 감정을 보여주고, 웹캠 프레임(또는 이미지 파일)을 분석해 점수를 매깁니다.
"""

import argparse
import logging
import sys
from typing import Optional

from mirror_match.config import get_config
from mirror_match.game.backends import (
    AnalysisBackend, AnalysisRequestError, MockAnalysisBackend, RemoteAnalysisBackend,
)
from mirror_match.game.camera import CameraError, CameraSession, encode_image_file
from mirror_match.game.emotions import CATALOGS, configure_catalog
from mirror_match.game.feedback import accuracy_text
from mirror_match.game.match import MirrorMatchGame, RoundOutcome
from mirror_match.game.session import SessionStore


def build_backend(kind: str, catalog, url: str, timeout: float) -> AnalysisBackend:
    if kind == "mock":
        return MockAnalysisBackend(catalog)
    return RemoteAnalysisBackend(base_url=url, timeout=timeout)


def check_proxy(backend: RemoteAnalysisBackend) -> bool:
    """게임 시작 전 프록시 연결 확인"""
    try:
        health = backend.health_check()
    except AnalysisRequestError as e:
        print(f"❌ 분석 서비스에 연결할 수 없습니다: {e}")
        print(f"💡 서버 실행 확인: mirror-match-server ({backend.base_url})")
        return False

    if not health.get("vision_configured"):
        print("⚠️ 서버에 OPENAI_API_KEY가 설정되지 않아 분석 요청이 실패합니다")
    else:
        print(f"✅ 분석 서비스 연결됨 (model={health.get('model')})")
    return True


def print_target(game: MirrorMatchGame):
    target = game.target
    print("\n" + "=" * 50)
    print(f"🎯 목표 감정: {target.emoji}  {target.name.upper()}")
    print(f"   {target.description}")
    print("=" * 50)


def print_outcome(outcome: RoundOutcome, game: MirrorMatchGame):
    if not outcome.ok:
        print(f"❌ {outcome.message}")
        print(f"   ({outcome.error})")
        return

    result = outcome.result
    print(f"🤖 AI 판정: {result.emotion} ({round(result.confidence * 100)}% confidence, {accuracy_text(result.confidence)})")
    print(f"   {result.feedback}")
    print(f"💬 {outcome.message}")
    print(f"⭐ +{outcome.points}점 | 총점 {game.counters.score} | 매치 {game.counters.matches} | 연속 성공 {game.counters.streak}")


def run_image(game: MirrorMatchGame, path: str) -> int:
    print_target(game)
    try:
        image = encode_image_file(path)
    except OSError as e:
        print(f"❌ 이미지 파일을 읽을 수 없습니다: {e}")
        return 1
    outcome = game.play_round(image)
    print_outcome(outcome, game)
    return 0 if outcome.ok else 1


def run_interactive(game: MirrorMatchGame, camera_index: int, quality: int) -> int:
    print("📝 사용법: [Enter] 캡처 및 분석 | n 다음 감정 | s 무작위 감정 | r 점수 초기화 | q 종료")
    try:
        with CameraSession(camera_index, quality=quality) as camera:
            print_target(game)
            while True:
                choice = input("> ").strip().lower()
                if choice == "q":
                    break
                if choice == "n":
                    game.next_emotion()
                    print_target(game)
                elif choice == "s":
                    game.random_emotion()
                    print_target(game)
                elif choice == "r":
                    game.reset_counters()
                    print("🔄 점수가 초기화되었습니다")
                elif choice == "":
                    print("📸 캡처 중... 분석 중...")
                    outcome = game.play_round(camera.capture_data_uri())
                    print_outcome(outcome, game)
                else:
                    print("잘못된 선택입니다.")
    except CameraError as e:
        print(f"❌ {e}")
        print("💡 카메라가 연결되어 있는지, 다른 프로그램이 사용 중이지 않은지 확인하세요")
        return 1
    except (KeyboardInterrupt, EOFError):
        print("\n⏹️ 게임이 중단되었습니다.")
    return 0


def main(argv: Optional[list] = None) -> int:
    cfg = get_config()

    parser = argparse.ArgumentParser(description="Mirror Match - 표정 따라하기 게임")
    parser.add_argument("--backend", choices=["remote", "mock"], default="remote",
                        help="분석 백엔드 (remote: 프록시 호출, mock: 무작위 데모)")
    parser.add_argument("--url", default=cfg.game.PROXY_URL, help="프록시 서비스 URL")
    parser.add_argument("--catalog", choices=sorted(CATALOGS), default=cfg.game.CATALOG,
                        help="목표 감정 카탈로그")
    parser.add_argument("--camera", type=int, default=cfg.game.CAMERA_INDEX, help="카메라 인덱스")
    parser.add_argument("--image", help="웹캠 대신 분석할 이미지 파일")
    parser.add_argument("--session-file", default=cfg.game.SESSION_FILE, help="점수 저장 파일")
    parser.add_argument("--reset", action="store_true", help="시작 전에 점수 초기화")
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    # argparse는 기본값을 choices로 검사하지 않는다 (EMOTION_CATALOG 환경 변수)
    try:
        catalog = configure_catalog(
            args.catalog,
            success_threshold=cfg.game.SUCCESS_THRESHOLD,
            partial_threshold=cfg.game.PARTIAL_THRESHOLD,
        )
    except ValueError as e:
        parser.error(str(e))

    backend = build_backend(args.backend, catalog, args.url, cfg.game.CLIENT_TIMEOUT)
    if isinstance(backend, RemoteAnalysisBackend) and not check_proxy(backend):
        return 1

    game = MirrorMatchGame(catalog, backend, store=SessionStore(args.session_file))
    if args.reset:
        game.reset_counters()

    print("🪞 Mirror Match")
    if args.image:
        return run_image(game, args.image)
    return run_interactive(game, args.camera, cfg.image.JPEG_QUALITY)


if __name__ == "__main__":
    sys.exit(main())

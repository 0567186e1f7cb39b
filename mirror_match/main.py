# mirror_match/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mirror_match.api.routes import analyze_emotion, api_router, mirror_match_error_handler
from mirror_match.config import MatchConfig, get_config
from mirror_match.game.emotions import configure_catalog, emotion_names
from mirror_match.services.clients import close_client, init_client
from mirror_match.services.errors import ConfigurationError, MirrorMatchError, log_error

logger = logging.getLogger(__name__)


def _load_catalog(config: MatchConfig):
    """잘못된 카탈로그/임계값 설정은 앱 생성 단계에서 중단"""
    try:
        return configure_catalog(
            config.game.CATALOG,
            success_threshold=config.game.SUCCESS_THRESHOLD,
            partial_threshold=config.game.PARTIAL_THRESHOLD,
        )
    except ValueError as e:
        error = ConfigurationError("Invalid emotion catalog configuration", details=str(e))
        log_error(error)
        raise error from e


def create_app(config: Optional[MatchConfig] = None) -> FastAPI:
    config = config or get_config()

    # 비전 클라이언트 라이프사이클 (키 확인은 앱 생성 시 한 번)
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await close_client(app.state.vision)
        logger.info("비전 클라이언트 정리 완료")

    app = FastAPI(title="Mirror Match", version="1.0.0", lifespan=lifespan)
    app.state.config = config
    app.state.catalog = _load_catalog(config)
    app.state.emotion_names = emotion_names(app.state.catalog)
    app.state.vision = init_client(config)

    # CORS (개발 편의)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 라우터 등록 (/api/analyze-emotion + 루트 경로 /analyze-emotion)
    app.include_router(api_router)
    app.add_api_route("/analyze-emotion", analyze_emotion, methods=["POST"])
    app.add_exception_handler(MirrorMatchError, mirror_match_error_handler)

    return app


def run():
    import uvicorn

    config = get_config()
    logging.basicConfig(
        level=getattr(logging, config.server.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(config),
        host=config.server.HOST,
        port=config.server.PORT,
        log_level=config.server.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()

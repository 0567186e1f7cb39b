# mirror_match/api/routes.py
import logging
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
import orjson

from mirror_match.services.clients import VisionClientHandle
from mirror_match.services.errors import (
    ConfigurationError, InputError, MirrorMatchError, log_error,
)
from mirror_match.services.image_payload import parse_data_uri
from mirror_match.services.vision_analyzer import analyze_image

logger = logging.getLogger(__name__)

# /api 접두어로 고정
api_router = APIRouter(prefix="/api")

# 고성능 JSON 응답 유틸
def oj(data: Any, status: int = 200) -> JSONResponse:
    return JSONResponse(content=orjson.loads(orjson.dumps(data)), status_code=status)


def _vision_handle(request: Request) -> VisionClientHandle:
    state = getattr(request.app.state, "vision", None)
    if not isinstance(state, VisionClientHandle):
        raise ConfigurationError("API configuration error")
    return state


async def _read_body(request: Request) -> dict:
    raw = await request.body()
    try:
        body = orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        logger.warning(f"요청 JSON 파싱 실패: {e}")
        raise InputError("Invalid request body")
    if not isinstance(body, dict):
        raise InputError("Invalid request body")
    return body


@api_router.get("/health")
async def health(request: Request):
    cfg = request.app.state.config
    return {
        "status": "ok",
        "service": "mirror-match",
        "vision_configured": isinstance(getattr(request.app.state, "vision", None), VisionClientHandle),
        "model": cfg.vision.MODEL,
    }


@api_router.get("/emotions")
async def emotions(request: Request):
    """현재 카탈로그의 목표 감정 목록"""
    cfg = request.app.state.config
    catalog = request.app.state.catalog
    return oj({"catalog": cfg.game.CATALOG, "emotions": [e.to_dict() for e in catalog]})


@api_router.post("/analyze-emotion")
async def analyze_emotion(request: Request):
    """
    표정 분석 프록시
    Args: {"image": "data:image/jpeg;base64,..."}
    Returns: {"emotion", "confidence", "feedback"} 또는 {"error", "details"?}
    """
    logger.info("표정 분석 요청 수신")
    try:
        handle = _vision_handle(request)
        body = await _read_body(request)

        cfg = request.app.state.config
        image = parse_data_uri(
            body.get("image"),
            min_bytes=cfg.image.MIN_IMAGE_BYTES,
            allowed_media_types=cfg.image.ALLOWED_MEDIA_TYPES,
            default_media_type=cfg.image.DEFAULT_MEDIA_TYPE,
        )
        logger.info(f"이미지 확인: {image.media_type}, {image.size} bytes")

        result, _ = await analyze_image(handle, image, request.app.state.emotion_names)
        return oj(result.to_dict())

    except MirrorMatchError:
        raise
    except Exception as e:
        logger.exception(f"표정 분석 중 처리되지 않은 오류: {e}")
        return oj({"error": "Failed to analyze emotion", "details": str(e)}, status=500)


async def mirror_match_error_handler(request: Request, exc: MirrorMatchError) -> JSONResponse:
    log_error(exc, {"path": request.url.path})
    return oj(exc.to_payload(), status=exc.status_code)

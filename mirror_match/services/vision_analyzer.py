"""
외부 비전 API 호출
이미지와 고정 프롬프트를 보내고, 응답 텍스트를 AnalysisResult로 정규화한다.
"""

import asyncio
import logging
import time
from typing import Any, Optional, Sequence, Tuple

import openai

from mirror_match.services.clients import VisionClientHandle
from mirror_match.services.errors import UpstreamError, UpstreamTimeoutError
from mirror_match.services.image_payload import EncodedImage
from mirror_match.services.response_parser import AnalysisResult, ParseOutcome, parse_analysis_text

logger = logging.getLogger(__name__)

UPSTREAM_ERROR_MESSAGE = "Error communicating with AI service"
UPSTREAM_TIMEOUT_MESSAGE = "AI service timed out"


def _join_names(names: Sequence[str]) -> str:
    if len(names) <= 1:
        return "".join(names)
    return ", ".join(names[:-1]) + f", or {names[-1]}"


def build_prompt(emotion_names: Sequence[str]) -> str:
    """모델이 고를 수 있는 감정 목록과 응답 JSON 형태를 고정한 지시문"""
    names = list(emotion_names)
    return (
        "Analyze the facial expression in this image. "
        f"The person is trying to express one of these emotions: {_join_names(names)}. "
        "Which one matches best? Respond with ONLY a JSON object with these properties: "
        f"'emotion' (string - one of: {', '.join(names)}), "
        "'confidence' (number between 0 and 1), "
        "and 'feedback' (brief text explaining why)."
    )


def build_messages(image: EncodedImage, emotion_names: Sequence[str]) -> list:
    return [{
        "role": "user",
        "content": [
            {"type": "text", "text": build_prompt(emotion_names)},
            {"type": "image_url", "image_url": {"url": image.data_url}},
        ],
    }]


def _response_text(resp: Any) -> Optional[str]:
    choices = getattr(resp, "choices", None) or []
    if not choices:
        return None
    message = getattr(choices[0], "message", None)
    return getattr(message, "content", None)


async def request_analysis(handle: VisionClientHandle, image: EncodedImage,
                           emotion_names: Sequence[str]) -> Optional[str]:
    """
    (비동기) 비전 API 호출. 재시도 없음.

    Returns:
        모델 응답 텍스트 (없으면 None)
    Raises:
        UpstreamTimeoutError: handle.timeout 안에 응답이 없음
        UpstreamError: 네트워크/인증/요청 한도/서비스 오류
    """
    started = time.time()
    logger.info(f"비전 API 호출 중... (model={handle.model}, {image.size} bytes)")

    try:
        resp = await asyncio.wait_for(
            handle.client.chat.completions.create(
                model=handle.model,
                max_tokens=handle.max_tokens,
                messages=build_messages(image, emotion_names),
            ),
            timeout=handle.timeout,
        )
    except (asyncio.TimeoutError, openai.APITimeoutError) as e:
        raise UpstreamTimeoutError(UPSTREAM_TIMEOUT_MESSAGE, details=str(e) or f"no response within {handle.timeout}s")
    except openai.OpenAIError as e:
        raise UpstreamError(UPSTREAM_ERROR_MESSAGE, details=str(e) or type(e).__name__)

    logger.info(f"비전 API 응답 수신 ({time.time() - started:.2f}초)")
    text = _response_text(resp)
    logger.debug(f"응답 텍스트: {text!r}")
    return text


async def analyze_image(handle: VisionClientHandle, image: EncodedImage,
                        emotion_names: Sequence[str]) -> Tuple[AnalysisResult, ParseOutcome]:
    """업스트림 호출 + 응답 정규화"""
    text = await request_analysis(handle, image, emotion_names)
    result, outcome = parse_analysis_text(text)
    logger.info(f"파싱 결과: {outcome.value} -> {result.emotion} ({result.confidence:.2f})")
    return result, outcome

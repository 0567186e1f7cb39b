import logging
from dataclasses import dataclass
from typing import Any, Union

import httpx
from openai import AsyncOpenAI

from mirror_match.config import MatchConfig

logger = logging.getLogger(__name__)


@dataclass
class VisionClientHandle:
    """초기화가 끝난 비전 API 클라이언트"""
    client: Any  # AsyncOpenAI 또는 같은 인터페이스를 가진 객체
    model: str
    max_tokens: int
    timeout: float
    http_client: Union[httpx.AsyncClient, None] = None


@dataclass
class ClientUnavailable:
    """클라이언트를 만들 수 없었던 이유"""
    reason: str


VisionClientState = Union[VisionClientHandle, ClientUnavailable]


def init_client(config: MatchConfig) -> VisionClientState:
    """
    프로세스 시작 시 한 번 호출. API 키가 없거나 생성에 실패하면
    ClientUnavailable을 돌려주고, 요청 경로에서는 이 상태만 확인한다.
    """
    params = config.get_client_params()
    if not params['api_key']:
        logger.error("OPENAI_API_KEY 환경변수가 설정되지 않았습니다 - 모든 분석 요청이 설정 오류로 응답합니다")
        return ClientUnavailable(reason="missing credential")

    try:
        limits = httpx.Limits(
            max_connections=params['max_connections'],
            max_keepalive_connections=params['max_keepalive'],
        )
        http_client = httpx.AsyncClient(timeout=params['timeout'], limits=limits)
        client = AsyncOpenAI(
            api_key=params['api_key'],
            timeout=params['timeout'],
            max_retries=0,
            http_client=http_client,
        )
    except Exception as e:
        logger.error(f"비전 클라이언트 초기화 실패: {e}")
        return ClientUnavailable(reason=str(e))

    logger.info(f"비전 클라이언트 초기화 완료 (model={config.vision.MODEL})")
    return VisionClientHandle(
        client=client,
        model=config.vision.MODEL,
        max_tokens=config.vision.MAX_TOKENS,
        timeout=config.vision.TIMEOUT,
        http_client=http_client,
    )


async def close_client(state: VisionClientState):
    if isinstance(state, VisionClientHandle) and state.http_client is not None:
        await state.http_client.aclose()
        state.http_client = None

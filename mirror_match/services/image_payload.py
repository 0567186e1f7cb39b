"""
data URI 이미지 페이로드 파싱 및 검증
"""

import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Any, Iterable

from mirror_match.services.errors import FormatError, InputError

logger = logging.getLogger(__name__)

DATA_URI_SCHEME = "data:"
BASE64_FLAG = ";base64"


@dataclass(frozen=True)
class EncodedImage:
    """검증을 통과한 data URI 이미지"""
    media_type: str
    data: str  # base64 문자열
    size: int  # 디코딩된 바이트 수

    @property
    def data_url(self) -> str:
        return f"data:{self.media_type};base64,{self.data}"


def parse_data_uri(
    image: Any,
    min_bytes: int = 75,
    allowed_media_types: Iterable[str] = ("image/jpeg", "image/png", "image/gif", "image/webp"),
    default_media_type: str = "image/jpeg",
) -> EncodedImage:
    """
    'data:<mime>;base64,<payload>' 문자열을 검증하고 EncodedImage로 변환

    Raises:
        InputError: image 값이 비어 있음
        FormatError: 형식/인코딩/크기 검증 실패
    """
    if image is None or image == "":
        raise InputError("Image data is required")

    if not isinstance(image, str) or not image.startswith(DATA_URI_SCHEME):
        raise FormatError("Invalid image format")

    parts = image.split(",")
    if len(parts) != 2:
        raise FormatError("Invalid image data format")

    header, payload = parts
    meta = header[len(DATA_URI_SCHEME):]

    # base64 플래그 없는 data URI는 퍼센트 인코딩이라 지원하지 않음
    if not meta.endswith(BASE64_FLAG):
        raise FormatError("Invalid image format")

    media_type = meta[: -len(BASE64_FLAG)].split(";")[0].strip().lower() or default_media_type
    if media_type not in tuple(allowed_media_types):
        raise FormatError("Invalid image format")

    payload = payload.strip()
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError):
        raise FormatError("Invalid image data encoding")

    if len(raw) < min_bytes:
        raise FormatError("Image data is too small or empty")

    logger.debug(f"이미지 파싱 완료: {media_type}, {len(raw)} bytes")
    return EncodedImage(media_type=media_type, data=payload, size=len(raw))

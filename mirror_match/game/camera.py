"""
웹캠 캡처
카메라는 한 번에 하나만 잡을 수 있으므로 새로 열기 전에 이전 장치를 반드시 해제한다.
"""

import base64
import logging
import mimetypes
from typing import Any, Callable, Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)


class CameraError(Exception):
    """카메라 열기/프레임 읽기 실패"""


def encode_frame(frame: np.ndarray, quality: int = 80) -> str:
    """OpenCV 프레임(BGR) → data:image/jpeg;base64,... 문자열"""
    if frame is None or frame.size == 0:
        raise CameraError("empty frame")
    ok, buffer = cv2.imencode('.jpg', frame, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
    if not ok:
        raise CameraError("JPEG encoding failed")
    image_base64 = base64.b64encode(buffer.tobytes()).decode('utf-8')
    return f"data:image/jpeg;base64,{image_base64}"


def encode_image_file(path: str) -> str:
    """이미지 파일 → data URI (media type은 확장자로 추정)"""
    media_type = mimetypes.guess_type(path)[0] or "image/jpeg"
    with open(path, "rb") as f:
        image_base64 = base64.b64encode(f.read()).decode('utf-8')
    return f"data:{media_type};base64,{image_base64}"


class CameraSession:
    """
    cv2.VideoCapture 래퍼

    with CameraSession(0) as camera:
        image = camera.capture_data_uri()
    """

    def __init__(self, camera_index: int = 0, quality: int = 80,
                 capture_factory: Callable[[int], Any] = cv2.VideoCapture):
        self.camera_index = camera_index
        self.quality = quality
        self.capture_factory = capture_factory
        self.cap: Optional[Any] = None

    @property
    def is_open(self) -> bool:
        return self.cap is not None

    def open(self, camera_index: Optional[int] = None):
        # 이전 스트림 먼저 해제
        self.release()
        if camera_index is not None:
            self.camera_index = camera_index

        cap = self.capture_factory(self.camera_index)
        if not cap.isOpened():
            cap.release()
            raise CameraError(f"카메라 {self.camera_index}을(를) 열 수 없습니다")

        self.cap = cap
        logger.info(f"카메라 {self.camera_index} 열림")
        return self

    def capture(self) -> np.ndarray:
        if self.cap is None:
            raise CameraError("카메라가 열려 있지 않습니다")
        ret, frame = self.cap.read()
        if not ret or frame is None:
            raise CameraError("프레임을 읽을 수 없습니다")
        return frame

    def capture_data_uri(self) -> str:
        return encode_frame(self.capture(), self.quality)

    def release(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info(f"카메라 {self.camera_index} 해제")

    def __enter__(self):
        if self.cap is None:
            self.open()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


def find_camera(max_index: int = 3,
                capture_factory: Callable[[int], Any] = cv2.VideoCapture) -> Optional[int]:
    """프레임을 읽을 수 있는 첫 번째 카메라 인덱스"""
    for camera_index in range(max_index):
        cap = capture_factory(camera_index)
        try:
            if cap.isOpened():
                ret, _ = cap.read()
                if ret:
                    return camera_index
        finally:
            cap.release()
    return None

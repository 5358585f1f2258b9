# src/utils/camera.py
from __future__ import annotations

import enum
from typing import Optional

from utils.errors import ImageProcessingError, InvalidTransition
from utils.image_utils import JPEG_QUALITY, encode_jpeg, open_image

PERMISSION_MESSAGE = "Could not access camera. Please allow camera permissions."


class CameraState(str, enum.Enum):
    CLOSED = "closed"
    STREAMING = "streaming"
    CAPTURED = "captured"
    ERROR = "error"


class CameraSession:
    """
    Lifecycle of the selfie dialog. The browser stream is only held while
    STREAMING; every other state has released it.
    """

    def __init__(self):
        self.state = CameraState.CLOSED
        self.photo: Optional[bytes] = None
        self.error: Optional[str] = None
        self.acquisitions = 0

    @property
    def stream_active(self) -> bool:
        return self.state is CameraState.STREAMING

    @property
    def is_open(self) -> bool:
        return self.state is not CameraState.CLOSED

    def open(self) -> None:
        if self.stream_active:
            return
        self.photo = None
        self.error = None
        self.state = CameraState.STREAMING
        self.acquisitions += 1

    def capture(self, frame: bytes) -> bytes:
        """Re-encode the current frame as JPEG and stop streaming."""
        if not self.stream_active:
            raise InvalidTransition(f"cannot capture while {self.state.value}")
        try:
            self.photo = encode_jpeg(open_image(frame), quality=JPEG_QUALITY)
        except ImageProcessingError:
            self.fail("Could not read the picture from your camera. Please try again.")
            raise
        self.state = CameraState.CAPTURED
        return self.photo

    def retake(self) -> None:
        if self.state not in (CameraState.CAPTURED, CameraState.ERROR):
            raise InvalidTransition(f"cannot retake while {self.state.value}")
        self.state = CameraState.CLOSED
        self.open()

    def confirm(self) -> bytes:
        if self.state is not CameraState.CAPTURED or self.photo is None:
            raise InvalidTransition(f"cannot confirm while {self.state.value}")
        photo = self.photo
        self.close()
        return photo

    def fail(self, message: str = PERMISSION_MESSAGE) -> None:
        self.error = message
        self.photo = None
        self.state = CameraState.ERROR

    def close(self) -> None:
        self.photo = None
        self.error = None
        self.state = CameraState.CLOSED

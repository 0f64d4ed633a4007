"""
Host-resident pitched transfer backend.

Keeps the DeviceTransfer contract on machines without a CUDA-enabled OpenCV
build. Buffers are laid out like pitched device allocations: each row is
padded so the pitch is a multiple of the configured alignment.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from models.image import DeviceImage, HostImage
from .base import DeviceError, DeviceTransfer


def aligned_pitch(width: int, alignment: int) -> int:
    """Round a row width in bytes up to the next multiple of alignment."""
    return ((width + alignment - 1) // alignment) * alignment


class PitchedHostTransfer(DeviceTransfer):
    """
    Transfer backend that stores images in row-padded host buffers.

    Example:
        transfer = PitchedHostTransfer(pitch_alignment=512)
        device_image = transfer.upload(image)
        assert device_image.pitch % 512 == 0
    """

    name = "host"

    def __init__(self, pitch_alignment: int = 512):
        super().__init__()
        if pitch_alignment <= 0 or pitch_alignment & (pitch_alignment - 1):
            raise DeviceError(f"pitch_alignment must be a power of two, got {pitch_alignment}")
        self.pitch_alignment = pitch_alignment

    def _allocate_and_copy(self, image: HostImage) -> DeviceImage:
        pitch = aligned_pitch(image.width, self.pitch_alignment)
        buffer = np.zeros((image.height, pitch), dtype=np.uint8)
        buffer[:, : image.width] = image.data
        return DeviceImage(
            width=image.width,
            height=image.height,
            pitch=pitch,
            backend=self.name,
            buffer=buffer,
        )

    def _read_pixels(self, device_image: DeviceImage) -> np.ndarray:
        return device_image.buffer[:, : device_image.width]

    def _release(self, buffer: Any) -> None:
        """Nothing to release; free() drops the last reference to the buffer."""

"""
CUDA transfer backend using OpenCV's cuda module.

Requires an OpenCV build with CUDA support (the wheels on PyPI are CPU-only,
in which case getCudaEnabledDeviceCount() returns 0).
"""

from __future__ import annotations

import logging
from typing import Any

import cv2
import numpy as np

from models.image import DeviceImage, HostImage
from .base import DeviceError, DeviceTransfer


def cuda_device_count() -> int:
    """Number of CUDA devices visible to OpenCV (0 for CPU-only builds)."""
    cuda = getattr(cv2, "cuda", None)
    if cuda is None:
        return 0
    try:
        return int(cuda.getCudaEnabledDeviceCount())
    except cv2.error as e:
        logging.debug(f"CUDA device query failed: {e}")
        return 0


class CudaTransfer(DeviceTransfer):
    """Transfer backend backed by cv2.cuda_GpuMat pitched allocations."""

    name = "cuda"

    def __init__(self, device_id: int = 0):
        super().__init__()
        count = cuda_device_count()
        if count == 0:
            raise DeviceError("No CUDA-enabled device available to OpenCV")
        if device_id < 0 or device_id >= count:
            raise DeviceError(f"CUDA device {device_id} out of range (found {count})")
        try:
            cv2.cuda.setDevice(device_id)
        except cv2.error as e:
            raise DeviceError(f"Failed to select CUDA device {device_id}: {e}") from e
        self.device_id = device_id

    def _allocate_and_copy(self, image: HostImage) -> DeviceImage:
        gpu_mat = cv2.cuda_GpuMat()
        try:
            gpu_mat.upload(image.as_contiguous())
        except cv2.error as e:
            raise DeviceError(f"Upload to CUDA device failed: {e}") from e
        return DeviceImage(
            width=image.width,
            height=image.height,
            pitch=int(gpu_mat.step),
            backend=self.name,
            buffer=gpu_mat,
        )

    def _read_pixels(self, device_image: DeviceImage) -> np.ndarray:
        try:
            return device_image.buffer.download()
        except cv2.error as e:
            raise DeviceError(f"Download from CUDA device failed: {e}") from e

    def _release(self, buffer: Any) -> None:
        buffer.release()

"""
Device image transfer layer.

Backends move grayscale images between host memory and a pitched device
buffer:
- cuda: OpenCV CUDA module (cv2.cuda_GpuMat)
- host: row-padded host buffers for machines without CUDA
"""

from __future__ import annotations

import logging
from typing import Any, Dict

import cv2

from models.config import DeviceConfig
from .base import DeviceError, DeviceTransfer, round_trip
from .cuda_transfer import CudaTransfer, cuda_device_count
from .host_transfer import PitchedHostTransfer, aligned_pitch


VALID_BACKENDS = ("auto", "cuda", "host")


def create_transfer(config: DeviceConfig) -> DeviceTransfer:
    """
    Factory: create a transfer backend from config.

    "auto" uses CUDA when OpenCV reports a device and falls back to the
    pitched host backend otherwise.
    """
    backend = config.backend
    if backend not in VALID_BACKENDS:
        raise DeviceError(f"Unknown device backend '{backend}' (expected one of {', '.join(VALID_BACKENDS)})")

    if backend == "cuda" or (backend == "auto" and cuda_device_count() > 0):
        return CudaTransfer(device_id=config.device_id)

    if backend == "auto":
        logging.info("No CUDA device available, using pitched host buffers")
    return PitchedHostTransfer(pitch_alignment=config.pitch_alignment)


def device_info(device_id: int = 0) -> Dict[str, Any]:
    """Report the OpenCV version and visible CUDA devices."""
    info: Dict[str, Any] = {
        "opencv_version": cv2.__version__,
        "cuda_devices": cuda_device_count(),
        "device_name": None,
    }
    if info["cuda_devices"] > device_id:
        try:
            info["device_name"] = cv2.cuda.DeviceInfo(device_id).name()
        except (cv2.error, AttributeError) as e:
            logging.debug(f"Could not query CUDA device {device_id}: {e}")
    return info


__all__ = [
    "DeviceError",
    "DeviceTransfer",
    "CudaTransfer",
    "PitchedHostTransfer",
    "aligned_pitch",
    "create_transfer",
    "cuda_device_count",
    "device_info",
    "round_trip",
    "VALID_BACKENDS",
]

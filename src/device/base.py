"""
DeviceTransfer interface for moving grayscale images to and from a device.

A backend owns the buffers it allocates. Callers only see DeviceImage
handles and must hand them back to the same backend to download or free.

Lifecycle:
    1. Create the backend
    2. upload() a HostImage to get a DeviceImage
    3. download() it back into host memory
    4. free() the DeviceImage (or close() the backend to free everything)

Can also be used as a context manager:
    with create_transfer(config) as transfer:
        host = round_trip(transfer, image)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, List, Optional

import numpy as np

from models.image import DeviceImage, HostImage


class DeviceError(RuntimeError):
    """Raised for device selection, allocation and transfer failures."""


class DeviceTransfer(ABC):
    """Abstract base class for image transfer backends."""

    name = "abstract"

    def __init__(self):
        self._live: List[DeviceImage] = []

    @property
    def live_count(self) -> int:
        """Number of device images allocated and not yet freed."""
        return len(self._live)

    @abstractmethod
    def _allocate_and_copy(self, image: HostImage) -> DeviceImage:
        """Allocate a device buffer and copy the host pixels into it."""

    @abstractmethod
    def _read_pixels(self, device_image: DeviceImage) -> np.ndarray:
        """Return the device pixels as a (height, width) uint8 host array."""

    @abstractmethod
    def _release(self, buffer: Any) -> None:
        """Release a backend buffer."""

    def upload(self, image: HostImage) -> DeviceImage:
        """Copy a host image into a newly allocated device image."""
        device_image = self._allocate_and_copy(image)
        self._live.append(device_image)
        logging.debug(
            f"Uploaded {image.width}x{image.height} image to {self.name} "
            f"(pitch={device_image.pitch})"
        )
        return device_image

    def download(self, device_image: DeviceImage, into: Optional[HostImage] = None) -> HostImage:
        """
        Copy a device image back to host memory.

        If `into` is given, rows are written into its pixel view so any row
        padding in its buffer is left untouched.
        """
        self._check_valid(device_image)
        pixels = self._read_pixels(device_image)

        if into is None:
            return HostImage.from_numpy(np.array(pixels, dtype=np.uint8, copy=True))

        if into.size != device_image.size:
            raise DeviceError(
                f"Destination size {into.width}x{into.height} does not match "
                f"device image {device_image.width}x{device_image.height}"
            )
        into.data[:, :] = pixels
        return into

    def free(self, device_image: DeviceImage) -> None:
        """Release a device image. Freeing twice is an error."""
        self._check_valid(device_image)
        self._release(device_image.buffer)
        device_image.buffer = None
        device_image.freed = True
        self._live = [d for d in self._live if d is not device_image]

    def close(self) -> None:
        """Free every device image still allocated. Safe to call multiple times."""
        for device_image in list(self._live):
            self.free(device_image)

    def _check_valid(self, device_image: DeviceImage) -> None:
        if device_image.backend != self.name:
            raise DeviceError(
                f"Device image belongs to backend '{device_image.backend}', not '{self.name}'"
            )
        if not device_image.is_valid:
            raise DeviceError("Device image has already been freed")

    def __enter__(self) -> "DeviceTransfer":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def round_trip(transfer: DeviceTransfer, image: HostImage) -> HostImage:
    """
    Upload an image, download it into a fresh host image, then free the device copy.

    The device image is freed even when the download fails.
    """
    device_image = transfer.upload(image)
    try:
        result = HostImage.allocate(device_image.width, device_image.height)
        transfer.download(device_image, into=result)
    finally:
        transfer.free(device_image)
    result.source = image.source
    return result

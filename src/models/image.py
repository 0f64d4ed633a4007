"""
Image models for host- and device-resident grayscale images.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np


@dataclass
class HostImage:
    """
    An 8-bit single-channel image in host memory.

    Attributes:
        data: 2-D uint8 array of shape (height, width). May be a view into a
            wider buffer, in which case pitch > width.
        width: Image width in pixels.
        height: Image height in pixels.
        pitch: Bytes between the starts of consecutive rows.
        source: Path the image was loaded from, if any.
    """
    data: np.ndarray
    width: int
    height: int
    pitch: int
    source: Optional[str] = None

    @classmethod
    def from_numpy(cls, array: np.ndarray, source: Optional[str] = None) -> "HostImage":
        """Create a HostImage from a 2-D uint8 numpy array."""
        if array is None or array.ndim != 2:
            raise ValueError("Host image must be a 2-D (single channel) array")
        if array.dtype != np.uint8:
            raise ValueError(f"Host image must be uint8, got {array.dtype}")
        h, w = array.shape
        if w == 0 or h == 0:
            raise ValueError("Host image must have non-zero width and height")
        return cls(data=array, width=w, height=h, pitch=int(array.strides[0]), source=source)

    @classmethod
    def allocate(cls, width: int, height: int) -> "HostImage":
        """Allocate a zero-filled, tightly packed image."""
        if width <= 0 or height <= 0:
            raise ValueError(f"Invalid image size {width}x{height}")
        return cls.from_numpy(np.zeros((height, width), dtype=np.uint8))

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)

    @property
    def shape(self) -> Tuple[int, int]:
        """Return (height, width)."""
        return (self.height, self.width)

    @property
    def is_pitched(self) -> bool:
        return self.pitch > self.width

    def as_contiguous(self) -> np.ndarray:
        """Return the pixels as a tightly packed array (copy only when needed)."""
        return np.ascontiguousarray(self.data)


@dataclass
class DeviceImage:
    """
    Handle to an image held by a DeviceTransfer backend.

    The buffer is opaque to callers; only the backend that created it may
    read or release it.
    """
    width: int
    height: int
    pitch: int
    backend: str
    buffer: Any = None
    freed: bool = False

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def is_valid(self) -> bool:
        return not self.freed and self.buffer is not None

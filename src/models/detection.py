"""
Detection models for face detection results.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Tuple

import numpy as np


@dataclass(frozen=True)
class BoundingBox:
    """
    A bounding box in pixel coordinates.

    Attributes:
        x1: Left edge x coordinate.
        y1: Top edge y coordinate.
        x2: Right edge x coordinate.
        y2: Bottom edge y coordinate.
    """
    x1: int
    y1: int
    x2: int
    y2: int

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1

    @property
    def center(self) -> Tuple[float, float]:
        return ((self.x1 + self.x2) / 2, (self.y1 + self.y2) / 2)

    @property
    def area(self) -> int:
        return self.width * self.height

    def as_tuple(self) -> Tuple[int, int, int, int]:
        """Return as (x1, y1, x2, y2) tuple."""
        return (self.x1, self.y1, self.x2, self.y2)

    def as_int_tuple(self) -> Tuple[int, int, int, int]:
        """Return as integer (x1, y1, x2, y2) tuple."""
        return (int(self.x1), int(self.y1), int(self.x2), int(self.y2))

    def as_xywh(self) -> Tuple[int, int, int, int]:
        """Return as (x, y, width, height), the layout cv2 uses for rects."""
        return (int(self.x1), int(self.y1), int(self.width), int(self.height))

    @classmethod
    def from_tuple(cls, t: Tuple[int, int, int, int]) -> "BoundingBox":
        """Create from (x1, y1, x2, y2) tuple."""
        return cls(x1=t[0], y1=t[1], x2=t[2], y2=t[3])

    @classmethod
    def from_xywh(cls, x: int, y: int, w: int, h: int) -> "BoundingBox":
        """Create from (x, y, width, height) format."""
        return cls(x1=x, y1=y, x2=x + w, y2=y + h)


@dataclass(frozen=True)
class Detection:
    """
    A single detection from the cascade classifier.

    Attributes:
        bbox: Bounding box in pixel coordinates.
        confidence: Detection confidence. Cascade detections are binary, so 1.0.
        class_name: Human-readable label.
    """
    bbox: BoundingBox
    confidence: float = 1.0
    class_name: str = "face"

    @property
    def x(self) -> int:
        return self.bbox.x1

    @property
    def y(self) -> int:
        return self.bbox.y1

    @property
    def width(self) -> int:
        return self.bbox.width

    @property
    def height(self) -> int:
        return self.bbox.height

    @classmethod
    def from_rect(cls, x: int, y: int, w: int, h: int, class_name: str = "face") -> "Detection":
        """Create Detection from an (x, y, width, height) rect."""
        return cls(bbox=BoundingBox.from_xywh(int(x), int(y), int(w), int(h)), class_name=class_name)

    def to_dict(self) -> dict:
        return {
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "confidence": self.confidence,
            "class_name": self.class_name,
        }


def detections_from_rects(rects: Any) -> List[Detection]:
    """
    Adapter: Convert detectMultiScale output to Detection objects.

    Args:
        rects: Array of shape (N, 4) with rows [x, y, w, h]. OpenCV returns an
            empty tuple when nothing is found.
    """
    if rects is None or len(rects) == 0:
        return []
    return [Detection.from_rect(*row[:4]) for row in np.asarray(rects)]


def detections_to_numpy(detections: List[Detection]) -> np.ndarray:
    """
    Adapter: Convert list of Detection objects to numpy array.

    Returns:
        Array of shape (N, 4) with [x, y, w, h].
    """
    if not detections:
        return np.empty((0, 4), dtype=np.int32)
    return np.array([d.bbox.as_xywh() for d in detections], dtype=np.int32)

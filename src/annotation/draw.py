"""
Bounding box drawing.
"""

from __future__ import annotations

from typing import Iterable

import cv2

from models.detection import Detection
from models.image import HostImage


def draw_detections(
    image: HostImage,
    detections: Iterable[Detection],
    color: int = 255,
    thickness: int = 2,
) -> HostImage:
    """
    Draw a rectangle around each detection and return a new grayscale image.

    Drawing happens on a BGR copy, which is converted back to gray for
    output. The input image is left unchanged.
    """
    bgr = cv2.cvtColor(image.as_contiguous(), cv2.COLOR_GRAY2BGR)
    for det in detections:
        # x2/y2 are exclusive; cv2.rectangle takes the inclusive corner
        x1, y1, x2, y2 = det.bbox.as_int_tuple()
        cv2.rectangle(bgr, (x1, y1), (x2 - 1, y2 - 1), (color, color, color), thickness)
    gray = cv2.cvtColor(bgr, cv2.COLOR_BGR2GRAY)
    return HostImage.from_numpy(gray, source=image.source)

"""
Viola-Jones cascade face detector.

Wraps cv2.CascadeClassifier; model loading and multi-scale evaluation are
done entirely by OpenCV.
"""

from __future__ import annotations

import logging
import os
from typing import List

import cv2
import numpy as np

from models.config import DetectionConfig
from models.detection import Detection, detections_from_rects
from .base import Detector


CASCADE_FLAGS = {
    "none": 0,
    "scale_image": cv2.CASCADE_SCALE_IMAGE,
    "do_canny_pruning": cv2.CASCADE_DO_CANNY_PRUNING,
    "find_biggest_object": cv2.CASCADE_FIND_BIGGEST_OBJECT,
    "do_rough_search": cv2.CASCADE_DO_ROUGH_SEARCH,
}


class CascadeLoadError(RuntimeError):
    """Raised when a cascade model cannot be loaded."""


def cascade_flags(name: str) -> int:
    """Map a flag name from config to the OpenCV constant."""
    try:
        return CASCADE_FLAGS[name]
    except KeyError:
        raise ValueError(
            f"Unknown cascade flag '{name}' (expected one of {', '.join(CASCADE_FLAGS)})"
        ) from None


def resolve_cascade_path(path: str) -> str:
    """
    Resolve a cascade path.

    Existing paths are returned unchanged. Bare file names fall back to the
    cascades bundled with opencv-python (cv2.data.haarcascades).
    """
    if os.path.exists(path):
        return path
    data = getattr(cv2, "data", None)
    if data is not None and os.path.basename(path) == path:
        bundled = os.path.join(data.haarcascades, path)
        if os.path.exists(bundled):
            return bundled
    return path


class CascadeFaceDetector(Detector):
    """
    Face detector backed by a pre-trained cascade classifier.

    Example:
        detector = CascadeFaceDetector(DetectionConfig(cascade_path="face.xml"))
        detections, timing = detector.detect_timed(gray)
    """

    def __init__(self, config: DetectionConfig):
        self.config = config
        self._flags = cascade_flags(config.flags)
        self.cascade_path = resolve_cascade_path(config.cascade_path)
        self._classifier = self._load(self.cascade_path)

    @staticmethod
    def _load(path: str) -> cv2.CascadeClassifier:
        logging.info("Loading cascade classifier...")
        try:
            classifier = cv2.CascadeClassifier(path)
        except cv2.error as e:
            raise CascadeLoadError(f"Failed to load cascade classifier from {path}: {e}") from e
        if classifier.empty():
            raise CascadeLoadError(f"Failed to load cascade classifier from {path}")
        logging.info("Cascade classifier loaded...")
        return classifier

    def detect(self, image: np.ndarray) -> List[Detection]:
        kwargs = {
            "scaleFactor": self.config.scale_factor,
            "minNeighbors": self.config.min_neighbors,
            "flags": self._flags,
            "minSize": tuple(self.config.min_size),
        }
        if self.config.max_size:
            kwargs["maxSize"] = tuple(self.config.max_size)
        rects = self._classifier.detectMultiScale(image, **kwargs)
        return detections_from_rects(rects)

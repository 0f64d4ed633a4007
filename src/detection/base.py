"""
Detection interface.

Detectors take a single-channel 8-bit image and return detections in
pixel coordinates of that image.
"""

from __future__ import annotations

import time
from typing import List, Tuple

import numpy as np

from models.detection import Detection
from models.result import DetectionTiming


class Detector:
    """Detector interface returning detections in pixel-space."""

    def detect(self, image: np.ndarray) -> List[Detection]:
        raise NotImplementedError

    def detect_timed(self, image: np.ndarray) -> Tuple[List[Detection], DetectionTiming]:
        """Run detect() and measure only the detection call."""
        start = time.perf_counter_ns()
        detections = self.detect(image)
        elapsed = time.perf_counter_ns() - start
        return detections, DetectionTiming(elapsed_ns=elapsed)

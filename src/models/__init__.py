"""
Typed models for the face detection tool.

Use the adapter functions to convert from OpenCV arrays and config dicts.
"""

from .image import HostImage, DeviceImage
from .detection import Detection, BoundingBox
from .result import DetectionTiming, FaceDetectionResult
from .config import (
    Config,
    DetectionConfig,
    DeviceConfig,
    AnnotationConfig,
    OutputConfig,
)

__all__ = [
    # Images
    "HostImage",
    "DeviceImage",
    # Detection
    "Detection",
    "BoundingBox",
    # Results
    "DetectionTiming",
    "FaceDetectionResult",
    # Config
    "Config",
    "DetectionConfig",
    "DeviceConfig",
    "AnnotationConfig",
    "OutputConfig",
]

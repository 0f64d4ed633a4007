"""
Face Detection - Detection Module

This module wraps the cascade classifier used to find faces.
"""

from .base import Detector
from .cascade import CascadeFaceDetector, CascadeLoadError, cascade_flags, resolve_cascade_path

__all__ = [
    'Detector',
    'CascadeFaceDetector',
    'CascadeLoadError',
    'cascade_flags',
    'resolve_cascade_path',
]

"""
Result models for a face detection run.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .detection import Detection

NS_PER_SECOND = 1_000_000_000


@dataclass(frozen=True)
class DetectionTiming:
    """Wall time spent inside the detection call."""
    elapsed_ns: int

    @property
    def seconds(self) -> float:
        return self.elapsed_ns / NS_PER_SECOND

    @property
    def whole_seconds(self) -> int:
        return self.elapsed_ns // NS_PER_SECOND

    @property
    def remainder_ns(self) -> int:
        return self.elapsed_ns % NS_PER_SECOND

    def format(self) -> str:
        """Format as '<s>.<ns> seconds (<total> nanoseconds)'."""
        return (
            f"{self.whole_seconds}.{self.remainder_ns:09d} seconds "
            f"({self.elapsed_ns} nanoseconds)"
        )


@dataclass
class FaceDetectionResult:
    """
    Outcome of one pipeline run.

    Attributes:
        input_path: Image that was processed.
        output_path: Where the annotated image was written.
        image_size: (width, height) of the processed image.
        detections: Faces found, in classifier order.
        timing: Time spent in the detection call.
        device_backend: Name of the transfer backend used for the round-trip.
    """
    input_path: str
    output_path: str
    image_size: Tuple[int, int]
    detections: List[Detection] = field(default_factory=list)
    timing: Optional[DetectionTiming] = None
    device_backend: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.detections)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input_path": self.input_path,
            "output_path": self.output_path,
            "image_size": {"width": self.image_size[0], "height": self.image_size[1]},
            "device_backend": self.device_backend,
            "detection_time_ns": self.timing.elapsed_ns if self.timing else None,
            "count": self.count,
            "detections": [d.to_dict() for d in self.detections],
        }

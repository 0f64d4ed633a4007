"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

DEFAULT_CASCADE = "haarcascade_frontalface_default.xml"


@dataclass
class DetectionConfig:
    """Cascade classifier configuration (arguments to detectMultiScale)."""
    cascade_path: str = DEFAULT_CASCADE
    scale_factor: float = 1.1
    min_neighbors: int = 2
    flags: str = "scale_image"
    min_size: List[int] = field(default_factory=lambda: [30, 30])
    max_size: Optional[List[int]] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DetectionConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            cascade_path=d.get("cascade_path") or DEFAULT_CASCADE,
            scale_factor=float(d.get("scale_factor", 1.1)),
            min_neighbors=int(d.get("min_neighbors", 2)),
            flags=d.get("flags", "scale_image"),
            min_size=list(d.get("min_size") or [30, 30]),
            max_size=list(d["max_size"]) if d.get("max_size") else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "cascade_path": self.cascade_path,
            "scale_factor": self.scale_factor,
            "min_neighbors": self.min_neighbors,
            "flags": self.flags,
            "min_size": self.min_size,
        }
        if self.max_size is not None:
            d["max_size"] = self.max_size
        return d


@dataclass
class DeviceConfig:
    """Image transfer backend configuration."""
    backend: str = "auto"
    device_id: int = 0
    pitch_alignment: int = 512

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "DeviceConfig":
        return cls(
            backend=d.get("backend", "auto"),
            device_id=int(d.get("device_id", 0)),
            pitch_alignment=int(d.get("pitch_alignment", 512)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "device_id": self.device_id,
            "pitch_alignment": self.pitch_alignment,
        }


@dataclass
class AnnotationConfig:
    """Bounding box drawing configuration."""
    color: int = 255
    thickness: int = 2

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AnnotationConfig":
        return cls(
            color=int(d.get("color", 255)),
            thickness=int(d.get("thickness", 2)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"color": self.color, "thickness": self.thickness}


@dataclass
class OutputConfig:
    """Extra outputs beyond the annotated image."""
    report_path: Optional[str] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "OutputConfig":
        return cls(report_path=d.get("report_path"))

    def to_dict(self) -> Dict[str, Any]:
        return {"report_path": self.report_path}


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    input_path: str = "Lena.pgm"
    output_path: str = "output/Lena_faces.pgm"
    detection: DetectionConfig = field(default_factory=DetectionConfig)
    device: DeviceConfig = field(default_factory=DeviceConfig)
    annotation: AnnotationConfig = field(default_factory=AnnotationConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    log_path: Optional[str] = None
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            input_path=d.get("input_path", "Lena.pgm"),
            output_path=d.get("output_path", "output/Lena_faces.pgm"),
            detection=DetectionConfig.from_dict(d.get("detection") or {}),
            device=DeviceConfig.from_dict(d.get("device") or {}),
            annotation=AnnotationConfig.from_dict(d.get("annotation") or {}),
            output=OutputConfig.from_dict(d.get("output") or {}),
            log_path=d.get("log_path"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or passing to existing code)."""
        return {
            "input_path": self.input_path,
            "output_path": self.output_path,
            "detection": self.detection.to_dict(),
            "device": self.device.to_dict(),
            "annotation": self.annotation.to_dict(),
            "output": self.output.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }

"""
Pipeline module for the face detection tool.

The pipeline orchestrates the full processing flow:
- Image loading and device round-trip
- Cascade detection
- Annotation and output
"""

from .engine import FaceDetectionPipeline, PipelineError, create_pipeline_from_config, write_report

__all__ = [
    "FaceDetectionPipeline",
    "PipelineError",
    "create_pipeline_from_config",
    "write_report",
]

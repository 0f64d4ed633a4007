"""
Pipeline engine for the face detection tool.

Runs the fixed sequence of a detection job:
- Load the cascade classifier
- Load the grayscale input image
- Round-trip the image through a device buffer
- Detect faces (timed)
- Draw bounding boxes and save the annotated image
"""

from __future__ import annotations

import json
import logging
from typing import Optional

import cv2

from annotation import draw_detections
from detection import CascadeFaceDetector, Detector
from device import DeviceTransfer, create_transfer, round_trip
from imaging import ImageIOError, ensure_output_dir, load_grayscale, save_image
from models.config import Config
from models.result import FaceDetectionResult


class PipelineError(RuntimeError):
    """Raised when a library call fails in a way no stage reports itself."""


class FaceDetectionPipeline:
    """
    Face detection job over a single image.

    The detector and transfer backend are built from config unless injected.
    An injected transfer backend is left open for the caller to close.

    Example:
        pipeline = FaceDetectionPipeline(Config.from_dict(config_dict))
        result = pipeline.run()
        print(result.count)
    """

    def __init__(
        self,
        config: Config,
        transfer: Optional[DeviceTransfer] = None,
        detector: Optional[Detector] = None,
    ):
        self.config = config
        self._transfer = transfer
        self._detector = detector

    def run(self) -> FaceDetectionResult:
        """
        Run the job end to end.

        Raises:
            FileNotFoundError: Input image missing.
            CascadeLoadError: Classifier could not be loaded.
            ImageIOError / OutputDirectoryError: Image or report could not be read or written.
            DeviceError: Device selection or transfer failed.
            PipelineError: Any other OpenCV failure.
        """
        owns_transfer = self._transfer is None
        try:
            detector = self._detector or CascadeFaceDetector(self.config.detection)
            transfer = self._transfer or create_transfer(self.config.device)
        except cv2.error as e:
            raise PipelineError(f"OpenCV error during setup: {e}") from e

        try:
            image = load_grayscale(self.config.input_path)
            gray = round_trip(transfer, image)
            logging.info("Grayscale image loaded successfully.")
            logging.info(f"Grayscale image dimensions: {gray.width} x {gray.height}")

            detections, timing = detector.detect_timed(gray.data)
            logging.info(f"Face detection found {len(detections)} results.")
            logging.info(f"Time spent on detection: {timing.format()}")

            for i, det in enumerate(detections, start=1):
                logging.info(
                    f"Face detection result #{i}: x={det.x}, y={det.y}, "
                    f"width={det.width}, height={det.height}"
                )

            annotated = draw_detections(
                gray,
                detections,
                color=self.config.annotation.color,
                thickness=self.config.annotation.thickness,
            )

            output_path = self.config.output_path
            logging.info(f"Saving output to: {output_path}")
            save_image(output_path, annotated)
            logging.info(f"Image saved as: {output_path}")
        except cv2.error as e:
            raise PipelineError(f"OpenCV error: {e}") from e
        finally:
            if owns_transfer:
                transfer.close()

        result = FaceDetectionResult(
            input_path=self.config.input_path,
            output_path=output_path,
            image_size=gray.size,
            detections=detections,
            timing=timing,
            device_backend=transfer.name,
        )

        if self.config.output.report_path:
            write_report(self.config.output.report_path, result)

        return result


def write_report(path: str, result: FaceDetectionResult) -> None:
    """Write the detection result as JSON."""
    ensure_output_dir(path)
    try:
        with open(path, "w") as f:
            json.dump(result.to_dict(), f, indent=2)
    except OSError as e:
        raise ImageIOError(f"Failed to write report {path}: {e}") from e
    logging.info(f"Detection report written to: {path}")


def create_pipeline_from_config(config_dict: dict) -> FaceDetectionPipeline:
    """
    Factory function to create a pipeline from a merged config dict.

    Args:
        config_dict: Full application config dict (from load_config).
    """
    return FaceDetectionPipeline(Config.from_dict(config_dict))

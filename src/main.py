"""
Face detection on a grayscale image with a device round-trip.

Loads a grayscale image, uploads it to a pitched device buffer, downloads it
back, runs a pre-trained cascade classifier, draws the detections and writes
the annotated image to disk.

Usage:
    python src/main.py -i Lena.pgm -o output/Lena_faces.pgm -f haarcascade_frontalface_default.xml

Arguments:
    -i/--input: Input image path (must exist)
    -o/--output: Output image path (parent directory is created)
    -f/--cascade: Cascade classifier XML path
    --config: Path to configuration file
    --device: Transfer backend (auto, cuda, host)
    --report: Write a JSON detection report to this path
"""

import os
import sys
import argparse
import logging
import yaml
from typing import Dict, Any, List, Optional, Tuple

# Import local modules
from detection import CascadeLoadError
from detection.cascade import CASCADE_FLAGS
from device import DeviceError, VALID_BACKENDS, device_info
from imaging import ImageIOError, OutputDirectoryError
from models.config import Config
from ops.logging import setup_logging
from pipeline import FaceDetectionPipeline, PipelineError

PROG = "face-detect"


class ConfigError(RuntimeError):
    """Raised when a configuration file cannot be read or parsed."""


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)

    Raises:
        ConfigError: If a layer cannot be read or is not valid YAML.
    """
    try:
        base_path = os.path.join(os.path.dirname(config_path), "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            with open(base_path, "r") as f:
                base_cfg = yaml.safe_load(f) or {}

        local_overrides_path = os.path.join(os.path.dirname(config_path), "config.yaml")
        local_cfg: Dict[str, Any] = {}
        if os.path.exists(local_overrides_path):
            with open(local_overrides_path, "r") as f:
                local_cfg = yaml.safe_load(f) or {}

        merged = _deep_merge(base_cfg, local_cfg)

        # Finally apply explicit config_path if it's not the local override file itself
        if os.path.exists(config_path) and os.path.abspath(config_path) != os.path.abspath(local_overrides_path):
            with open(config_path, "r") as f:
                explicit_cfg = yaml.safe_load(f) or {}
            merged = _deep_merge(merged, explicit_cfg)

        return merged
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Failed to load configuration: {e}") from e


def apply_cli_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Apply command-line flags on top of the merged config. Unset flags are ignored."""
    if args.input is not None:
        config["input_path"] = args.input
    if args.output is not None:
        config["output_path"] = args.output
    if args.cascade is not None:
        config.setdefault("detection", {})["cascade_path"] = args.cascade
    if args.device is not None:
        config.setdefault("device", {})["backend"] = args.device
    if args.report is not None:
        config.setdefault("output", {})["report_path"] = args.report
    if args.log_level is not None:
        config["log_level"] = args.log_level
    return config


def _is_size_pair(value: Any, allow_zero: bool) -> bool:
    if not isinstance(value, list) or len(value) != 2:
        return False
    lower = 0 if allow_zero else 1
    return all(isinstance(x, int) and x >= lower for x in value)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    # Required top-level settings
    required = ['input_path', 'output_path', 'detection', 'log_level']
    for section in required:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    for key in ('input_path', 'output_path'):
        if not isinstance(config[key], str) or not config[key]:
            return False, f"{key} must be a non-empty string"

    # Validate detection settings
    detection = config.get('detection') or {}
    if not isinstance(detection.get('cascade_path'), str) or not detection.get('cascade_path'):
        return False, "detection.cascade_path must be a non-empty string"
    scale_factor = detection.get('scale_factor', 1.1)
    if not isinstance(scale_factor, (int, float)) or scale_factor <= 1:
        return False, "detection.scale_factor must be a number greater than 1"
    min_neighbors = detection.get('min_neighbors', 2)
    if not isinstance(min_neighbors, int) or min_neighbors < 0:
        return False, "detection.min_neighbors must be a non-negative integer"
    flags = detection.get('flags', 'scale_image')
    if flags not in CASCADE_FLAGS:
        return False, f"detection.flags must be one of: {', '.join(CASCADE_FLAGS)}"
    if 'min_size' in detection and not _is_size_pair(detection['min_size'], allow_zero=True):
        return False, "detection.min_size must be a list of [width, height]"
    if detection.get('max_size') is not None and not _is_size_pair(detection['max_size'], allow_zero=False):
        return False, "detection.max_size must be a list of positive [width, height]"

    # Optional device settings
    device = config.get('device') or {}
    if device.get('backend', 'auto') not in VALID_BACKENDS:
        return False, f"device.backend must be one of: {', '.join(VALID_BACKENDS)}"
    device_id = device.get('device_id', 0)
    if not isinstance(device_id, int) or device_id < 0:
        return False, "device.device_id must be a non-negative integer"
    alignment = device.get('pitch_alignment', 512)
    if not isinstance(alignment, int) or alignment <= 0 or alignment & (alignment - 1):
        return False, "device.pitch_alignment must be a positive power of two"

    # Optional annotation settings
    annotation = config.get('annotation') or {}
    color = annotation.get('color', 255)
    if not isinstance(color, int) or not (0 <= color <= 255):
        return False, "annotation.color must be an integer between 0 and 255"
    thickness = annotation.get('thickness', 2)
    if not isinstance(thickness, int) or (thickness <= 0 and thickness != -1):
        return False, "annotation.thickness must be a positive integer or -1 (filled)"

    # Validate log settings
    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config['log_level'] not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROG, description='Cascade face detection with device round-trip')
    parser.add_argument('-i', '--input', type=str, default=None,
                        help='Input grayscale image')
    parser.add_argument('-o', '--output', type=str, default=None,
                        help='Output image path')
    parser.add_argument('-f', '--cascade', type=str, default=None,
                        help='Cascade classifier XML file')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--device', type=str, choices=VALID_BACKENDS, default=None,
                        help='Image transfer backend')
    parser.add_argument('--report', type=str, default=None,
                        help='Write a JSON detection report to this path')
    parser.add_argument('--log-level', type=str, default=None,
                        help='Override log level')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main application function. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    # Load configuration
    try:
        config = load_config(args.config)
    except ConfigError as e:
        logging.error(str(e))
        return 1
    config = apply_cli_overrides(config, args)
    config = _deep_merge(Config().to_dict(), config)

    # Validate configuration
    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        return 1

    # Setup logging
    setup_logging(config['log_path'], config['log_level'])
    logging.info(f"{PROG} Starting....")

    info = device_info(config['device']['device_id'])
    logging.info(f"OpenCV Version {info['opencv_version']}")
    logging.info(f"  CUDA devices: {info['cuda_devices']}")
    if info['device_name']:
        logging.info(f"  CUDA device {config['device']['device_id']}: {info['device_name']}")

    input_path = config['input_path']
    if not os.path.isfile(input_path):
        logging.error(f"[ERROR] Input file {input_path} does not exist.")
        return 1

    logging.info(f"Input file: <{input_path}>")
    logging.info(f"Output file: <{config['output_path']}>")
    logging.info(f"Cascade classifier file: <{config['detection']['cascade_path']}>")

    try:
        result = FaceDetectionPipeline(Config.from_dict(config)).run()
    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        return 1
    except (FileNotFoundError, CascadeLoadError, ImageIOError, OutputDirectoryError,
            DeviceError, PipelineError) as e:
        logging.error(f"[ERROR] {e}")
        logging.error("Aborting.")
        return 1

    logging.info(
        f"Done: {result.count} face(s) in {result.input_path} "
        f"({result.timing.seconds:.6f}s, backend={result.device_backend})"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())

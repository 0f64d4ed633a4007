"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import cv2
import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
input_path: "Lena.pgm"
output_path: "output/Lena_faces.pgm"

detection:
  cascade_path: "haarcascade_frontalface_default.xml"
  scale_factor: 1.1
  min_neighbors: 2
  flags: "scale_image"
  min_size: [30, 30]

device:
  backend: "host"
  device_id: 0
  pitch_alignment: 512

log_path: null
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "input_path": "Lena.pgm",
        "output_path": "output/Lena_faces.pgm",
        "detection": {
            "cascade_path": "haarcascade_frontalface_default.xml",
            "scale_factor": 1.1,
            "min_neighbors": 2,
            "flags": "scale_image",
            "min_size": [30, 30],
        },
        "device": {
            "backend": "auto",
            "device_id": 0,
            "pitch_alignment": 512,
        },
        "annotation": {
            "color": 255,
            "thickness": 2,
        },
        "log_path": None,
        "log_level": "INFO",
    }


@pytest.fixture
def gray_array():
    """A deterministic 8-bit gray gradient (height=48, width=64)."""
    row = np.arange(64, dtype=np.uint8) * 3
    return np.tile(row, (48, 1))


@pytest.fixture
def gray_image_path(tmp_path, gray_array):
    """Write the gray gradient to a PGM file and return its path."""
    path = tmp_path / "input.pgm"
    assert cv2.imwrite(str(path), gray_array)
    return str(path)

"""
Image file I/O.

Decoding and encoding are delegated to OpenCV; this module only handles
path checks, output directories and error reporting.
"""

from __future__ import annotations

import logging
import os
from typing import Optional

import cv2

from models.image import HostImage


class ImageIOError(RuntimeError):
    """Raised when an image cannot be decoded or encoded."""


class OutputDirectoryError(OSError):
    """Raised when the output directory cannot be created."""


def load_grayscale(path: str) -> HostImage:
    """
    Load an image from disk as 8-bit grayscale.

    Raises:
        FileNotFoundError: If the path does not exist.
        ImageIOError: If OpenCV cannot decode the file.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Input file {path} does not exist.")

    data = cv2.imread(path, cv2.IMREAD_GRAYSCALE)
    if data is None:
        raise ImageIOError(f"Failed to decode image: {path}")

    image = HostImage.from_numpy(data, source=path)
    logging.debug(f"Loaded {path}: {image.width}x{image.height}")
    return image


def ensure_output_dir(path: str) -> Optional[str]:
    """
    Create the directory component of an output path if it is missing.

    Returns the directory, or None if the path has no directory component.
    """
    output_dir = os.path.dirname(path)
    if not output_dir:
        return None
    if not os.path.isdir(output_dir):
        try:
            os.makedirs(output_dir, mode=0o755, exist_ok=True)
        except OSError as e:
            raise OutputDirectoryError(f"Failed to create output directory: {output_dir}") from e
        logging.info(f"Created output directory: {output_dir}")
    return output_dir


def save_image(path: str, image: HostImage) -> None:
    """
    Encode an image to disk. The format follows the file extension.

    Raises:
        OutputDirectoryError: If the output directory cannot be created.
        ImageIOError: If OpenCV fails to encode or write the file.
    """
    ensure_output_dir(path)
    try:
        ok = cv2.imwrite(path, image.as_contiguous())
    except cv2.error as e:
        raise ImageIOError(f"Failed to save image {path}: {e}") from e
    if not ok:
        raise ImageIOError(f"Failed to save image {path}")

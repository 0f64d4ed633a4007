"""
Image codec glue (load/save grayscale images).
"""

from .io import ImageIOError, OutputDirectoryError, ensure_output_dir, load_grayscale, save_image

__all__ = [
    "ImageIOError",
    "OutputDirectoryError",
    "ensure_output_dir",
    "load_grayscale",
    "save_image",
]

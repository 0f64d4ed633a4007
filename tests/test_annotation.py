"""
Tests for bounding box drawing.
"""

import numpy as np

from annotation import draw_detections
from models.detection import Detection
from models.image import HostImage


class TestDrawDetections:
    def test_draws_rectangle_outline(self):
        image = HostImage.allocate(50, 50)
        out = draw_detections(image, [Detection.from_rect(10, 10, 20, 20)], color=255, thickness=1)

        assert out.size == (50, 50)
        assert out.data[10, 10] == 255
        assert out.data[10, 29] == 255
        assert out.data[29, 29] == 255
        assert out.data[30, 30] == 0
        assert out.data[20, 20] == 0

    def test_input_unchanged(self):
        image = HostImage.allocate(40, 40)
        draw_detections(image, [Detection.from_rect(5, 5, 10, 10)])
        assert image.data.sum() == 0

    def test_no_detections_copies_pixels(self, gray_array):
        image = HostImage.from_numpy(gray_array, source="in.pgm")
        out = draw_detections(image, [])
        assert np.array_equal(out.data, gray_array)
        assert out.source == "in.pgm"

    def test_pitched_input(self, gray_array):
        backing = np.zeros((48, 96), dtype=np.uint8)
        backing[:, :64] = gray_array
        out = draw_detections(HostImage.from_numpy(backing[:, :64]), [])
        assert out.pitch == 64
        assert np.array_equal(out.data, gray_array)

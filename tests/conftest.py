import cv2
import numpy as np
import pytest

from plate_audit.params import ParameterSet
from plate_audit.synthetic import generate_test_image

# 192x48 plate: aspect ratio 4.0, 3% of a 640x480 frame
PLATE_X, PLATE_Y, PLATE_W, PLATE_H = 224, 300, 192, 48


@pytest.fixture
def params():
    return ParameterSet()


@pytest.fixture
def plate_box():
    return PLATE_X, PLATE_Y, PLATE_W, PLATE_H


@pytest.fixture
def plate_image():
    """Uniform gray frame with a single blank white plate rectangle."""
    return generate_test_image(
        plate=(PLATE_X, PLATE_Y, PLATE_X + PLATE_W - 1, PLATE_Y + PLATE_H - 1),
        text=None, border=0)


@pytest.fixture
def blank_image():
    return np.full((480, 640, 3), 128, dtype=np.uint8)


@pytest.fixture
def many_plates_image():
    """Six well separated 120x40 plates (aspect 3.0) on a gray frame."""
    image = np.full((480, 640, 3), 128, dtype=np.uint8)
    for y in (40, 200, 360):
        for x in (60, 380):
            image[y:y + 40, x:x + 120] = 255
    return image


class FakeClassifier:
    """Stands in for cv2.CascadeClassifier with fixed detections."""

    def __init__(self, rects=()):
        self.rects = rects
        self.calls = []

    def empty(self):
        return False

    def detectMultiScale(self, image, **kwargs):
        self.calls.append((image, kwargs))
        return np.array(self.rects, dtype=np.int32).reshape(-1, 4)


@pytest.fixture
def fake_cascade(tmp_path, monkeypatch):
    """Install a FakeClassifier; returns (cascade_path, classifier)."""
    def install(rects=()):
        path = tmp_path / 'fake_cascade.xml'
        path.write_text('<opencv_storage/>')
        fake = FakeClassifier(rects)
        monkeypatch.setattr(cv2, 'CascadeClassifier', lambda p: fake, raising=False)
        return str(path), fake
    return install

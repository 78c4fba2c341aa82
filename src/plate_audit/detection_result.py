
from dataclasses import dataclass, field
from enum import Enum
from typing import NamedTuple, Optional

import numpy as np


class Rect(NamedTuple):
    """Axis-aligned box in (x, y, w, h) form, same layout as cv2.boundingRect."""
    x: int
    y: int
    width: int
    height: int

    @property
    def x2(self) -> int:
        return self.x + self.width

    @property
    def y2(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def aspect_ratio(self) -> float:
        if self.height <= 0:
            return 0.0
        return self.width / float(self.height)

    def pad(self, padding: int, img_w: int, img_h: int) -> 'Rect':
        """Grow by `padding` on every side, clamped to the image."""
        x = max(0, self.x - padding)
        y = max(0, self.y - padding)
        x2 = min(img_w, self.x2 + padding)
        y2 = min(img_h, self.y2 + padding)
        return Rect(x, y, max(0, x2 - x), max(0, y2 - y))

    def clamp(self, img_w: int, img_h: int) -> 'Rect':
        return self.pad(0, img_w, img_h)


class DetectionMethod(Enum):
    CASCADE = 'Haar Cascade'
    GEOMETRIC = 'Geometric/Contour'

    @property
    def display_name(self) -> str:
        return self.value


@dataclass(eq=False)
class DetectionCandidate:
    """A plate region proposed by one detector.

    `cropped_image` is an owned copy ready for OCR; `ocr_result` stays None
    until an external reader fills it in.
    """
    bounds: Rect
    method: DetectionMethod
    confidence: float = 1.0
    cropped_image: Optional[np.ndarray] = field(default=None, repr=False)
    ocr_result: Optional[str] = None

    def iou(self, other: 'DetectionCandidate') -> float:
        from .agreement import calculate_iou
        return calculate_iou(self.bounds, other.bounds)

    def overlaps(self, other: 'DetectionCandidate', threshold: float) -> bool:
        return self.iou(other) > threshold

    def __str__(self):
        x, y, w, h = self.bounds
        ocr = self.ocr_result if self.ocr_result is not None else 'N/A'
        return f"DetectionCandidate(method={self.method.name}, bounds=[{x},{y},{w}x{h}], ocr='{ocr}')"


import logging
import os
from dataclasses import dataclass
from typing import List, Optional, Tuple

import cv2
import numpy as np

from .detection_result import DetectionCandidate, DetectionMethod, Rect
from .errors import ResourceUnavailableError
from .params import ParameterSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CascadeLimits:
    """Fixed plausibility constants for cascade detections."""
    min_size: Tuple[int, int] = (80, 20)
    max_size: Tuple[int, int] = (500, 150)
    min_aspect_ratio: float = 1.5
    max_aspect_ratio: float = 8.0
    crop_padding: int = 5


class CascadeDetector:
    """Haar cascade plate detector.

    The classifier is loaded once here and only read afterwards. A missing
    or unparseable model, or an OpenCV build without CascadeClassifier,
    raises ResourceUnavailableError so the caller can run without this
    detector.
    """

    def __init__(self, cascade_path: str, limits: Optional[CascadeLimits] = None):
        if not cascade_path or not os.path.exists(cascade_path):
            raise ResourceUnavailableError(f'Cascade file not found at: {cascade_path}')
        classifier_cls = getattr(cv2, 'CascadeClassifier', None)
        if classifier_cls is None:
            raise ResourceUnavailableError(f'OpenCV {cv2.__version__} has no CascadeClassifier')
        try:
            self.classifier = classifier_cls(cascade_path)
        except cv2.error as e:
            raise ResourceUnavailableError(f'Could not parse cascade file {cascade_path}: {e}') from e
        if self.classifier.empty():
            raise ResourceUnavailableError(f'Could not load cascade classifier from: {cascade_path}')
        self.cascade_path = cascade_path
        self.limits = limits or CascadeLimits()
        logger.info('Loaded Haar cascade: %s', cascade_path)

    def _is_plausible(self, w: int, h: int) -> bool:
        if h <= 0:
            return False
        aspect_ratio = w / float(h)
        return self.limits.min_aspect_ratio <= aspect_ratio <= self.limits.max_aspect_ratio

    def detect(self, gray: np.ndarray, image: np.ndarray, params: ParameterSet) -> List[DetectionCandidate]:
        """Run the cascade over an equalized copy of `gray`; crops come from the color `image`."""
        equalized = cv2.equalizeHist(gray)
        plates = self.classifier.detectMultiScale(
            equalized,
            scaleFactor=params.haar_scale_factor,
            minNeighbors=params.haar_min_neighbors,
            minSize=self.limits.min_size,
            maxSize=self.limits.max_size,
        )

        img_h, img_w = image.shape[:2]
        candidates = []
        for (x, y, w, h) in plates:
            x, y, w, h = int(x), int(y), int(w), int(h)
            if not self._is_plausible(w, h):
                logger.debug('Cascade: rejected %dx%d at (%d,%d) on aspect ratio', w, h, x, y)
                continue
            bounds = Rect(x, y, w, h).clamp(img_w, img_h)
            px, py, pw, ph = bounds.pad(self.limits.crop_padding, img_w, img_h)
            crop = image[py:py + ph, px:px + pw].copy()
            candidates.append(DetectionCandidate(bounds, DetectionMethod.CASCADE, cropped_image=crop))

        logger.debug('Cascade: %d raw detections, %d accepted', len(plates), len(candidates))
        return candidates


def detect_cascade(gray: np.ndarray, image: np.ndarray, params: ParameterSet,
                   detector: Optional[CascadeDetector]) -> List[DetectionCandidate]:
    """Cascade detection as an optional strategy: no detector means no candidates."""
    if detector is None:
        return []
    return detector.detect(gray, image, params)

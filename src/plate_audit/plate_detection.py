
import logging
from dataclasses import dataclass
from typing import List, Optional

import cv2
import imutils
import numpy as np

from .detection_result import DetectionCandidate, DetectionMethod, Rect
from .homography import four_point_transform
from .params import ParameterSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeometricLimits:
    """Fixed constants for contour-based plate search."""
    min_area_ratio: float = 0.002
    max_area_ratio: float = 0.20
    max_contours: int = 50
    approx_epsilon: float = 0.018
    min_vertices: int = 4
    max_vertices: int = 6
    max_candidates: int = 3
    crop_padding: int = 3


def crop_plate(image: np.ndarray, box, padding: int = 0) -> np.ndarray:
    """Crop `box` (x, y, w, h) from image with padding clamped to the image bounds."""
    img_h, img_w = image.shape[:2]
    x, y, w, h = Rect(*box).pad(padding, img_w, img_h)
    return image[y:y + h, x:x + w].copy()


def find_plate_contours(dilated: np.ndarray, limits: Optional[GeometricLimits] = None) -> list:
    """External contours whose area is plausible for a plate, largest first."""
    limits = limits or GeometricLimits()
    image_area = dilated.shape[0] * dilated.shape[1]
    min_area = limits.min_area_ratio * image_area
    max_area = limits.max_area_ratio * image_area

    cnts = cv2.findContours(dilated.copy(), cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
    cnts = imutils.grab_contours(cnts)
    sized = [(cv2.contourArea(c), c) for c in cnts]
    sized = [(a, c) for a, c in sized if min_area <= a <= max_area]
    sized.sort(key=lambda t: t[0], reverse=True)
    logger.debug('Geometric: %d contours, %d within area band', len(cnts), len(sized))
    return [c for _, c in sized[:limits.max_contours]]


class GeometricDetector:
    """Contour/polygon plate detector working on the dilated edge map."""

    def __init__(self, limits: Optional[GeometricLimits] = None):
        self.limits = limits or GeometricLimits()

    def _crop(self, image: np.ndarray, approx: np.ndarray, bounds: Rect) -> np.ndarray:
        if len(approx) == 4:
            warped = four_point_transform(image, approx.reshape(4, 2))
            if warped is not None:
                return warped
            logger.debug('Geometric: perspective warp failed, using plain crop')
        return crop_plate(image, bounds, self.limits.crop_padding)

    def detect(self, dilated: np.ndarray, image: np.ndarray, params: ParameterSet) -> List[DetectionCandidate]:
        candidates = []
        for c in find_plate_contours(dilated, self.limits):
            peri = cv2.arcLength(c, True)
            approx = cv2.approxPolyDP(c, self.limits.approx_epsilon * peri, True)
            if not self.limits.min_vertices <= len(approx) <= self.limits.max_vertices:
                continue

            bounds = Rect(*cv2.boundingRect(approx))
            if bounds.width <= 0 or bounds.height <= 0:
                continue
            # heuristic check for plate shape
            aspect_ratio = bounds.aspect_ratio
            if not params.aspect_ratio_in_band(aspect_ratio):
                logger.debug('Geometric: rejected %s, aspect ratio %.2f', tuple(bounds), aspect_ratio)
                continue

            crop = self._crop(image, approx, bounds)
            candidates.append(DetectionCandidate(bounds, DetectionMethod.GEOMETRIC, cropped_image=crop))
            logger.debug('Geometric: accepted %s (%d vertices, AR %.2f)', tuple(bounds), len(approx), aspect_ratio)
            if len(candidates) >= self.limits.max_candidates:
                break
        return candidates


def detect_geometric(dilated: np.ndarray, image: np.ndarray, params: ParameterSet) -> List[DetectionCandidate]:
    return GeometricDetector().detect(dilated, image, params)

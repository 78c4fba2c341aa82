
import logging
from typing import Optional

import cv2
import numpy as np

logger = logging.getLogger(__name__)

MIN_WARP_WIDTH = 100
MIN_WARP_HEIGHT = 30


def order_points(pts) -> np.ndarray:
    """Order four points as top-left, top-right, bottom-right, bottom-left.

    Uses x+y (min -> top-left, max -> bottom-right) and y-x
    (min -> top-right, max -> bottom-left). Only reliable for quads rotated
    less than about 45 degrees from the image axes.
    """
    pts = np.asarray(pts, dtype=np.float32).reshape(-1, 2)
    rect = np.zeros((4, 2), dtype=np.float32)
    s = pts.sum(axis=1)
    rect[0] = pts[np.argmin(s)]
    rect[2] = pts[np.argmax(s)]
    diff = np.diff(pts, axis=1).ravel()  # y - x
    rect[1] = pts[np.argmin(diff)]
    rect[3] = pts[np.argmax(diff)]
    return rect


def quad_area(rect: np.ndarray) -> float:
    """Shoelace area of an ordered quad."""
    x = rect[:, 0].astype(np.float64)
    y = rect[:, 1].astype(np.float64)
    return 0.5 * abs(np.dot(x, np.roll(y, -1)) - np.dot(y, np.roll(x, -1)))


def warp_size(rect: np.ndarray):
    """Output (width, height) for an ordered quad, clamped to the minimum warp size."""
    tl, tr, br, bl = rect
    width_top = np.linalg.norm(tr - tl)
    width_bottom = np.linalg.norm(br - bl)
    height_left = np.linalg.norm(bl - tl)
    height_right = np.linalg.norm(br - tr)
    max_width = int(round(max(width_top, width_bottom)))
    max_height = int(round(max(height_left, height_right)))
    return max(MIN_WARP_WIDTH, max_width), max(MIN_WARP_HEIGHT, max_height)


def four_point_transform(image: np.ndarray, pts) -> Optional[np.ndarray]:
    """Warp the quadrilateral `pts` of `image` into an upright rectangle.

    Returns None when fewer than four points are given or the quad is too
    degenerate to solve; callers fall back to a plain crop.
    """
    if pts is None:
        return None
    pts = np.asarray(pts, dtype=np.float32).reshape(-1, 2)
    if len(pts) < 4:
        return None

    rect = order_points(pts[:4])
    if quad_area(rect) < 1.0:
        logger.debug('Degenerate quad, skipping warp: %s', rect.tolist())
        return None
    width, height = warp_size(rect)
    dst = np.array([
        [0, 0],
        [width - 1, 0],
        [width - 1, height - 1],
        [0, height - 1]], dtype=np.float32)

    try:
        M = cv2.getPerspectiveTransform(rect, dst)
    except cv2.error as e:
        logger.debug('Perspective solve failed for %s: %s', rect.tolist(), e)
        return None
    if M is None or not np.all(np.isfinite(M)) or abs(np.linalg.det(M)) < 1e-9:
        logger.debug('Degenerate quad, skipping warp: %s', rect.tolist())
        return None

    return cv2.warpPerspective(image, M, (width, height))

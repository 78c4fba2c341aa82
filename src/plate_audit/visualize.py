
import logging
import os
from typing import Dict, Iterable, Optional, Sequence

import cv2
import imutils
import numpy as np

from .detection_result import DetectionCandidate, DetectionMethod, Rect
from .preprocessing import PreprocessingArtifacts

logger = logging.getLogger(__name__)

# BGR
CASCADE_COLOR = (0, 255, 0)
GEOMETRIC_COLOR = (255, 0, 0)
OVERLAP_COLOR = (0, 0, 255)

ARTIFACT_FILES = (
    ('gray', 'step1_gray.jpg'),
    ('enhanced', 'step2_enhanced.jpg'),
    ('filtered', 'step3_filtered.jpg'),
    ('edges', 'step4_canny.jpg'),
    ('closed', 'step5_closed.jpg'),
    ('dilated', 'step6_dilated.jpg'),
)


def draw_detections(image: np.ndarray, candidates: Iterable[DetectionCandidate],
                    high_confidence: Sequence[Rect] = (), show_cascade: bool = True,
                    show_geometric: bool = True, show_overlap: bool = True, thickness: int = 2) -> np.ndarray:
    """Return a copy of `image` with candidate boxes drawn on it."""
    out = image.copy()
    if out.ndim == 2:
        out = cv2.cvtColor(out, cv2.COLOR_GRAY2BGR)
    for i, c in enumerate(candidates):
        if c.method is DetectionMethod.CASCADE:
            if not show_cascade:
                continue
            color, label = CASCADE_COLOR, f'H{i}'
        else:
            if not show_geometric:
                continue
            color, label = GEOMETRIC_COLOR, f'G{i}'
        if c.ocr_result:
            label += f': {c.ocr_result}'
        x, y, w, h = c.bounds
        cv2.rectangle(out, (x, y), (x + w, y + h), color, thickness)
        cv2.putText(out, label, (x, max(10, y - 6)), cv2.FONT_HERSHEY_SIMPLEX, 0.5, color, 1)

    if show_overlap:
        for (x, y, w, h) in high_confidence:
            cv2.rectangle(out, (x, y), (x + w, y + h), OVERLAP_COLOR, thickness + 1)
            cv2.putText(out, 'HIGH CONF', (x, y + h + 16), cv2.FONT_HERSHEY_SIMPLEX, 0.5, OVERLAP_COLOR, 1)
    return out


def draw_contours(dilated: np.ndarray, candidates: Iterable[DetectionCandidate] = ()) -> np.ndarray:
    """All external contours of the dilated map in yellow, accepted boxes on top."""
    vis = cv2.cvtColor(dilated, cv2.COLOR_GRAY2BGR)
    cnts = imutils.grab_contours(cv2.findContours(dilated.copy(), cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE))
    cv2.drawContours(vis, cnts, -1, (0, 255, 255), 1)
    for c in candidates:
        x, y, w, h = c.bounds
        color = CASCADE_COLOR if c.method is DetectionMethod.CASCADE else GEOMETRIC_COLOR
        cv2.rectangle(vis, (x, y), (x + w, y + h), color, 2)
    return vis


def save_artifacts(artifacts: PreprocessingArtifacts, out_dir: str, prefix: Optional[str] = None) -> Dict[str, str]:
    """Write each preprocessing stage as a numbered JPEG. Returns stage -> path."""
    os.makedirs(out_dir, exist_ok=True)
    stages = artifacts.as_dict()
    written = {}
    for stage, filename in ARTIFACT_FILES:
        if prefix:
            filename = f'{prefix}_{filename}'
        path = os.path.join(out_dir, filename)
        if not cv2.imwrite(path, stages[stage]):
            raise IOError(f'Failed to write {path}')
        written[stage] = path
        logger.debug('Saved: %s', path)
    return written


def save_crops(candidates: Iterable[DetectionCandidate], out_dir: str, prefix: str = 'plate') -> Dict[int, str]:
    os.makedirs(out_dir, exist_ok=True)
    written = {}
    for i, c in enumerate(candidates):
        if c.cropped_image is None or c.cropped_image.size == 0:
            continue
        path = os.path.join(out_dir, f'{prefix}_{i}_{c.method.name.lower()}.png')
        cv2.imwrite(path, c.cropped_image)
        written[i] = path
    return written

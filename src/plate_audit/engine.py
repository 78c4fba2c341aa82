
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from .agreement import IOU_THRESHOLD, DetectionStats, detection_stats, find_high_confidence
from .cascade_detector import CascadeDetector, CascadeLimits, detect_cascade
from .detection_result import DetectionCandidate, DetectionMethod, Rect
from .errors import InvalidInputError, ResourceUnavailableError
from .params import DEFAULT_PARAMS, ParameterSet
from .plate_detection import GeometricDetector, GeometricLimits
from .preprocessing import PreprocessingArtifacts, preprocess

logger = logging.getLogger(__name__)


@dataclass
class DetectionContext:
    """Everything one detection pass produced.

    Returned by DetectionEngine.detect() instead of being cached on the
    engine, so visualization and OCR code receive it explicitly.
    """
    image: Optional[np.ndarray]
    params: ParameterSet
    artifacts: Optional[PreprocessingArtifacts] = None
    candidates: List[DetectionCandidate] = field(default_factory=list)
    high_confidence: List[Rect] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def found(self) -> bool:
        return bool(self.candidates)

    @property
    def cascade_candidates(self) -> List[DetectionCandidate]:
        return [c for c in self.candidates if c.method is DetectionMethod.CASCADE]

    @property
    def geometric_candidates(self) -> List[DetectionCandidate]:
        return [c for c in self.candidates if c.method is DetectionMethod.GEOMETRIC]

    @property
    def stats(self) -> DetectionStats:
        return detection_stats(self.candidates, self.high_confidence)

    def is_high_confidence(self, candidate: DetectionCandidate) -> bool:
        return tuple(candidate.bounds) in {tuple(r) for r in self.high_confidence}


class DetectionEngine:
    """Runs preprocessing, both detectors and the agreement check.

    The cascade is loaded once; if it is unavailable the engine keeps
    working with the geometric detector only. No per-pass state is kept on
    the instance, but the loaded classifier should not be shared between
    threads: use one engine per thread.
    """

    def __init__(self, cascade_path: Optional[str] = None,
                 cascade_limits: Optional[CascadeLimits] = None,
                 geometric_limits: Optional[GeometricLimits] = None,
                 iou_threshold: float = IOU_THRESHOLD):
        self.cascade: Optional[CascadeDetector] = None
        if cascade_path:
            try:
                self.cascade = CascadeDetector(cascade_path, cascade_limits)
            except ResourceUnavailableError as e:
                logger.warning('%s. Haar detection disabled, only geometric detection will run.', e)
        else:
            logger.info('No cascade path given. Haar detection disabled.')
        self.geometric = GeometricDetector(geometric_limits)
        self.iou_threshold = iou_threshold

    @property
    def has_cascade(self) -> bool:
        return self.cascade is not None

    def detect(self, image: np.ndarray, params: Optional[ParameterSet] = None) -> DetectionContext:
        params = params or DEFAULT_PARAMS
        try:
            artifacts = preprocess(image, params)
        except InvalidInputError as e:
            logger.warning('Skipping detection: %s', e)
            return DetectionContext(image=image, params=params, error=str(e))

        candidates = []
        candidates.extend(detect_cascade(artifacts.gray, image, params, self.cascade))
        candidates.extend(self.geometric.detect(artifacts.dilated, image, params))
        high_confidence = find_high_confidence(candidates, self.iou_threshold)

        ctx = DetectionContext(
            image=image,
            params=params,
            artifacts=artifacts,
            candidates=candidates,
            high_confidence=high_confidence,
        )
        logger.info('%s', ctx.stats if candidates else 'No plates found')
        return ctx

    def detect_all(self, image: np.ndarray, params: Optional[ParameterSet] = None) -> List[DetectionCandidate]:
        return self.detect(image, params).candidates

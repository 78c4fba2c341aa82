"""Dual-detection license plate localization.

A Haar cascade and a contour/geometry detector run side by side over the
same preprocessed image; boxes both methods agree on (IoU above a
threshold) are reported as high-confidence.
"""

from .agreement import DetectionStats, calculate_iou, find_high_confidence
from .cascade_detector import CascadeDetector, CascadeLimits
from .detection_result import DetectionCandidate, DetectionMethod, Rect
from .engine import DetectionContext, DetectionEngine
from .errors import InvalidInputError, PlateAuditError, ResourceUnavailableError
from .homography import four_point_transform, order_points
from .params import DEFAULT_PARAMS, ParameterSet, make_odd
from .plate_detection import GeometricDetector, GeometricLimits
from .preprocessing import PreprocessingArtifacts, preprocess

__all__ = [
    'CascadeDetector',
    'CascadeLimits',
    'DEFAULT_PARAMS',
    'DetectionCandidate',
    'DetectionContext',
    'DetectionEngine',
    'DetectionMethod',
    'DetectionStats',
    'GeometricDetector',
    'GeometricLimits',
    'InvalidInputError',
    'ParameterSet',
    'PlateAuditError',
    'PreprocessingArtifacts',
    'Rect',
    'ResourceUnavailableError',
    'calculate_iou',
    'find_high_confidence',
    'four_point_transform',
    'make_odd',
    'order_points',
    'preprocess',
]

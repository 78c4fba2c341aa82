import itertools

import pytest

from plate_audit.agreement import DetectionStats, calculate_iou, detection_stats, find_high_confidence
from plate_audit.detection_result import DetectionCandidate, DetectionMethod, Rect

RECTS = [
    Rect(0, 0, 10, 10),
    Rect(5, 5, 10, 10),
    Rect(100, 100, 200, 50),
    Rect(105, 102, 195, 48),
    Rect(400, 400, 50, 50),
    Rect(0, 0, 0, 0),
    Rect(3, 3, 2, 2),
]


def cascade(*box):
    return DetectionCandidate(Rect(*box), DetectionMethod.CASCADE)


def geometric(*box):
    return DetectionCandidate(Rect(*box), DetectionMethod.GEOMETRIC)


@pytest.mark.parametrize('a, b', list(itertools.product(RECTS, repeat=2)))
def test_iou_symmetric_and_bounded(a, b):
    iou = calculate_iou(a, b)
    assert iou == calculate_iou(b, a)
    assert 0.0 <= iou <= 1.0


@pytest.mark.parametrize('r', [r for r in RECTS if r.area > 0])
def test_iou_identity(r):
    assert calculate_iou(r, r) == 1.0


def test_iou_disjoint_and_touching():
    assert calculate_iou((0, 0, 10, 10), (20, 20, 5, 5)) == 0.0
    # shared edge only, no area
    assert calculate_iou((0, 0, 10, 10), (10, 0, 10, 10)) == 0.0


def test_iou_known_value():
    # 5x5 overlap of two 10x10 boxes: 25 / (100 + 100 - 25)
    assert calculate_iou((0, 0, 10, 10), (5, 5, 10, 10)) == pytest.approx(25 / 175)


def test_iou_contained_box():
    assert calculate_iou((0, 0, 10, 10), (3, 3, 2, 2)) == pytest.approx(4 / 100)


def test_high_confidence_scenario():
    candidates = [
        cascade(100, 100, 200, 50),
        geometric(105, 102, 195, 48),
        geometric(400, 400, 50, 50),
    ]
    agreed = find_high_confidence(candidates)
    assert agreed == [Rect(100, 100, 200, 50)]
    assert Rect(400, 400, 50, 50) not in agreed
    # annotation only, candidates untouched
    assert len(candidates) == 3


def test_high_confidence_needs_both_methods():
    assert find_high_confidence([cascade(0, 0, 100, 30), cascade(0, 0, 100, 30)]) == []
    assert find_high_confidence([geometric(0, 0, 100, 30), geometric(0, 0, 100, 30)]) == []
    assert find_high_confidence([]) == []


def test_high_confidence_threshold_is_strict():
    # IoU exactly 0.5
    candidates = [cascade(0, 0, 10, 10), geometric(0, 0, 10, 20)]
    assert find_high_confidence(candidates, threshold=0.5) == []
    assert find_high_confidence(candidates, threshold=0.49) == [Rect(0, 0, 10, 10)]


def test_cascade_box_reported_once_for_multiple_partners():
    candidates = [cascade(0, 0, 100, 30), geometric(0, 0, 100, 30), geometric(2, 1, 98, 29)]
    assert find_high_confidence(candidates) == [Rect(0, 0, 100, 30)]


def test_candidate_helpers():
    a = cascade(100, 100, 200, 50)
    b = geometric(105, 102, 195, 48)
    assert a.iou(b) == pytest.approx(b.iou(a))
    assert a.overlaps(b, 0.3)
    assert not a.overlaps(geometric(400, 400, 50, 50), 0.3)


def test_detection_stats():
    candidates = [cascade(100, 100, 200, 50), geometric(105, 102, 195, 48), geometric(400, 400, 50, 50)]
    stats = detection_stats(candidates, find_high_confidence(candidates))
    assert stats == DetectionStats(cascade=1, geometric=2, overlap=1)
    assert str(stats) == 'Haar: 1 | Geo: 2 | Overlap: 1'

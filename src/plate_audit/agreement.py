
from typing import Iterable, List, NamedTuple, Sequence

from .detection_result import DetectionCandidate, DetectionMethod, Rect

IOU_THRESHOLD = 0.3


class DetectionStats(NamedTuple):
    cascade: int
    geometric: int
    overlap: int

    def __str__(self):
        return f'Haar: {self.cascade} | Geo: {self.geometric} | Overlap: {self.overlap}'


def calculate_iou(r1: Sequence[int], r2: Sequence[int]) -> float:
    """Intersection over Union of two (x, y, w, h) boxes, always in [0, 1]."""
    ax, ay, aw, ah = r1
    bx, by, bw, bh = r2
    overlap_x = min(ax + aw, bx + bw) - max(ax, bx)
    overlap_y = min(ay + ah, by + bh) - max(ay, by)
    if overlap_x <= 0 or overlap_y <= 0:
        return 0.0

    intersection = float(overlap_x * overlap_y)
    union = aw * ah + bw * bh - intersection
    if union <= 0:
        return 0.0
    return min(1.0, intersection / union)


def find_high_confidence(candidates: Iterable[DetectionCandidate],
                         threshold: float = IOU_THRESHOLD) -> List[Rect]:
    """Cascade boxes corroborated by at least one geometric box (IoU > threshold).

    Candidates are only read; nothing is merged or removed.
    """
    candidates = list(candidates)
    cascade = [c for c in candidates if c.method is DetectionMethod.CASCADE]
    geometric = [c for c in candidates if c.method is DetectionMethod.GEOMETRIC]

    agreed = []
    for h in cascade:
        for g in geometric:
            if calculate_iou(h.bounds, g.bounds) > threshold:
                agreed.append(Rect(*h.bounds))
                break
    return agreed


def detection_stats(candidates: Iterable[DetectionCandidate],
                    high_confidence: Sequence[Rect]) -> DetectionStats:
    cascade = geometric = 0
    for c in candidates:
        if c.method is DetectionMethod.CASCADE:
            cascade += 1
        else:
            geometric += 1
    return DetectionStats(cascade, geometric, len(high_confidence))

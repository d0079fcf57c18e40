from __future__ import annotations

from typing import Iterable, List

from .result import EyePairResult, FailureReason
from .schema import EyePair, Rect, center


def resolve_eye_pair(detections: Iterable[Rect]) -> EyePairResult:
    """Reduce raw eye detections for one face crop to an ordered (left, right) pair.

    The two largest non-empty rects by area are taken as the eyes and the rest
    is treated as noise. Equal areas keep detector order (stable sort). This is
    a crude heuristic: a spurious detection larger than a real eye wins over it.

    Returned centers are in the coordinate space of the crop the detector saw.
    """
    rects: List[Rect] = list(detections)
    if len(rects) < 2:
        return EyePairResult.failure(FailureReason.INSUFFICIENT_EYE_DETECTIONS)

    usable = [r for r in rects if not r.empty]
    if len(usable) < 2:
        return EyePairResult.failure(FailureReason.INSUFFICIENT_EYE_DETECTIONS)

    first, second = sorted(usable, key=lambda r: r.area, reverse=True)[:2]
    a = center(first)
    b = center(second)

    if b.x < a.x:
        return EyePairResult.success(EyePair(left_eye=b, right_eye=a))
    return EyePairResult.success(EyePair(left_eye=a, right_eye=b))

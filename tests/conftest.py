from __future__ import annotations

from typing import Callable, List, Sequence

import cv2
import numpy as np
import pytest

from faceroll.core.schema import Rect


class FakeDetector:
    """Region detector stub: canned rects (or a function of the image), call log kept."""

    def __init__(self, rects: Sequence[Rect] | Callable[[np.ndarray], List[Rect]] = ()):
        self._rects = rects
        self.calls: List[tuple] = []

    def detect(self, image: np.ndarray) -> List[Rect]:
        self.calls.append(tuple(image.shape))
        if callable(self._rects):
            return list(self._rects(image))
        return list(self._rects)


class BlobDetector:
    """Finds bright blobs above a threshold; rects sorted left to right."""

    def __init__(self, threshold: int):
        self.threshold = threshold

    def detect(self, image: np.ndarray) -> List[Rect]:
        _, mask = cv2.threshold(image, self.threshold, 255, cv2.THRESH_BINARY)
        contours, _ = cv2.findContours(mask, cv2.RETR_EXTERNAL, cv2.CHAIN_APPROX_SIMPLE)
        rects = [Rect.from_xywh(cv2.boundingRect(c)) for c in contours]
        return sorted(rects, key=lambda r: r.x)


# Two synthetic faces: the first rolls clockwise (right eye lower), the second the other way.
FACE_BOXES = [(20, 20, 100, 100), (220, 20, 100, 100)]
EYE_CENTERS = [((50, 55), (90, 70)), ((250, 70), (290, 55))]


def synthetic_frame(shape=(200, 400)) -> np.ndarray:
    img = np.zeros(shape, dtype=np.uint8)
    for (x, y, w, h) in FACE_BOXES:
        cv2.rectangle(img, (x, y), (x + w - 1, y + h - 1), 100, -1)
    for pair in EYE_CENTERS:
        for c in pair:
            cv2.circle(img, c, 8, 255, -1)
    return img


@pytest.fixture
def gray_scene() -> np.ndarray:
    return synthetic_frame()


@pytest.fixture
def blob_detectors():
    return BlobDetector(threshold=50), BlobDetector(threshold=200)

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

import cv2
import numpy as np

from ..core.schema import Rect
from .base import DetectorParams, RegionDetector

log = logging.getLogger(__name__)


def resolve_cascade_path(model: Union[str, Path]) -> Path:
    """Find a cascade XML: as given first, then among OpenCV's bundled cascades."""
    p = Path(model)
    if p.is_file():
        return p
    bundled = Path(cv2.data.haarcascades) / p.name
    if bundled.is_file():
        return bundled
    raise RuntimeError(f"Cascade model not found: {str(model)!r} (also looked in {cv2.data.haarcascades})")


@dataclass
class CascadeDetector(RegionDetector):
    """Thin wrapper around cv2.CascadeClassifier.

    Notes:
      - The model is loaded once, at construction.
      - Expects a grayscale image; returns rects in that image's coordinates.
    """

    model: Union[str, Path]
    params: DetectorParams = field(default_factory=DetectorParams)

    # internal (initialized in __post_init__)
    _classifier: cv2.CascadeClassifier | None = None
    _path: Path | None = None

    def __post_init__(self) -> None:
        self._path = resolve_cascade_path(self.model)
        classifier = cv2.CascadeClassifier()
        try:
            loaded = classifier.load(str(self._path))
        except cv2.error as e:
            raise RuntimeError(f"Failed to load cascade classifier: {self._path}") from e
        if not loaded:
            raise RuntimeError(f"Failed to load cascade classifier: {self._path}")
        self._classifier = classifier
        log.debug("loaded cascade %s (%s)", self._path.name, self.params)

    @property
    def path(self) -> Path | None:
        return self._path

    def detect(self, image: np.ndarray) -> List[Rect]:
        if self._classifier is None:
            raise RuntimeError("CascadeDetector is not initialized")
        if image is None or image.size == 0:
            return []

        found = self._classifier.detectMultiScale(
            image,
            scaleFactor=float(self.params.scale_factor),
            minNeighbors=int(self.params.min_neighbors),
            flags=cv2.CASCADE_SCALE_IMAGE,
            minSize=tuple(int(v) for v in self.params.min_size),
        )
        return [Rect.from_xywh(row) for row in found]


def build_cascade_detector(
    *,
    model: Union[str, Path],
    scale_factor: float = 1.1,
    min_neighbors: int = 2,
    min_size: tuple[int, int] = (30, 30),
) -> CascadeDetector:
    """Factory used by the registry."""
    params = DetectorParams(
        scale_factor=float(scale_factor),
        min_neighbors=int(min_neighbors),
        min_size=(int(min_size[0]), int(min_size[1])),
    )
    return CascadeDetector(model=model, params=params)

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol, Tuple

import numpy as np

from ..core.schema import Rect


class RegionDetector(Protocol):
    """Interface for region detector backends (faces, eyes).

    Backends must accept a single-channel image and return axis-aligned rects
    in that image's pixel space. Zero, one or many (possibly overlapping)
    rects may come back, in no particular order.
    """

    def detect(self, image: np.ndarray) -> List[Rect]:
        ...


@dataclass(frozen=True)
class DetectorParams:
    """Tuning knobs shared by multi-scale detectors."""

    scale_factor: float = 1.1
    min_neighbors: int = 2
    min_size: Tuple[int, int] = (30, 30)

    def __post_init__(self) -> None:
        if not float(self.scale_factor) > 1.0:
            raise ValueError(f"scale_factor must be > 1.0, got {self.scale_factor!r}")
        if int(self.min_neighbors) < 0:
            raise ValueError(f"min_neighbors must be >= 0, got {self.min_neighbors!r}")
        if len(self.min_size) != 2 or any(int(v) <= 0 for v in self.min_size):
            raise ValueError(f"min_size must be two positive ints, got {self.min_size!r}")


@dataclass(frozen=True)
class DetectorSpec:
    """Small descriptor used for listing/backends/metadata."""

    name: str
    models: Tuple[str, ...] = ()
    description: str = ""

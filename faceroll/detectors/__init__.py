from __future__ import annotations

from .base import DetectorParams, DetectorSpec, RegionDetector
from .registry import (
    DEFAULT_EYE_MODEL,
    DEFAULT_FACE_MODEL,
    available_detectors,
    available_models,
    detector_spec,
    get_region_detector,
)

__all__ = [
    "DEFAULT_EYE_MODEL",
    "DEFAULT_FACE_MODEL",
    "DetectorParams",
    "DetectorSpec",
    "RegionDetector",
    "available_detectors",
    "available_models",
    "detector_spec",
    "get_region_detector",
]

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Sequence, Union

from .base import DetectorSpec, RegionDetector
from .cascade import build_cascade_detector

DEFAULT_FACE_MODEL = "haarcascade_frontalface_alt.xml"
DEFAULT_EYE_MODEL = "haarcascade_eye.xml"


# -------------------------
# Registry (name -> spec + builder)
# -------------------------

@dataclass(frozen=True)
class _Entry:
    spec: DetectorSpec
    builder: Callable[..., RegionDetector]


_REGISTRY: Dict[str, _Entry] = {
    "cascade": _Entry(
        spec=DetectorSpec(
            name="cascade",
            models=(
                "haarcascade_frontalface_alt.xml",
                "haarcascade_frontalface_alt2.xml",
                "haarcascade_frontalface_default.xml",
                "haarcascade_eye.xml",
                "haarcascade_eye_tree_eyeglasses.xml",
            ),
            description="OpenCV Haar cascade (bundled model name or path to an XML file).",
        ),
        builder=build_cascade_detector,
    )
}


def available_detectors() -> List[str]:
    return sorted(_REGISTRY.keys())


def detector_spec(name: str) -> DetectorSpec:
    key = (name or "").strip().lower()
    if key not in _REGISTRY:
        raise KeyError(f"Unknown detector: {name!r}. Available: {available_detectors()}")
    return _REGISTRY[key].spec


def available_models(name: str) -> List[str]:
    return list(detector_spec(name).models)


def get_region_detector(
    *,
    detector: str = "cascade",
    model: Union[Path, str],
    scale_factor: float = 1.1,
    min_neighbors: int = 2,
    min_size: Sequence[int] = (30, 30),
    **kwargs: Any,
) -> RegionDetector:
    """Factory: construct a region detector backend.

    Args:
      detector: backend name (default: cascade)
      model: bundled model name or path to the model file
      scale_factor: image pyramid step between scales
      min_neighbors: overlapping hits required to keep a detection
      min_size: smallest (w, h) considered

    Extra kwargs are passed through to the backend builder.
    """
    key = (detector or "").strip().lower()
    if key not in _REGISTRY:
        raise ValueError(f"Unknown detector '{detector}'. Available: {available_detectors()}")
    if model is None or not str(model).strip():
        raise ValueError("model is required to build a region detector")
    if len(min_size) != 2:
        raise ValueError(f"min_size must be (w, h), got {tuple(min_size)!r}")

    builder_kwargs: Dict[str, Any] = {
        "model": model,
        "scale_factor": float(scale_factor),
        "min_neighbors": int(min_neighbors),
        "min_size": (int(min_size[0]), int(min_size[1])),
    }
    builder_kwargs.update(kwargs)

    return _REGISTRY[key].builder(**builder_kwargs)

"""
faceroll (module: faceroll)

Per-frame face orientation overlay: finds faces and eyes with region
detectors, estimates each face's center, in-plane tilt (roll) and width, and
draws the indicators on the frame.

- Every frame is analyzed independently; there is no tracking.
- Detectors are injected, already loaded; the core never loads models itself.
- Returns results in-memory; writes artifacts only when enabled.
"""
from __future__ import annotations

from typing import Any

from .detectors import available_detectors, available_models

__all__ = [
    "run_face_overlay",
    "get_region_detector",
    "available_detectors",
    "available_models",
    "__version__",
]

__version__ = "0.1.0"


def run_face_overlay(*args: Any, **kwargs: Any):
    """Lazy proxy to :func:`faceroll.core.pipeline.run_face_overlay`."""
    from .core.pipeline import run_face_overlay as _impl

    return _impl(*args, **kwargs)


def get_region_detector(*args: Any, **kwargs: Any):
    """Lazy proxy to :func:`faceroll.detectors.registry.get_region_detector`."""
    from .detectors import get_region_detector as _impl

    return _impl(*args, **kwargs)

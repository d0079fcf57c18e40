from __future__ import annotations

import logging
from typing import List, Optional

import numpy as np

from ..detectors.base import RegionDetector
from .eyes import resolve_eye_pair
from .pose import estimate_face_pose
from .result import FrameAnalysis, FailureReason
from .schema import Face, Rect

log = logging.getLogger(__name__)


def _is_empty_image(image: Optional[np.ndarray]) -> bool:
    return image is None or image.size == 0


class FrameAnalyzer:
    """Per-frame face pose inference over injected face and eye detectors.

    Holds no state between frames; detectors must be constructed (and their
    models loaded) by the caller.
    """

    def __init__(self, face_detector: RegionDetector, eye_detector: RegionDetector):
        self.face_detector = face_detector
        self.eye_detector = eye_detector

    def analyze(self, frame: np.ndarray) -> List[Face]:
        """Return pose estimates for every face with a resolvable eye pair, in detector order."""
        return self.analyze_detailed(frame).faces

    def analyze_detailed(self, frame: np.ndarray) -> FrameAnalysis:
        out = FrameAnalysis()
        if _is_empty_image(frame):
            return out

        for rect in self.face_detector.detect(frame):
            out.candidates += 1
            reason = self._analyze_face(frame, rect, out.faces)
            if reason is not None:
                log.debug("skipping face %s: %s", tuple(rect), reason.value)
                out.skip(reason)

        return out

    def _analyze_face(self, frame: np.ndarray, rect: Rect, faces: List[Face]) -> Optional[FailureReason]:
        # negative origins would wrap around under numpy slicing
        if rect.empty or rect.x < 0 or rect.y < 0:
            return FailureReason.EMPTY_INPUT

        x, y, w, h = (int(v) for v in rect)
        crop = frame[y:y + h, x:x + w]
        if _is_empty_image(crop):
            return FailureReason.EMPTY_INPUT

        resolved = resolve_eye_pair(self.eye_detector.detect(crop))
        if not resolved.ok:
            return resolved.reason

        eyes = resolved.pair.translated(x, y)
        dx = eyes.right_eye.x - eyes.left_eye.x
        dy = eyes.right_eye.y - eyes.left_eye.y
        if dx == 0 and dy != 0:
            # roll would be +-pi/2 and width unbounded
            return FailureReason.VERTICAL_EYE_LINE

        faces.append(estimate_face_pose(rect, eyes))
        return None


def analyze_frame(
    frame: np.ndarray,
    face_detector: RegionDetector,
    eye_detector: RegionDetector,
) -> List[Face]:
    """One-shot form of :meth:`FrameAnalyzer.analyze`."""
    return FrameAnalyzer(face_detector, eye_detector).analyze(frame)

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .schema import EyePair, Face


class FailureReason(str, Enum):
    """Why a face candidate produced no pose estimate."""

    EMPTY_INPUT = "empty_input"
    INSUFFICIENT_EYE_DETECTIONS = "insufficient_eye_detections"
    VERTICAL_EYE_LINE = "vertical_eye_line"


@dataclass(frozen=True)
class EyePairResult:
    """Either a resolved eye pair or the reason there is none."""

    pair: Optional[EyePair] = None
    reason: Optional[FailureReason] = None

    @property
    def ok(self) -> bool:
        return self.pair is not None

    @classmethod
    def success(cls, pair: EyePair) -> "EyePairResult":
        return cls(pair=pair)

    @classmethod
    def failure(cls, reason: FailureReason) -> "EyePairResult":
        return cls(reason=reason)


@dataclass
class FrameAnalysis:
    """Faces found in one frame plus counters for the candidates that were dropped."""

    faces: List[Face] = field(default_factory=list)
    candidates: int = 0
    skipped: Dict[FailureReason, int] = field(default_factory=dict)

    def skip(self, reason: FailureReason) -> None:
        self.skipped[reason] = self.skipped.get(reason, 0) + 1


@dataclass
class OverlayResult:
    """Result returned by the overlay run loop.

    - payload: per-frame face estimates (always in-memory)
    - paths: populated only when saving is enabled
    - stats: small counters / run info
    """

    payload: Dict[str, Any]
    paths: Dict[str, Path] = field(default_factory=dict)
    stats: Dict[str, Any] = field(default_factory=dict)

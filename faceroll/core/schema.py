from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, NamedTuple, Sequence, Union

Number = Union[int, float]

# -------------------------
# Stable dict keys (run payload)
# -------------------------
K_FRAMES = "frames"
K_FRAME_INDEX = "frame_index"
K_FACES = "faces"

K_POS = "pos"
K_WIDTH = "width"
K_TILT_RADS = "tilt_rads"
K_LEFT_EYE = "left_eye"
K_RIGHT_EYE = "right_eye"

__all__ = [
    # keys
    "K_FRAMES",
    "K_FRAME_INDEX",
    "K_FACES",
    "K_POS",
    "K_WIDTH",
    "K_TILT_RADS",
    "K_LEFT_EYE",
    "K_RIGHT_EYE",
    # types
    "Point",
    "Rect",
    "EyePair",
    "Face",
    # helpers
    "center",
]


# -------------------------
# Geometry primitives
# -------------------------

class Point(NamedTuple):
    x: Number
    y: Number

    def offset(self, dx: Number, dy: Number) -> "Point":
        return Point(self.x + dx, self.y + dy)


class Rect(NamedTuple):
    """Axis-aligned box as reported by a region detector (x, y, w, h)."""

    x: Number
    y: Number
    w: Number
    h: Number

    @classmethod
    def from_xywh(cls, box: Sequence[Any]) -> "Rect":
        # detectMultiScale yields numpy int32 rows; keep plain ints
        x, y, w, h = [int(v) for v in box[:4]]
        return cls(x, y, w, h)

    @property
    def empty(self) -> bool:
        return self.w <= 0 or self.h <= 0

    @property
    def area(self) -> Number:
        return self.w * self.h


def center(rect: Rect) -> Point:
    """Middle of a rect; integer rects use floor division like pixel coords."""
    if all(isinstance(v, int) for v in rect):
        return Point(rect.x + rect.w // 2, rect.y + rect.h // 2)
    return Point(rect.x + rect.w / 2, rect.y + rect.h / 2)


class EyePair(NamedTuple):
    left_eye: Point
    right_eye: Point

    def translated(self, dx: Number, dy: Number) -> "EyePair":
        return EyePair(self.left_eye.offset(dx, dy), self.right_eye.offset(dx, dy))


# -------------------------
# Pose estimate
# -------------------------

@dataclass(frozen=True)
class Face:
    """Pose estimate for one detected face in one frame.

    - pos:       face center (frame pixels)
    - width:     tilt-compensated half-width, used as the ellipse semi-axis
    - tilt_rads: in-plane roll, positive when the right eye sits lower
    - left_eye / right_eye: eye centers in frame pixels
    """

    pos: Point
    width: float
    tilt_rads: float
    left_eye: Point
    right_eye: Point

    def to_dict(self) -> Dict[str, Any]:
        return {
            K_POS: _point_list(self.pos),
            K_WIDTH: float(self.width),
            K_TILT_RADS: float(self.tilt_rads),
            K_LEFT_EYE: _point_list(self.left_eye),
            K_RIGHT_EYE: _point_list(self.right_eye),
        }


def _point_list(p: Point) -> List[Number]:
    return [p.x, p.y]

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from ..core.schema import Face, Point

# -------------------------
# Colors + tiny draw utils
# -------------------------

BLUE = (255, 0, 0)
GREEN = (0, 255, 0)
RED = (0, 0, 255)

EYE_AXES = (20, 10)
FACE_ASPECT = 1.5


def _ipt(p: Point) -> Tuple[int, int]:
    return int(round(float(p[0]))), int(round(float(p[1])))


def _as_bgr(img: np.ndarray) -> np.ndarray:
    if img.ndim == 2:
        return cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)
    return img


def tilt_degrees(face: Face) -> float:
    return math.degrees(face.tilt_rads)


def status_text(count: int) -> str:
    if count == 0:
        return "No face detected"
    if count == 1:
        return "1 face detected"
    return f"{count} faces detected"


# -------------------------
# Primitive drawing
# -------------------------

def draw_eye_line(img: np.ndarray, face: Face, color: Tuple[int, int, int] = GREEN, thickness: int = 2) -> None:
    cv2.line(img, _ipt(face.left_eye), _ipt(face.right_eye), color, thickness)


def draw_tilt_line(img: np.ndarray, face: Face, color: Tuple[int, int, int] = RED, thickness: int = 2) -> None:
    p1 = _ipt(face.pos)
    dx = math.cos(face.tilt_rads) * face.width
    dy = math.sin(face.tilt_rads) * face.width
    p2 = (int(round(p1[0] + dx)), int(round(p1[1] + dy)))
    cv2.line(img, p1, p2, color, thickness)


def draw_face_ellipse(img: np.ndarray, face: Face, color: Tuple[int, int, int] = BLUE, thickness: int = 2) -> None:
    axes = (int(round(face.width)), int(round(face.width * FACE_ASPECT)))
    cv2.ellipse(img, _ipt(face.pos), axes, tilt_degrees(face), 0, 360, color, thickness)


def draw_eye_ellipses(
    img: np.ndarray,
    face: Face,
    color: Tuple[int, int, int] = RED,
    thickness: int = 2,
    axes: Tuple[int, int] = EYE_AXES,
) -> None:
    angle = tilt_degrees(face)
    for eye in (face.left_eye, face.right_eye):
        cv2.ellipse(img, _ipt(eye), axes, angle, 0, 360, color, thickness, cv2.LINE_8, 0)


def draw_face(img: np.ndarray, face: Face) -> None:
    """Eye line, roll line, face ellipse and eye ellipses for one estimate."""
    if not math.isfinite(face.width) or face.width <= 0:
        return
    draw_eye_line(img, face)
    draw_tilt_line(img, face)
    draw_face_ellipse(img, face)
    draw_eye_ellipses(img, face)


def draw_status(
    img: np.ndarray,
    faces: Sequence[Face],
    *,
    color: Tuple[int, int, int] = BLUE,
    font_scale: float = 0.5,
) -> None:
    cv2.putText(img, status_text(len(faces)), (10, 20), cv2.FONT_HERSHEY_SIMPLEX, font_scale, color, 1, cv2.LINE_AA)
    if faces:
        text = f"Tilt: {tilt_degrees(faces[0]):.6f}"
        cv2.putText(img, text, (10, 40), cv2.FONT_HERSHEY_SIMPLEX, font_scale, color, 1, cv2.LINE_AA)


# -------------------------
# Public frame composer
# -------------------------

def draw_frame(
    img: Optional[np.ndarray],
    faces: Sequence[Face],
    *,
    show_faces: bool = True,
    show_status: bool = True,
) -> Optional[np.ndarray]:
    if img is None:
        return img

    img = _as_bgr(img)
    if show_faces:
        for face in faces:
            draw_face(img, face)
    if show_status:
        draw_status(img, faces)
    return img

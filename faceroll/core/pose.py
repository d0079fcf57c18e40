from __future__ import annotations

import math

from .schema import EyePair, Face, Rect, center


def estimate_face_pose(face_rect: Rect, eyes: EyePair) -> Face:
    """Derive center, roll and width for a face from its eye pair.

    Roll is the angle of the vector from the leftmost eye (by x, regardless of
    how the pair is labelled) to the other one, so it stays within
    (-pi/2, pi/2]. Positive means the right eye is lower in image coordinates.

    The face box is assumed square; a rolled head spans width / cos(roll)
    along its own axis, halved so it can be used as an ellipse semi-axis.
    Both inputs must already be valid (non-empty rect, frame-space eyes).
    """
    if eyes.right_eye.x < eyes.left_eye.x:
        tail, head = eyes.right_eye, eyes.left_eye
    else:
        tail, head = eyes.left_eye, eyes.right_eye

    tilt = math.atan2(head.y - tail.y, head.x - tail.x)
    width = (face_rect.w / math.cos(tilt)) * 0.5

    return Face(
        pos=center(face_rect),
        width=float(width),
        tilt_rads=float(tilt),
        left_eye=eyes.left_eye,
        right_eye=eyes.right_eye,
    )

from __future__ import annotations

from .draw import draw_face, draw_frame, draw_status

__all__ = ["draw_face", "draw_frame", "draw_status"]

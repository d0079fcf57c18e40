from __future__ import annotations

from pathlib import Path
from typing import Tuple, Union

import cv2
import numpy as np

Source = Union[int, str, Path]


def parse_source(source: Source) -> Union[int, str]:
    """Camera indices stay ints (digit strings included); anything else is a path."""
    if isinstance(source, int):
        return source
    s = str(source).strip()
    if s.isdigit():
        return int(s)
    return s


# -------------------------
# Video I/O
# -------------------------

class VideoReader:
    def __init__(self, source: Source):
        self.source = parse_source(source)
        self.cap = cv2.VideoCapture(self.source)
        if not self.cap.isOpened():
            raise RuntimeError(f"Failed to open video source: {self.source!r}")
        self._width = int(self.cap.get(cv2.CAP_PROP_FRAME_WIDTH) or 0)
        self._height = int(self.cap.get(cv2.CAP_PROP_FRAME_HEIGHT) or 0)
        fps = float(self.cap.get(cv2.CAP_PROP_FPS) or 0.0)
        self._fps = fps if fps > 0 else 30.0

    @property
    def is_camera(self) -> bool:
        return isinstance(self.source, int)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def fps(self) -> float:
        return self._fps

    @property
    def frame_count(self) -> int:
        if self.is_camera:
            return 0
        return int(self.cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0)

    def read(self) -> Tuple[bool, np.ndarray]:
        return self.cap.read()

    def release(self) -> None:
        try:
            self.cap.release()
        except Exception:
            pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False


class VideoWriter:
    """Annotated-video sink, opened on the first frame and sized from it.

    Camera backends often report 0x0 before the first grab, so the size is
    never taken from the reader. Every later frame must match that size.
    """

    def __init__(self, path: str | Path, fps: float, *, fourcc: str = "mp4v"):
        self.path = Path(path)
        self.fps = float(fps)
        self.fourcc = fourcc
        self._writer: cv2.VideoWriter | None = None
        self._size: Tuple[int, int] | None = None
        self.path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def size(self) -> Tuple[int, int] | None:
        return self._size

    def _open(self, size: Tuple[int, int]) -> cv2.VideoWriter:
        code = cv2.VideoWriter_fourcc(*self.fourcc)
        writer = cv2.VideoWriter(str(self.path), code, self.fps, size)
        if not writer.isOpened():
            raise RuntimeError(f"Failed to open writer: {self.path} ({self.fourcc}, {size[0]}x{size[1]})")
        return writer

    def write(self, frame: np.ndarray) -> None:
        if frame.ndim == 2:
            frame = cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
        size = (int(frame.shape[1]), int(frame.shape[0]))
        if self._writer is None:
            self._writer = self._open(size)
            self._size = size
        elif size != self._size:
            raise ValueError(f"Frame size {size} does not match video size {self._size}")
        self._writer.write(frame)

    def release(self) -> None:
        if self._writer is not None:
            self._writer.release()
            self._writer = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

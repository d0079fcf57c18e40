from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import cv2
import numpy as np

from ..detectors import DEFAULT_EYE_MODEL, DEFAULT_FACE_MODEL, RegionDetector, get_region_detector
from ..viz import draw_frame
from .analyzer import FrameAnalyzer
from .io import Source, VideoReader, VideoWriter
from .result import FailureReason, OverlayResult
from .schema import K_FACES, K_FRAME_INDEX, K_FRAMES

log = logging.getLogger(__name__)

WINDOW_NAME = "faceroll"
_STOP_KEYS = (27, ord("q"))


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat().replace("+00:00", "Z")


def _resolve_out_path(run_dir: Path, maybe_name: Optional[str], default_name: str) -> Path:
    if not maybe_name:
        return run_dir / default_name
    p = Path(maybe_name)
    if p.is_absolute():
        return p
    return run_dir / p


@dataclass
class RunConfig:
    # Input
    source: Source = 0

    # Detectors (built from the model settings unless injected)
    detector: str = "cascade"
    face_model: str = DEFAULT_FACE_MODEL
    eye_model: str = DEFAULT_EYE_MODEL
    scale_factor: float = 1.1
    min_neighbors: int = 2
    min_size: Tuple[int, int] = (30, 30)
    face_detector: Optional[RegionDetector] = None
    eye_detector: Optional[RegionDetector] = None

    # Runtime
    threads: Optional[int] = None
    max_frames: Optional[int] = None
    # keep per-frame face dicts in the payload; None = only for file sources
    collect_frames: Optional[bool] = None

    # Output (opt-in)
    display: bool = False
    save_frames: bool = False
    save_video: Optional[str] = None
    out_dir: Path = Path("out")
    run_name: Optional[str] = None
    fourcc: str = "mp4v"
    no_progress: bool = False


def build_analyzer(cfg: RunConfig) -> FrameAnalyzer:
    """Load both detectors once, up front, and hand them to a FrameAnalyzer."""
    tuning = {
        "scale_factor": cfg.scale_factor,
        "min_neighbors": cfg.min_neighbors,
        "min_size": cfg.min_size,
    }
    face = cfg.face_detector
    if face is None:
        face = get_region_detector(detector=cfg.detector, model=cfg.face_model, **tuning)
    eye = cfg.eye_detector
    if eye is None:
        eye = get_region_detector(detector=cfg.detector, model=cfg.eye_model, **tuning)
    return FrameAnalyzer(face_detector=face, eye_detector=eye)


def _to_gray(frame: np.ndarray) -> np.ndarray:
    if frame.ndim == 2:
        return frame
    return cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)


def run_face_overlay(**kwargs: Any) -> OverlayResult:
    """Main library API: overlay face pose indicators on every frame of a source.

    Returns an OverlayResult(payload, paths, stats).
    """
    cfg = RunConfig(**kwargs)  # type: ignore[arg-type]
    if cfg.max_frames is not None and cfg.max_frames < 0:
        raise ValueError(f"max_frames must be >= 0, got {cfg.max_frames}")

    if cfg.threads is not None:
        cv2.setNumThreads(int(cfg.threads))

    analyzer = build_analyzer(cfg)

    saving_enabled = bool(cfg.save_frames or cfg.save_video)
    paths: Dict[str, Path] = {}
    writer: Optional[VideoWriter] = None
    frames_dir: Optional[Path] = None
    out_video_path: Optional[Path] = None

    if saving_enabled:
        out_dir = Path(cfg.out_dir)
        if cfg.run_name and str(cfg.run_name).strip():
            run_dir = out_dir / str(cfg.run_name)
        else:
            run_dir = out_dir
        run_dir.mkdir(parents=True, exist_ok=True)

        if cfg.save_frames:
            frames_dir = run_dir / "frames"
            frames_dir.mkdir(parents=True, exist_ok=True)
            paths["frames_dir"] = frames_dir

        if cfg.save_video:
            out_video_path = _resolve_out_path(run_dir, cfg.save_video, "annotated.mp4")
            paths["video"] = out_video_path

    reader = VideoReader(cfg.source)
    if reader.is_camera and cfg.max_frames is None and not cfg.display:
        warnings.warn(
            "Camera source without display or max_frames: the run only ends when interrupted.",
            RuntimeWarning,
        )
    if out_video_path is not None:
        writer = VideoWriter(out_video_path, fps=reader.fps, fourcc=cfg.fourcc)

    collect = cfg.collect_frames if cfg.collect_frames is not None else not reader.is_camera
    frames_out: List[Dict[str, Any]] = []
    payload: Dict[str, Any] = {
        "source": str(cfg.source),
        "created_utc": _utc_now_iso(),
        K_FRAMES: frames_out,
    }

    total_frames = 0
    total_candidates = 0
    total_faces = 0
    skipped: Dict[str, int] = {r.value: 0 for r in FailureReason}

    # Optional progress
    pbar = None
    if not cfg.no_progress:
        try:
            from tqdm import tqdm

            total = reader.frame_count or None
            if cfg.max_frames is not None:
                total = min(total, cfg.max_frames) if total else cfg.max_frames
            pbar = tqdm(total=total, desc="faces")
        except Exception:
            pbar = None

    need_viz = bool(cfg.display or writer is not None or frames_dir is not None)

    try:
        fidx = 0
        while cfg.max_frames is None or fidx < cfg.max_frames:
            ok, frame = reader.read()
            if not ok or frame is None or frame.size == 0:
                break
            total_frames += 1

            analysis = analyzer.analyze_detailed(_to_gray(frame))
            total_candidates += analysis.candidates
            total_faces += len(analysis.faces)
            for reason, n in analysis.skipped.items():
                skipped[reason.value] += n

            if collect:
                frames_out.append({
                    K_FRAME_INDEX: fidx,
                    K_FACES: [f.to_dict() for f in analysis.faces],
                })

            if need_viz:
                out_img = draw_frame(frame.copy(), analysis.faces)

                if writer is not None:
                    writer.write(out_img)

                if frames_dir is not None:
                    cv2.imwrite(str(frames_dir / f"{fidx:06d}.jpg"), out_img)

                if cfg.display:
                    cv2.imshow(WINDOW_NAME, out_img)
                    if cv2.waitKey(1) & 0xFF in _STOP_KEYS:
                        log.info("stopped by user at frame %d", fidx)
                        if pbar:
                            pbar.update(1)
                        break

            if pbar:
                pbar.update(1)
            fidx += 1

    finally:
        if writer is not None:
            writer.release()
        reader.release()
        if cfg.display:
            try:
                cv2.destroyAllWindows()
            except Exception:
                pass
        if pbar is not None:
            try:
                pbar.close()
            except Exception:
                pass

    stats: Dict[str, Any] = {
        "frames_processed": total_frames,
        "face_candidates": total_candidates,
        "faces_estimated": total_faces,
        "faces_skipped": skipped,
        "frames_collected": collect,
        "saving_enabled": saving_enabled,
        "out_dir": str(cfg.out_dir),
        "run_name": cfg.run_name,
    }
    if out_video_path is not None:
        stats["out_video"] = str(out_video_path)
    if frames_dir is not None:
        stats["frames_dir"] = str(frames_dir)

    log.info("processed %d frames, %d faces", total_frames, total_faces)
    return OverlayResult(payload=payload, paths=paths, stats=stats)

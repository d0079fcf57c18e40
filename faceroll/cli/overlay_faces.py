from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..core.pipeline import run_face_overlay
from ..detectors import DEFAULT_EYE_MODEL, DEFAULT_FACE_MODEL, available_detectors, available_models


def _build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="faceroll",
        description=(
            "Face roll overlay: detect faces and eyes per frame, estimate each face's "
            "center, in-plane tilt and width, and draw orientation indicators.\n\n"
            "Notes:\n"
            "- Every frame is analyzed on its own; there is no tracking.\n"
            "- Nothing is written unless you enable --frames/--save-video.\n"
        ),
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    # Input
    p.add_argument("--source", default="0", help="Camera index (e.g. 0) or path to a video file.")
    p.add_argument("--max-frames", type=int, default=None, help="Stop after this many frames.")

    # Discovery
    p.add_argument("--list-detectors", action="store_true", help="List available detector backends and exit.")
    p.add_argument("--list-models", action="store_true", help="List known models for --detector and exit.")
    p.add_argument("--detector", default="cascade", help="Detector backend name.")

    # Detector config
    p.add_argument("--face-model", default=DEFAULT_FACE_MODEL, help="Face model (bundled name or path).")
    p.add_argument("--eye-model", default=DEFAULT_EYE_MODEL, help="Eye model (bundled name or path).")
    p.add_argument("--scale-factor", type=float, default=1.1, help="Scale step between detection passes (> 1).")
    p.add_argument("--min-neighbors", type=int, default=2, help="Neighbouring hits needed to keep a detection.")
    p.add_argument(
        "--min-size",
        nargs=2,
        type=int,
        default=[30, 30],
        metavar=("W", "H"),
        help="Smallest detectable region in pixels.",
    )
    p.add_argument("--threads", type=int, default=None, help="OpenCV worker threads (cv2.setNumThreads).")

    # Artifacts (opt-in)
    p.add_argument("--display", action="store_true", help="Show live annotated preview (ESC or q to stop).")
    p.add_argument("--frames", dest="save_frames", action="store_true", help="Save annotated frames under <run>/frames/.")
    p.add_argument(
        "--save-video",
        nargs="?",
        const="annotated.mp4",
        default=None,
        help="Save annotated video under <run>/ (optionally pass a filename).",
    )
    p.add_argument("--out-dir", type=Path, default=Path("out"), help="Output root used only when saving artifacts.")
    p.add_argument(
        "--run-name",
        type=str,
        default=None,
        help="Optional run folder name under --out-dir. If omitted, outputs go directly under --out-dir.",
    )
    p.add_argument("--fourcc", type=str, default="mp4v", help="FourCC codec for saved video.")

    # UX
    p.add_argument("--no-progress", action="store_true", help="Disable tqdm progress bar.")
    p.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity.",
    )

    return p


def main(argv: Optional[List[str]] = None) -> None:
    p = _build_argparser()
    args = p.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    if args.list_detectors:
        for name in available_detectors():
            print(name)
        return

    if args.list_models:
        try:
            models = available_models(args.detector)
        except KeyError as e:
            p.error(str(e))
        for m in models:
            print(m)
        return

    if args.max_frames is not None and args.max_frames < 0:
        p.error("--max-frames must be >= 0")
    if args.scale_factor <= 1.0:
        p.error("--scale-factor must be greater than 1.0")
    if args.min_neighbors < 0:
        p.error("--min-neighbors must be >= 0")
    if any(v <= 0 for v in args.min_size):
        p.error("--min-size values must be positive")

    res = run_face_overlay(
        source=args.source,
        detector=args.detector,
        face_model=args.face_model,
        eye_model=args.eye_model,
        scale_factor=args.scale_factor,
        min_neighbors=args.min_neighbors,
        min_size=(args.min_size[0], args.min_size[1]),
        threads=args.threads,
        max_frames=args.max_frames,
        display=args.display,
        save_frames=args.save_frames,
        save_video=args.save_video,
        out_dir=args.out_dir,
        run_name=args.run_name,
        fourcc=args.fourcc,
        no_progress=args.no_progress,
    )

    print(json.dumps(res.stats, indent=2))


if __name__ == "__main__":
    main()

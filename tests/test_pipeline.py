"""Tests for the video run loop and the CLI."""

import json

import numpy as np
import pytest

from conftest import synthetic_frame
from faceroll.cli.overlay_faces import main
from faceroll.core.io import VideoReader, VideoWriter, parse_source
from faceroll.core.pipeline import run_face_overlay


@pytest.fixture
def scene_video(tmp_path):
    path = tmp_path / "scene.avi"
    frame = synthetic_frame()
    with VideoWriter(path, fps=10.0, fourcc="MJPG") as w:
        for _ in range(5):
            w.write(frame)
    return path


class TestSource:
    @pytest.mark.parametrize("raw,expected", [(0, 0), ("1", 1), (" 2 ", 2), ("clip.mp4", "clip.mp4")])
    def test_parse_source(self, raw, expected):
        assert parse_source(raw) == expected

    def test_missing_video_raises(self, tmp_path):
        with pytest.raises(RuntimeError, match="Failed to open"):
            VideoReader(tmp_path / "missing.avi")

    def test_writer_sized_from_first_frame(self, tmp_path):
        path = tmp_path / "sized.avi"
        with VideoWriter(path, fps=10.0, fourcc="MJPG") as w:
            assert w.size is None
            w.write(np.zeros((48, 64, 3), dtype=np.uint8))
            assert w.size == (64, 48)
            with pytest.raises(ValueError, match="does not match"):
                w.write(np.zeros((32, 64, 3), dtype=np.uint8))
        with VideoReader(path) as r:
            assert (r.width, r.height) == (64, 48)

    def test_writer_without_frames_creates_no_file(self, tmp_path):
        path = tmp_path / "sub" / "never.avi"
        with VideoWriter(path, fps=10.0, fourcc="MJPG"):
            pass
        assert path.parent.is_dir()
        assert not path.exists()

    def test_reader_reports_file_properties(self, scene_video):
        with VideoReader(scene_video) as r:
            assert not r.is_camera
            assert (r.width, r.height) == (400, 200)
            ok, frame = r.read()
            assert ok
            assert frame.shape == (200, 400, 3)


class TestRunFaceOverlay:
    def test_runs_injected_detectors_over_every_frame(self, scene_video, blob_detectors):
        face_det, eye_det = blob_detectors

        res = run_face_overlay(
            source=scene_video,
            face_detector=face_det,
            eye_detector=eye_det,
            no_progress=True,
        )

        assert res.stats["frames_processed"] == 5
        assert res.stats["face_candidates"] == 10
        assert res.stats["faces_estimated"] == 10
        assert sum(res.stats["faces_skipped"].values()) == 0
        assert res.paths == {}

        frames = res.payload["frames"]
        assert [f["frame_index"] for f in frames] == [0, 1, 2, 3, 4]
        for f in frames:
            left, right = f["faces"]
            assert left["tilt_rads"] > 0
            assert right["tilt_rads"] < 0

    def test_payload_left_empty_when_collection_off(self, scene_video, blob_detectors):
        face_det, eye_det = blob_detectors

        res = run_face_overlay(
            source=scene_video,
            face_detector=face_det,
            eye_detector=eye_det,
            collect_frames=False,
            no_progress=True,
        )

        assert res.payload["frames"] == []
        assert res.stats["frames_collected"] is False
        assert res.stats["frames_processed"] == 5
        assert res.stats["faces_estimated"] == 10

    def test_file_sources_collect_frames_by_default(self, scene_video, blob_detectors):
        face_det, eye_det = blob_detectors

        res = run_face_overlay(source=scene_video, face_detector=face_det, eye_detector=eye_det, no_progress=True)

        assert res.stats["frames_collected"] is True
        assert len(res.payload["frames"]) == 5

    def test_max_frames_and_saved_frames(self, scene_video, blob_detectors, tmp_path):
        face_det, eye_det = blob_detectors

        res = run_face_overlay(
            source=scene_video,
            face_detector=face_det,
            eye_detector=eye_det,
            max_frames=2,
            save_frames=True,
            out_dir=tmp_path / "out",
            run_name="r1",
            no_progress=True,
        )

        assert res.stats["frames_processed"] == 2
        frames_dir = res.paths["frames_dir"]
        assert frames_dir == tmp_path / "out" / "r1" / "frames"
        assert sorted(p.name for p in frames_dir.iterdir()) == ["000000.jpg", "000001.jpg"]

    def test_saved_video(self, scene_video, blob_detectors, tmp_path):
        face_det, eye_det = blob_detectors

        res = run_face_overlay(
            source=scene_video,
            face_detector=face_det,
            eye_detector=eye_det,
            save_video="annotated.avi",
            fourcc="MJPG",
            out_dir=tmp_path,
            no_progress=True,
        )

        out = res.paths["video"]
        assert out == tmp_path / "annotated.avi"
        with VideoReader(out) as r:
            ok, frame = r.read()
        assert ok
        # annotated frames are colour: the overlay is not plain gray
        assert not np.array_equal(frame[..., 0], frame[..., 2])

    def test_negative_max_frames_rejected(self, scene_video):
        with pytest.raises(ValueError):
            run_face_overlay(source=scene_video, max_frames=-1)

    def test_default_cascades_on_synthetic_video(self, scene_video):
        res = run_face_overlay(source=scene_video, max_frames=1, no_progress=True)
        assert res.stats["frames_processed"] == 1
        assert len(res.payload["frames"]) == 1


class TestCli:
    def test_list_detectors(self, capsys):
        main(["--list-detectors"])
        assert capsys.readouterr().out.split() == ["cascade"]

    def test_list_models(self, capsys):
        main(["--list-models"])
        assert "haarcascade_eye.xml" in capsys.readouterr().out.split()

    def test_list_models_unknown_detector(self):
        with pytest.raises(SystemExit):
            main(["--list-models", "--detector", "yolo"])

    @pytest.mark.parametrize(
        "argv",
        [
            ["--scale-factor", "1.0"],
            ["--min-neighbors", "-1"],
            ["--min-size", "0", "30"],
            ["--max-frames", "-3"],
        ],
    )
    def test_invalid_tuning_is_a_usage_error(self, argv):
        with pytest.raises(SystemExit) as e:
            main(argv)
        assert e.value.code == 2

    def test_run_prints_stats(self, scene_video, capsys):
        main(["--source", str(scene_video), "--max-frames", "2", "--no-progress"])
        stats = json.loads(capsys.readouterr().out)
        assert stats["frames_processed"] == 2
        assert stats["saving_enabled"] is False

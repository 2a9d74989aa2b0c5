"""Tests for recording and comparing PNG snapshots.

Bitmaps are built directly from bytes so these tests do not need pygame.
"""

from __future__ import annotations

import io
from pathlib import Path

import pytest
from PIL import Image

from sheet_screenshot import snapshot
from sheet_screenshot.ui.toolkit import Bitmap, RenderError

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def solid_bitmap(color=(255, 255, 255), size=(4, 3)) -> Bitmap:
    width, height = size
    return Bitmap(width=width, height=height, pixels=bytes(color) * width * height)


def test_encode_is_deterministic_png():
    first = snapshot.encode_png(solid_bitmap())
    second = snapshot.encode_png(solid_bitmap())

    assert first == second
    assert first.startswith(PNG_SIGNATURE)
    with Image.open(io.BytesIO(first)) as image:
        assert image.size == (4, 3)
        assert image.getpixel((3, 2)) == (255, 255, 255)


def test_bitmap_rejects_mismatched_buffer():
    with pytest.raises(RenderError):
        Bitmap(width=2, height=2, pixels=b"\x00" * 5)


def test_snapshot_path_is_derived_from_test_file():
    path = snapshot.snapshot_path("/project/tests/ui/test_sheet.py", "PresentingSheet")

    assert path == Path("/project/tests/ui/snapshots/PresentingSheet.png")
    assert snapshot.snapshot_path("/project/tests/ui/test_sheet.py", "PresentingSheet") == path


def test_record_creates_directories_and_overwrites(tmp_path: Path):
    location = tmp_path / "nested" / "snapshots"

    path = snapshot.record(solid_bitmap((255, 0, 0)), "Red", location)
    assert path == location / "Red.png"
    assert path.read_bytes() == snapshot.encode_png(solid_bitmap((255, 0, 0)))

    snapshot.record(solid_bitmap((0, 0, 255)), "Red", location)
    assert path.read_bytes() == snapshot.encode_png(solid_bitmap((0, 0, 255)))


def test_record_then_assert_matches(tmp_path: Path):
    snapshot.record(solid_bitmap(), "Plain", tmp_path)

    result = snapshot.assert_matches(solid_bitmap(), "Plain", tmp_path, artifact_dir=tmp_path / "out")

    assert result
    assert result.matched
    assert result.candidate_path is None
    assert not (tmp_path / "out").exists()


def test_missing_baseline_writes_nothing(tmp_path: Path):
    location = tmp_path / "snapshots"
    artifacts = tmp_path / "artifacts"

    with pytest.raises(snapshot.BaselineMissing) as excinfo:
        snapshot.assert_matches(solid_bitmap(), "Missing", location, artifact_dir=artifacts)

    assert excinfo.value.path == location / "Missing.png"
    assert "use the record method before asserting" in str(excinfo.value)
    assert not location.exists()
    assert not artifacts.exists()


def test_mismatch_keeps_baseline_and_writes_candidate(tmp_path: Path):
    location = tmp_path / "snapshots"
    artifacts = tmp_path / "artifacts"
    baseline = snapshot.record(solid_bitmap((255, 255, 255)), "Sheet", location)
    original = baseline.read_bytes()

    result = snapshot.assert_matches(
        solid_bitmap((0, 0, 0)), "Sheet", location, artifact_dir=artifacts
    )

    assert not result
    assert result.baseline_path == baseline
    assert result.candidate_path == artifacts / "Sheet.png"
    assert result.candidate_path != result.baseline_path
    assert result.candidate_path.read_bytes() == snapshot.encode_png(solid_bitmap((0, 0, 0)))
    assert baseline.read_bytes() == original
    assert str(baseline) in result.message
    assert str(result.candidate_path) in result.message
    assert result.message.startswith("Snapshots do not match.")


def test_mismatch_defaults_to_temporary_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    temp_root = tmp_path / "tmp"
    temp_root.mkdir()
    monkeypatch.setattr(snapshot.tempfile, "gettempdir", lambda: str(temp_root))
    snapshot.record(solid_bitmap(), "Default", tmp_path / "snapshots")

    result = snapshot.assert_matches(solid_bitmap((1, 2, 3)), "Default", tmp_path / "snapshots")

    assert result.candidate_path == temp_root / "Default.png"
    assert result.candidate_path.exists()


def test_artifact_directory_must_not_be_the_baseline_directory(tmp_path: Path):
    baseline = snapshot.record(solid_bitmap(), "Same", tmp_path)
    original = baseline.read_bytes()

    with pytest.raises(ValueError):
        snapshot.assert_matches(solid_bitmap((9, 9, 9)), "Same", tmp_path, artifact_dir=tmp_path)

    assert baseline.read_bytes() == original


def test_names_do_not_collide(tmp_path: Path):
    light = snapshot.record(solid_bitmap((255, 255, 255)), "Screen-light", tmp_path)
    dark = snapshot.record(solid_bitmap((0, 0, 0)), "Screen-dark", tmp_path)

    assert light != dark
    assert snapshot.assert_matches(solid_bitmap((255, 255, 255)), "Screen-light", tmp_path)
    assert snapshot.assert_matches(solid_bitmap((0, 0, 0)), "Screen-dark", tmp_path)


def test_persistence_failure_wraps_os_error(tmp_path: Path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")

    with pytest.raises(snapshot.PersistenceFailure) as excinfo:
        snapshot.record(solid_bitmap(), "Blocked", blocker / "snapshots")

    assert isinstance(excinfo.value.__cause__, OSError)
    assert str(excinfo.value).startswith("Failed to save snapshot with error")


def test_encoding_failure_is_reported(monkeypatch: pytest.MonkeyPatch):
    def broken(*args, **kwargs):
        raise ValueError("not enough image data")

    monkeypatch.setattr(snapshot.Image, "frombytes", broken)

    with pytest.raises(snapshot.EncodingFailure, match="Unable to generate PNG data"):
        snapshot.encode_png(solid_bitmap())


def test_aliased_artifact_directory_cannot_overwrite_baseline(tmp_path: Path):
    location = tmp_path / "snapshots"
    baseline = snapshot.record(solid_bitmap((255, 255, 255)), "Alias", location)
    original = baseline.read_bytes()

    with pytest.raises(ValueError):
        snapshot.assert_matches(
            solid_bitmap((0, 0, 0)), "Alias", location, artifact_dir=location / ".." / "snapshots"
        )

    assert baseline.read_bytes() == original


def test_baselines_inside_temporary_directory_get_a_separate_candidate(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
):
    monkeypatch.setattr(snapshot.tempfile, "gettempdir", lambda: str(tmp_path))
    baseline = snapshot.record(solid_bitmap((255, 255, 255)), "InTemp", tmp_path)
    original = baseline.read_bytes()

    result = snapshot.assert_matches(solid_bitmap((0, 0, 0)), "InTemp", tmp_path)

    assert not result
    assert result.candidate_path == tmp_path / snapshot.CANDIDATE_DIRECTORY / "InTemp.png"
    assert result.candidate_path.exists()
    assert baseline.read_bytes() == original


def test_candidate_write_failure_keeps_baseline(tmp_path: Path):
    location = tmp_path / "snapshots"
    baseline = snapshot.record(solid_bitmap((255, 255, 255)), "Blocked", location)
    original = baseline.read_bytes()
    blocker = tmp_path / "artifacts"
    blocker.write_text("not a directory")

    with pytest.raises(snapshot.PersistenceFailure) as excinfo:
        snapshot.assert_matches(solid_bitmap((0, 0, 0)), "Blocked", location, artifact_dir=blocker)

    assert excinfo.value.path == blocker / "Blocked.png"
    assert isinstance(excinfo.value.__cause__, OSError)
    assert baseline.read_bytes() == original

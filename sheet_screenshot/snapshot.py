"""Record and verify PNG snapshots of rendered bitmaps.

Baselines live next to the test that produced them::

    <test directory>/snapshots/<scenario name>.png

Comparison is an exact byte comparison of the encoded PNG data.  When the
bytes differ the new candidate is written to a separate artefact directory so
it can be inspected; the baseline itself is never modified by a comparison.
"""

from __future__ import annotations

import io
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from PIL import Image

from .ui.toolkit import Bitmap

logger = logging.getLogger(__name__)

SNAPSHOT_DIRECTORY = "snapshots"
SNAPSHOT_EXTENSION = "png"
# Fixed so identical pixels always encode to identical bytes.
PNG_COMPRESS_LEVEL = 6
# Used for candidates when the baselines themselves live in the temporary directory.
CANDIDATE_DIRECTORY = "snapshot-candidates"

PathLike = Union[str, Path]


class SnapshotError(Exception):
    """Base class for snapshot failures."""


class EncodingFailure(SnapshotError):
    def __init__(self, detail: str = "") -> None:
        message = "Unable to generate PNG data from the snapshot"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class BaselineMissing(SnapshotError):
    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(
            f"Unable to read PNG data from the snapshot url {path}, "
            "use the record method before asserting."
        )


class PersistenceFailure(SnapshotError):
    def __init__(self, path: Path, error: OSError) -> None:
        self.path = path
        super().__init__(f"Failed to save snapshot with error {error}")


@dataclass(frozen=True)
class ComparisonResult:
    matched: bool
    baseline_path: Path
    candidate_path: Optional[Path] = None

    def __bool__(self) -> bool:
        return self.matched

    @property
    def message(self) -> str:
        if self.matched:
            return f"Snapshot matches {self.baseline_path}"
        return (
            f"Snapshots do not match. New snapshot URL: {self.candidate_path} "
            f"Stored snapshot URL: {self.baseline_path}"
        )


def snapshot_filename(name: str) -> str:
    return f"{name}.{SNAPSHOT_EXTENSION}"


def snapshot_directory(test_file: PathLike) -> Path:
    """Directory holding the baselines of the tests in ``test_file``."""

    return Path(test_file).parent / SNAPSHOT_DIRECTORY


def snapshot_path(test_file: PathLike, name: str) -> Path:
    return snapshot_directory(test_file) / snapshot_filename(name)


def encode_png(bitmap: Bitmap) -> bytes:
    """Encode ``bitmap`` as PNG without any metadata chunks."""

    try:
        image = Image.frombytes("RGB", bitmap.size, bitmap.pixels)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG", optimize=False, compress_level=PNG_COMPRESS_LEVEL)
    except (ValueError, OSError) as exc:
        raise EncodingFailure(str(exc)) from exc
    data = buffer.getvalue()
    if not data:
        raise EncodingFailure()
    return data


def _same_file(first: Path, second: Path) -> bool:
    return first.resolve() == second.resolve()


def _write(path: Path, data: bytes) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as exc:
        raise PersistenceFailure(path, exc) from exc


def record(bitmap: Bitmap, name: str, location: PathLike) -> Path:
    """Write ``bitmap`` as the baseline ``name`` inside ``location``.

    Any existing baseline at that path is overwritten.
    """

    data = encode_png(bitmap)
    path = Path(location) / snapshot_filename(name)
    _write(path, data)
    logger.info("Recorded snapshot %s (%d bytes)", path, len(data))
    return path


def assert_matches(
    bitmap: Bitmap,
    name: str,
    location: PathLike,
    *,
    artifact_dir: Optional[PathLike] = None,
) -> ComparisonResult:
    """Compare ``bitmap`` against the baseline ``name`` inside ``location``.

    Raises :class:`BaselineMissing` when no readable baseline exists.  On a
    mismatch the candidate is written to ``artifact_dir`` (the system
    temporary directory by default) and a failed result is returned.
    """

    data = encode_png(bitmap)
    baseline_path = Path(location) / snapshot_filename(name)
    try:
        stored = baseline_path.read_bytes()
    except OSError as exc:
        raise BaselineMissing(baseline_path) from exc

    if data == stored:
        logger.debug("Snapshot %s matches", baseline_path)
        return ComparisonResult(matched=True, baseline_path=baseline_path)

    if artifact_dir is not None:
        artifacts = Path(artifact_dir)
    else:
        artifacts = Path(tempfile.gettempdir())
        if _same_file(artifacts, baseline_path.parent):
            artifacts = artifacts / CANDIDATE_DIRECTORY
    candidate_path = artifacts / baseline_path.name
    if _same_file(candidate_path, baseline_path):
        raise ValueError(f"Artifact directory {artifacts} must differ from the baseline directory.")
    _write(candidate_path, data)
    logger.warning("Snapshot %s differs; candidate written to %s", baseline_path, candidate_path)
    return ComparisonResult(
        matched=False,
        baseline_path=baseline_path,
        candidate_path=candidate_path,
    )


__all__ = [
    "BaselineMissing",
    "ComparisonResult",
    "EncodingFailure",
    "CANDIDATE_DIRECTORY",
    "PNG_COMPRESS_LEVEL",
    "PersistenceFailure",
    "SNAPSHOT_DIRECTORY",
    "SNAPSHOT_EXTENSION",
    "SnapshotError",
    "assert_matches",
    "encode_png",
    "record",
    "snapshot_directory",
    "snapshot_filename",
    "snapshot_path",
]

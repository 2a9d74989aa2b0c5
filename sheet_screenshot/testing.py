"""Snapshot helpers for pytest based tests.

Both helpers resolve the baseline next to the calling test file, so a test in
``tests/ui/test_sheet.py`` records into ``tests/ui/snapshots/<name>.png``::

    def test_presenting_sheet():
        assert_snapshot(view, "PresentingSheet", iphone8(UserInterfaceStyle.LIGHT))

Every failure is reported through :func:`pytest.fail` at the call site, so
this module needs pytest, installed with the ``test`` extra
(``pip install sheet-screenshot[test]``).
"""

from __future__ import annotations

import inspect
from pathlib import Path
from typing import Optional

import pytest

from . import snapshot as snapshots
from .configuration import DisplayConfiguration
from .ui.toolkit import Bitmap, KeyWindow, RenderError, render, render_in_key_window
from .ui.views import View


def _caller_file() -> str:
    frame = inspect.currentframe()
    try:
        # Skip this helper and the public helper that called it.
        return frame.f_back.f_back.f_code.co_filename
    finally:
        del frame


def _capture(view: View, configuration: DisplayConfiguration, window: Optional[KeyWindow]) -> Bitmap:
    if window is None:
        return render(view, configuration)
    return render_in_key_window(view, configuration, window)


def record_snapshot(
    view: View,
    named: str,
    using: DisplayConfiguration,
    *,
    file: Optional[str] = None,
    window: Optional[KeyWindow] = None,
) -> Path:
    """Render ``view`` and store it as the baseline ``named``."""

    test_file = file or _caller_file()
    try:
        bitmap = _capture(view, using, window)
        return snapshots.record(bitmap, named, snapshots.snapshot_directory(test_file))
    except (RenderError, snapshots.SnapshotError) as exc:
        pytest.fail(str(exc), pytrace=False)


def assert_snapshot(
    view: View,
    named: str,
    using: DisplayConfiguration,
    *,
    file: Optional[str] = None,
    window: Optional[KeyWindow] = None,
    artifact_dir: Optional[Path] = None,
) -> snapshots.ComparisonResult:
    """Render ``view`` and fail the test unless it matches the baseline ``named``."""

    test_file = file or _caller_file()
    try:
        bitmap = _capture(view, using, window)
        result = snapshots.assert_matches(
            bitmap,
            named,
            snapshots.snapshot_directory(test_file),
            artifact_dir=artifact_dir,
        )
    except (RenderError, snapshots.SnapshotError, ValueError) as exc:
        pytest.fail(str(exc), pytrace=False)
    if not result:
        pytest.fail(result.message, pytrace=False)
    return result


__all__ = ["assert_snapshot", "record_snapshot"]

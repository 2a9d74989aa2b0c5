"""Shared pytest fixtures for UI tests.

The tests force pygame into a deterministic headless configuration by using
the SDL ``dummy`` video and audio drivers.  Fonts come from pygame's bundled
default font to avoid platform dependent rasterisation differences.
"""

from __future__ import annotations

import os
from typing import Generator

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")

from sheet_screenshot.ui.toolkit import Bitmap, KeyWindow, ensure_pygame  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def configure_headless_environment() -> Generator[None, None, None]:
    os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
    os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
    yield


@pytest.fixture(scope="session")
def pygame_module():
    pygame = ensure_pygame()
    try:
        yield pygame
    finally:
        pygame.quit()


@pytest.fixture
def key_window(pygame_module) -> KeyWindow:
    pygame_module.event.clear()
    return KeyWindow()


def _pixel(bitmap: Bitmap, x: int, y: int) -> tuple:
    offset = (y * bitmap.width + x) * 3
    return tuple(bitmap.pixels[offset : offset + 3])


@pytest.fixture
def pixel_at():
    return _pixel

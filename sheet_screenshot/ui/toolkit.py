"""Pygame render surface used to capture views for snapshot tests.

This module keeps rendering deterministic so it can be exercised in
automated tests using the SDL ``dummy`` video driver.  Two hosting modes are
provided: an isolated offscreen :class:`SnapshotWindow` and the application's
active :class:`KeyWindow`.
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from ..configuration import DEFAULT_TRAITS, DisplayConfiguration, Traits
from . import layout
from .views import (
    LayoutContext,
    LayoutNode,
    LayoutResult,
    NavigationView,
    Text,
    View,
    layout_root,
)

logger = logging.getLogger(__name__)


# Pygame is imported lazily in ``ensure_pygame`` so test environments can
# control the SDL configuration (e.g. select the ``dummy`` video driver).
_PYGAME = None
_LAYOUT_EVENT: Optional[int] = None

# The pygame display is process-wide state; every key window use holds this.
DISPLAY_LOCK = threading.RLock()


def ensure_pygame():
    global _PYGAME
    if _PYGAME is None:
        os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
        _PYGAME = __import__("pygame")
        _PYGAME.display.init()
        _PYGAME.font.init()
    return _PYGAME


def _layout_event_type() -> int:
    global _LAYOUT_EVENT
    pygame = ensure_pygame()
    if _LAYOUT_EVENT is None:
        _LAYOUT_EVENT = pygame.event.custom_type()
    return _LAYOUT_EVENT


class RenderError(RuntimeError):
    """Raised when a view could not be rasterised."""


@dataclass(frozen=True)
class Bitmap:
    """Tightly packed RGB pixels captured from a render surface."""

    width: int
    height: int
    pixels: bytes

    def __post_init__(self) -> None:
        expected = self.width * self.height * 3
        if len(self.pixels) != expected:
            raise RenderError(
                f"Pixel buffer holds {len(self.pixels)} bytes, expected {expected} "
                f"for {self.width}x{self.height} RGB."
            )

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @classmethod
    def from_surface(cls, surface) -> "Bitmap":
        pygame = ensure_pygame()
        data = pygame.image.tobytes(surface, "RGB")
        if not data:
            raise RenderError("Surface produced no pixel data.")
        width, height = surface.get_size()
        return cls(width=width, height=height, pixels=bytes(data))


class FontCache:
    """Default pygame fonts keyed by size and weight."""

    def __init__(self) -> None:
        self._fonts: Dict[Tuple[int, bool], object] = {}

    def get(self, size: int, bold: bool = False):
        key = (size, bold)
        font = self._fonts.get(key)
        if font is None:
            pygame = ensure_pygame()
            # The bundled default font keeps output identical across systems.
            font = pygame.font.Font(None, size)
            font.set_bold(bold)
            self._fonts[key] = font
        return font

    def measure(self, text: str, size: int, bold: bool) -> Tuple[int, int]:
        return self.get(size, bold).size(text)


# ----------------------------------------------------------------------
# Painting
def _paint_node(surface, node: LayoutNode, palette: layout.Palette, fonts: FontCache) -> None:
    pygame = ensure_pygame()
    view = node.view
    if isinstance(view, NavigationView):
        x, y, width, height = node.attributes["bar_frame"]
        surface.fill(palette.navigation_bar, pygame.Rect(x, y, width, height))
        surface.fill(
            palette.separator,
            pygame.Rect(x, y + height - layout.HAIRLINE_WIDTH, width, layout.HAIRLINE_WIDTH),
        )
        title = node.attributes.get("title")
        if title:
            font = fonts.get(node.attributes["title_size"], True)
            label = font.render(title, True, palette.label)
            surface.blit(label, node.attributes["title_frame"][:2])
    elif isinstance(view, Text):
        font = fonts.get(node.attributes["font_size"], node.attributes["bold"])
        label = font.render(view.content, True, palette.label)
        surface.blit(label, node.frame[:2])
    for child in node.children:
        _paint_node(surface, child, palette, fonts)


def _paint_presentations(surface, result: LayoutResult, palette: layout.Palette, fonts: FontCache) -> None:
    if not result.presentations:
        return
    pygame = ensure_pygame()
    dimming = pygame.Surface(surface.get_size(), pygame.SRCALPHA)
    dimming.fill((*palette.dimming, layout.DIMMING_ALPHA))
    surface.blit(dimming, (0, 0))

    radius = layout.SHEET_CORNER_RADIUS
    for presentation in result.presentations:
        x, y, width, height = presentation.frame
        rect = pygame.Rect(x, y, width, height)
        pygame.draw.rect(
            surface,
            palette.sheet_background,
            rect,
            border_top_left_radius=radius,
            border_top_right_radius=radius,
        )
        grabber_width, grabber_height = layout.GRABBER_SIZE
        grabber = pygame.Rect(0, 0, grabber_width, grabber_height)
        grabber.midtop = (rect.centerx, y + layout.GRABBER_TOP)
        pygame.draw.rect(surface, palette.grabber, grabber, border_radius=grabber_height // 2)
        _paint_node(surface, presentation.content, palette, fonts)


class HostingController:
    """Owns the layout of one root view and counts render passes."""

    def __init__(self, root_view: View) -> None:
        self.root_view = root_view
        self.layout_passes = 0
        self.paint_passes = 0
        self._result: Optional[LayoutResult] = None

    @property
    def needs_layout(self) -> bool:
        return self._result is None

    def set_needs_layout(self) -> None:
        self._result = None

    def layout(self, context: LayoutContext) -> LayoutResult:
        self._result = layout_root(self.root_view, context)
        self.layout_passes += 1
        logger.debug(
            "Layout pass %d for %r (%d presentations)",
            self.layout_passes,
            self.root_view,
            len(self._result.presentations),
        )
        return self._result

    def paint(self, surface, traits: Traits, fonts: FontCache) -> None:
        if self._result is None:
            raise RenderError("Cannot paint before the view has been laid out.")
        palette = layout.palette_for(traits.user_interface_style)
        for layer in layout.DRAW_ORDER:
            if layer == "root":
                surface.fill(palette.background)
                _paint_node(surface, self._result.root, palette, fonts)
            elif layer == "presentations":
                _paint_presentations(surface, self._result, palette, fonts)
        self.paint_passes += 1


def _make_context(configuration: DisplayConfiguration, traits: Traits, fonts: FontCache) -> LayoutContext:
    return LayoutContext(
        bounds=(0, 0, configuration.size.width, configuration.size.height),
        traits=traits,
        safe_area_insets=configuration.safe_area_insets,
        layout_margins=configuration.layout_margins,
        measure_text=fonts.measure,
    )


class SnapshotWindow:
    """Isolated offscreen window used for a single capture."""

    def __init__(
        self,
        configuration: DisplayConfiguration,
        root: HostingController,
        *,
        ambient_traits: Traits = DEFAULT_TRAITS,
    ) -> None:
        pygame = ensure_pygame()
        self.configuration = configuration
        self.root = root
        self.traits = configuration.effective_traits(ambient_traits)
        self.surface = pygame.Surface(configuration.size.as_tuple())
        self.fonts = FontCache()

    @property
    def safe_area_insets(self):
        return self.configuration.safe_area_insets

    @property
    def layout_margins(self):
        return self.configuration.layout_margins

    def layout_if_needed(self) -> None:
        if self.root.needs_layout:
            self.root.layout(_make_context(self.configuration, self.traits, self.fonts))

    def snapshot(self) -> Bitmap:
        self.layout_if_needed()
        self.root.paint(self.surface, self.traits, self.fonts)
        return Bitmap.from_surface(self.surface)


class KeyWindow:
    """The application's active top-level pygame window.

    Hosting a controller replaces whatever the window was showing.  Layout is
    requested through the pygame event queue and only performed when the
    queue is drained, mirroring how a real application settles pending work.
    """

    def __init__(self, *, ambient_traits: Traits = DEFAULT_TRAITS, lock=DISPLAY_LOCK) -> None:
        self.ambient_traits = ambient_traits
        self.lock = lock
        self.root: Optional[HostingController] = None
        self.configuration: Optional[DisplayConfiguration] = None
        self.traits: Traits = ambient_traits
        self.fonts = FontCache()

    @property
    def surface(self):
        return ensure_pygame().display.get_surface()

    def host(self, root: HostingController, configuration: DisplayConfiguration) -> None:
        pygame = ensure_pygame()
        size = configuration.size.as_tuple()
        current = pygame.display.get_surface()
        if current is None or current.get_size() != size:
            pygame.display.set_mode(size)
        self.root = root
        self.configuration = configuration
        self.traits = configuration.effective_traits(self.ambient_traits)
        root.set_needs_layout()
        pygame.event.post(pygame.event.Event(_layout_event_type()))
        logger.debug("Hosting %r in key window at %dx%d", root.root_view, *size)

    def layout_if_needed(self) -> None:
        if self.root is not None and self.root.needs_layout:
            self.root.layout(_make_context(self.configuration, self.traits, self.fonts))

    def drain(self) -> int:
        """Process pending layout requests; returns how many were handled."""

        pygame = ensure_pygame()
        pygame.event.pump()
        handled = 0
        for _event in pygame.event.get(_layout_event_type()):
            handled += 1
            self.layout_if_needed()
        return handled

    def present(self):
        """Paint the hosted view once and show it; returns the display surface."""

        if self.root is None:
            raise RenderError("Key window has no hosted view to capture.")
        pygame = ensure_pygame()
        self.layout_if_needed()
        surface = pygame.display.get_surface()
        if surface is None:
            raise RenderError("No active display surface to capture.")
        self.root.paint(surface, self.traits, self.fonts)
        pygame.display.flip()
        return surface

    def snapshot(self) -> Bitmap:
        return Bitmap.from_surface(self.present())


def render(view: View, configuration: DisplayConfiguration) -> Bitmap:
    """Render ``view`` in an isolated offscreen window."""

    return SnapshotWindow(configuration, HostingController(view)).snapshot()


def render_in_key_window(view: View, configuration: DisplayConfiguration, window: KeyWindow) -> Bitmap:
    """Render ``view`` by replacing the content of the active window."""

    with window.lock:
        window.host(HostingController(view), configuration)
        window.drain()
        return window.snapshot()


__all__ = [
    "Bitmap",
    "DISPLAY_LOCK",
    "FontCache",
    "HostingController",
    "KeyWindow",
    "RenderError",
    "SnapshotWindow",
    "ensure_pygame",
    "render",
    "render_in_key_window",
]

"""Interactive demo screen presenting a modal sheet using pygame."""

from __future__ import annotations

import argparse
from typing import Optional, Sequence

from ..configuration import DisplayConfiguration, UserInterfaceStyle, iphone8
from .toolkit import HostingController, KeyWindow, ensure_pygame
from .views import Text, View

WINDOW_TITLE = "SheetScreenShot"


def content_view() -> View:
    return Text("Hello, world!").padding()


def app_scene() -> View:
    """The application's single scene: content with a sheet on top."""

    return content_view().sheet(True, Text("It's a sheet"))


class SheetScreenShotApp:
    """Pygame driven application showing the demo scene."""

    def __init__(self, configuration: Optional[DisplayConfiguration] = None) -> None:
        pygame = ensure_pygame()
        self.configuration = configuration or iphone8()
        pygame.display.set_caption(WINDOW_TITLE)
        pygame.display.set_mode(self.configuration.size.as_tuple())
        self.window = KeyWindow()
        self.controller = HostingController(app_scene())
        self.clock = pygame.time.Clock()

    def handle_event(self, event) -> bool:
        """Return *False* once the event asks the application to stop."""

        pygame = ensure_pygame()
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            return False
        return True

    def draw(self) -> None:
        with self.window.lock:
            self.window.drain()
            self.window.present()

    def run(self) -> None:
        pygame = ensure_pygame()
        self.window.host(self.controller, self.configuration)
        running = True
        while running:
            self.draw()
            for event in pygame.event.get():
                running = self.handle_event(event) and running
            self.clock.tick(30)
        pygame.quit()


def describe(configuration: DisplayConfiguration) -> str:
    size = configuration.size
    safe = configuration.safe_area_insets
    margins = configuration.layout_margins
    lines = [
        "SheetScreenShot display",
        f"  size: {size.width}x{size.height}",
        f"  safe area: top={safe.top} left={safe.left} bottom={safe.bottom} right={safe.right}",
        f"  layout margins: top={margins.top} left={margins.left} "
        f"bottom={margins.bottom} right={margins.right}",
    ]
    for name, value in configuration.traits.as_mapping().items():
        shown = getattr(value, "name", value)
        lines.append(f"  {name}: {shown}")
    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SheetScreenShot demo launcher")
    parser.add_argument(
        "--dark",
        action="store_true",
        help="Use the dark appearance instead of the light one.",
    )
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print the display configuration and exit without opening a window.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    style = UserInterfaceStyle.DARK if args.dark else UserInterfaceStyle.LIGHT
    configuration = iphone8(style)
    print(describe(configuration))
    if args.info:
        return 0
    SheetScreenShotApp(configuration).run()
    return 0


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    raise SystemExit(main())

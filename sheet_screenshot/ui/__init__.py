"""User interface package: views, the render surface and the demo screen."""

from .main import SheetScreenShotApp, app_scene, content_view, main
from .toolkit import (
    Bitmap,
    HostingController,
    KeyWindow,
    RenderError,
    SnapshotWindow,
    render,
    render_in_key_window,
)
from .views import NavigationView, Text, View, VStack

__all__ = [
    "Bitmap",
    "HostingController",
    "KeyWindow",
    "NavigationView",
    "RenderError",
    "SheetScreenShotApp",
    "SnapshotWindow",
    "Text",
    "VStack",
    "View",
    "app_scene",
    "content_view",
    "main",
    "render",
    "render_in_key_window",
]

"""SheetScreenShot package."""

from .configuration import DisplayConfiguration, UserInterfaceStyle, iphone8, preset
from .snapshot import BaselineMissing, ComparisonResult, assert_matches, record
from .ui import KeyWindow, NavigationView, Text, VStack, View, render, render_in_key_window

__all__ = [
    "BaselineMissing",
    "ComparisonResult",
    "DisplayConfiguration",
    "KeyWindow",
    "NavigationView",
    "Text",
    "UserInterfaceStyle",
    "VStack",
    "View",
    "assert_matches",
    "iphone8",
    "preset",
    "record",
    "render",
    "render_in_key_window",
]

"""Display configurations used to render views deterministically."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Callable, Dict, Mapping, Optional, Tuple


class UserInterfaceStyle(Enum):
    LIGHT = "light"
    DARK = "dark"


class LayoutDirection(Enum):
    LEFT_TO_RIGHT = "leftToRight"
    RIGHT_TO_LEFT = "rightToLeft"


class ContentSizeCategory(Enum):
    """Preferred text size; the value is the body font size in points."""

    EXTRA_SMALL = 13
    SMALL = 14
    MEDIUM = 16
    LARGE = 17
    EXTRA_LARGE = 19
    EXTRA_EXTRA_LARGE = 21
    EXTRA_EXTRA_EXTRA_LARGE = 23

    @property
    def body_size(self) -> int:
        return self.value


class UserInterfaceIdiom(Enum):
    PHONE = "phone"
    PAD = "pad"


class SizeClass(Enum):
    COMPACT = "compact"
    REGULAR = "regular"


class DisplayGamut(Enum):
    SRGB = "sRGB"
    P3 = "P3"


class ForceTouchCapability(Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


@dataclass(frozen=True)
class Size:
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Display size must be positive, got {self.width}x{self.height}")

    def as_tuple(self) -> Tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class EdgeInsets:
    top: int = 0
    left: int = 0
    bottom: int = 0
    right: int = 0

    def __post_init__(self) -> None:
        for item in fields(self):
            if getattr(self, item.name) < 0:
                raise ValueError(f"Inset '{item.name}' must not be negative.")

    def inset(self, frame: Tuple[int, int, int, int]) -> Tuple[int, int, int, int]:
        """Shrink an ``(x, y, width, height)`` rectangle by these insets."""

        x, y, width, height = frame
        return (
            x + self.left,
            y + self.top,
            max(0, width - self.left - self.right),
            max(0, height - self.top - self.bottom),
        )


@dataclass(frozen=True)
class Traits:
    """Bundle of display traits. ``None`` marks a trait as unspecified."""

    force_touch_capability: Optional[ForceTouchCapability] = None
    layout_direction: Optional[LayoutDirection] = None
    preferred_content_size_category: Optional[ContentSizeCategory] = None
    user_interface_idiom: Optional[UserInterfaceIdiom] = None
    horizontal_size_class: Optional[SizeClass] = None
    vertical_size_class: Optional[SizeClass] = None
    display_scale: Optional[float] = None
    display_gamut: Optional[DisplayGamut] = None
    user_interface_style: Optional[UserInterfaceStyle] = None

    def merged(self, *others: "Traits") -> "Traits":
        """Return a bundle where the right-most specified value of each trait wins."""

        values = {item.name: getattr(self, item.name) for item in fields(self)}
        for other in others:
            for item in fields(other):
                value = getattr(other, item.name)
                if value is not None:
                    values[item.name] = value
        return Traits(**values)

    def as_mapping(self) -> Dict[str, object]:
        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }


# Ambient traits of a bare window; every configuration overrides these.
DEFAULT_TRAITS = Traits(
    force_touch_capability=ForceTouchCapability.UNAVAILABLE,
    layout_direction=LayoutDirection.LEFT_TO_RIGHT,
    preferred_content_size_category=ContentSizeCategory.LARGE,
    user_interface_idiom=UserInterfaceIdiom.PHONE,
    horizontal_size_class=SizeClass.COMPACT,
    vertical_size_class=SizeClass.REGULAR,
    display_scale=1.0,
    display_gamut=DisplayGamut.SRGB,
    user_interface_style=UserInterfaceStyle.LIGHT,
)


@dataclass(frozen=True)
class DisplayConfiguration:
    """Everything that determines how a view tree is rasterised."""

    size: Size
    safe_area_insets: EdgeInsets
    layout_margins: EdgeInsets
    traits: Traits

    def with_traits(self, **overrides: object) -> "DisplayConfiguration":
        return replace(self, traits=replace(self.traits, **overrides))

    def effective_traits(self, ambient: Traits = DEFAULT_TRAITS) -> Traits:
        return ambient.merged(self.traits)


def iphone8(style: UserInterfaceStyle = UserInterfaceStyle.LIGHT) -> DisplayConfiguration:
    return DisplayConfiguration(
        size=Size(width=375, height=667),
        safe_area_insets=EdgeInsets(top=20, left=0, bottom=0, right=0),
        layout_margins=EdgeInsets(top=20, left=16, bottom=0, right=16),
        traits=Traits(
            force_touch_capability=ForceTouchCapability.AVAILABLE,
            layout_direction=LayoutDirection.LEFT_TO_RIGHT,
            preferred_content_size_category=ContentSizeCategory.MEDIUM,
            user_interface_idiom=UserInterfaceIdiom.PHONE,
            horizontal_size_class=SizeClass.COMPACT,
            vertical_size_class=SizeClass.REGULAR,
            display_scale=2.0,
            display_gamut=DisplayGamut.P3,
            user_interface_style=style,
        ),
    )


PRESETS: Mapping[str, Callable[..., DisplayConfiguration]] = {
    "iphone8": iphone8,
}


def preset(name: str, **kwargs: object) -> DisplayConfiguration:
    """Build the named preset configuration."""

    factory = PRESETS.get(name)
    if factory is None:
        known = ", ".join(sorted(PRESETS))
        raise KeyError(f"Unknown display preset '{name}'. Known presets: {known}")
    return factory(**kwargs)


__all__ = [
    "ContentSizeCategory",
    "DEFAULT_TRAITS",
    "DisplayConfiguration",
    "DisplayGamut",
    "EdgeInsets",
    "ForceTouchCapability",
    "LayoutDirection",
    "PRESETS",
    "Size",
    "SizeClass",
    "Traits",
    "UserInterfaceIdiom",
    "UserInterfaceStyle",
    "iphone8",
    "preset",
]

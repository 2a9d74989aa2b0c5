"""Composable view values and the single-pass layout that positions them.

Views are immutable descriptions. ``layout_root`` turns a view tree into a
tree of :class:`LayoutNode` frames for a given :class:`LayoutContext`; the
pygame specific painting lives in :mod:`sheet_screenshot.ui.toolkit`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Tuple

from ..configuration import (
    EdgeInsets,
    LayoutDirection,
    SizeClass,
    Traits,
)
from . import layout as metrics

Rect = Tuple[int, int, int, int]
TextMeasurer = Callable[[str, int, bool], Tuple[int, int]]


@dataclass
class LayoutContext:
    """Inputs shared by every view during one layout pass."""

    bounds: Rect
    traits: Traits
    safe_area_insets: EdgeInsets
    layout_margins: EdgeInsets
    measure_text: TextMeasurer
    presentations: List["Presentation"] = field(default_factory=list)

    @property
    def body_size(self) -> int:
        return self.traits.preferred_content_size_category.body_size

    @property
    def right_to_left(self) -> bool:
        return self.traits.layout_direction is LayoutDirection.RIGHT_TO_LEFT


@dataclass
class LayoutNode:
    view: "View"
    frame: Rect
    children: List["LayoutNode"] = field(default_factory=list)
    attributes: Dict[str, object] = field(default_factory=dict)


@dataclass
class Presentation:
    """A modal presentation anchored to the root of the window."""

    frame: Rect
    content: LayoutNode


@dataclass
class LayoutResult:
    root: LayoutNode
    presentations: List[Presentation]


def _centered(frame: Rect, size: Tuple[int, int]) -> Rect:
    x, y, width, height = frame
    w = min(size[0], width)
    h = min(size[1], height)
    return (x + (width - w) // 2, y + (height - h) // 2, w, h)


class View:
    """Base class for renderable view values."""

    def measure(self, context: LayoutContext) -> Tuple[int, int]:
        raise NotImplementedError

    def layout(self, frame: Rect, context: LayoutContext) -> LayoutNode:
        raise NotImplementedError

    def navigation_title_text(self) -> Optional[str]:
        return None

    # ------------------------------------------------------------------
    # Modifiers
    def padding(self, amount: int = metrics.DEFAULT_PADDING) -> "Padding":
        return Padding(self, EdgeInsets(amount, amount, amount, amount))

    def navigation_title(self, title: str) -> "NavigationTitle":
        return NavigationTitle(self, title)

    def sheet(self, is_presented: bool, content: "View") -> "Sheet":
        return Sheet(self, is_presented, content)


class Text(View):
    def __init__(self, content: str, *, bold: bool = False) -> None:
        self.content = content
        self.bold = bold

    def __repr__(self) -> str:
        return f"Text({self.content!r})"

    def measure(self, context: LayoutContext) -> Tuple[int, int]:
        return context.measure_text(self.content, context.body_size, self.bold)

    def layout(self, frame: Rect, context: LayoutContext) -> LayoutNode:
        return LayoutNode(
            self,
            _centered(frame, self.measure(context)),
            attributes={"font_size": context.body_size, "bold": self.bold},
        )


class VStack(View):
    def __init__(self, *children: View, spacing: int = metrics.DEFAULT_SPACING) -> None:
        self.children = children
        self.spacing = spacing

    def measure(self, context: LayoutContext) -> Tuple[int, int]:
        sizes = [child.measure(context) for child in self.children]
        if not sizes:
            return (0, 0)
        width = max(size[0] for size in sizes)
        height = sum(size[1] for size in sizes) + self.spacing * (len(sizes) - 1)
        return (width, height)

    def layout(self, frame: Rect, context: LayoutContext) -> LayoutNode:
        x, y, width, height = frame
        _, total = self.measure(context)
        current_y = y + max(0, (height - total) // 2)
        nodes = []
        for child in self.children:
            child_height = child.measure(context)[1]
            nodes.append(child.layout((x, current_y, width, child_height), context))
            current_y += child_height + self.spacing
        return LayoutNode(self, frame, nodes)


class _Modifier(View):
    """A view wrapping a single child and forwarding its measurements."""

    def __init__(self, content: View) -> None:
        self.content = content

    def measure(self, context: LayoutContext) -> Tuple[int, int]:
        return self.content.measure(context)

    def layout(self, frame: Rect, context: LayoutContext) -> LayoutNode:
        return LayoutNode(self, frame, [self.content.layout(frame, context)])

    def navigation_title_text(self) -> Optional[str]:
        return self.content.navigation_title_text()


class Padding(_Modifier):
    def __init__(self, content: View, insets: EdgeInsets) -> None:
        super().__init__(content)
        self.insets = insets

    def measure(self, context: LayoutContext) -> Tuple[int, int]:
        width, height = self.content.measure(context)
        return (
            width + self.insets.left + self.insets.right,
            height + self.insets.top + self.insets.bottom,
        )

    def layout(self, frame: Rect, context: LayoutContext) -> LayoutNode:
        inner = self.insets.inset(frame)
        return LayoutNode(self, frame, [self.content.layout(inner, context)])


class NavigationTitle(_Modifier):
    def __init__(self, content: View, title: str) -> None:
        super().__init__(content)
        self.title = title

    def navigation_title_text(self) -> Optional[str]:
        return self.title


class Sheet(_Modifier):
    """Presents ``sheet_content`` modally above the whole window."""

    def __init__(self, content: View, is_presented: bool, sheet_content: View) -> None:
        super().__init__(content)
        self.is_presented = is_presented
        self.sheet_content = sheet_content

    def layout(self, frame: Rect, context: LayoutContext) -> LayoutNode:
        node = super().layout(frame, context)
        if self.is_presented:
            sheet_frame = sheet_frame_for(context)
            content_frame = EdgeInsets(
                top=metrics.GRABBER_TOP + metrics.GRABBER_SIZE[1],
                bottom=context.safe_area_insets.bottom,
            ).inset(sheet_frame)
            # Sheets presented from within this one must stay above it.
            index = len(context.presentations)
            content = self.sheet_content.layout(content_frame, context)
            context.presentations.insert(index, Presentation(frame=sheet_frame, content=content))
        return node


class NavigationView(View):
    """Hosts content below a navigation bar showing a large title."""

    def __init__(self, content: View) -> None:
        self.content = content

    def measure(self, context: LayoutContext) -> Tuple[int, int]:
        width, height = self.content.measure(context)
        return (width, height + metrics.NAVIGATION_BAR_HEIGHT + metrics.LARGE_TITLE_HEIGHT)

    def layout(self, frame: Rect, context: LayoutContext) -> LayoutNode:
        x, y, width, height = frame
        title = self.content.navigation_title_text()
        bar_top = y + context.safe_area_insets.top
        bar_height = metrics.NAVIGATION_BAR_HEIGHT
        if title:
            bar_height += metrics.LARGE_TITLE_HEIGHT
        bar_frame = (x, y, width, bar_top - y + bar_height)

        attributes: Dict[str, object] = {"bar_frame": bar_frame}
        if title:
            title_size = context.body_size + metrics.LARGE_TITLE_SIZE_DELTA
            title_width, title_height = context.measure_text(title, title_size, True)
            margins = context.layout_margins
            if context.right_to_left:
                title_x = x + width - margins.right - title_width
            else:
                title_x = x + margins.left
            title_y = (
                bar_top
                + metrics.NAVIGATION_BAR_HEIGHT
                + (metrics.LARGE_TITLE_HEIGHT - title_height) // 2
            )
            attributes.update(
                title=title,
                title_size=title_size,
                title_frame=(title_x, title_y, title_width, title_height),
            )

        content_top = bar_top + bar_height
        content_frame = (
            x,
            content_top,
            width,
            max(0, y + height - context.safe_area_insets.bottom - content_top),
        )
        child = self.content.layout(content_frame, context)
        return LayoutNode(self, frame, [child], attributes)


def sheet_frame_for(context: LayoutContext) -> Rect:
    """Frame of a presented sheet, derived from the window bounds."""

    x, y, width, height = context.bounds
    if context.traits.horizontal_size_class is SizeClass.REGULAR:
        sheet_width = min(metrics.FORM_SHEET_SIZE[0], width)
        sheet_height = min(metrics.FORM_SHEET_SIZE[1], height)
        return _centered(context.bounds, (sheet_width, sheet_height))
    top = y + context.safe_area_insets.top + metrics.SHEET_TOP_OFFSET
    return (x, top, width, max(0, y + height - top))


def layout_root(view: View, context: LayoutContext) -> LayoutResult:
    """Lay out ``view`` full screen and collect its presentations."""

    context.presentations.clear()
    root = view.layout(context.bounds, context)
    return LayoutResult(root=root, presentations=list(context.presentations))


__all__ = [
    "LayoutContext",
    "LayoutNode",
    "LayoutResult",
    "NavigationTitle",
    "NavigationView",
    "Padding",
    "Presentation",
    "Sheet",
    "Text",
    "VStack",
    "View",
    "layout_root",
    "sheet_frame_for",
]

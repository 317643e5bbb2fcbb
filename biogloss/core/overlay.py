"""
BioGloss Tooltip Overlay
Placement and show/hide state for the definition tooltip
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from .annotator import AnnotatedSpan, SpanKind
from .cache import DefinitionCache

logger = logging.getLogger(__name__)

SIMPLE_SOURCE_LABEL = "Simple English dictionary"


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int


@dataclass(frozen=True)
class TooltipState:
    """The single visible tooltip"""
    term: str
    definition: str
    source_label: str
    x: int
    y: int


def compute_position(x: int, y: int,
                     width: int, height: int,
                     viewport: Viewport,
                     offset: int = 10,
                     margin: int = 10) -> Tuple[int, int]:
    """
    Place a tooltip of the given size next to a pointer position.

    The tooltip starts offset below-right of the pointer; when its right or
    bottom edge would leave the viewport it is pulled back inside with a
    margin. Never placed at negative coordinates.
    """
    left = x + offset
    top = y + offset

    if left + width > viewport.width:
        left = viewport.width - width - margin
    if top + height > viewport.height:
        top = viewport.height - height - margin

    return max(0, left), max(0, top)


class OverlayController:
    """
    Tooltip state machine: Hidden (state is None) or Shown(TooltipState).

    Activating a tag replaces the shown tooltip in place; a click outside
    any tag hides it.
    """

    def __init__(self,
                 cache: DefinitionCache,
                 viewport: Viewport,
                 size: Tuple[int, int] = (320, 120),
                 offset: int = 10,
                 margin: int = 10):
        """
        Args:
            cache: Session cache holding simple-English definitions
            viewport: Visible area
            size: Tooltip (width, height)
            offset: Distance from the pointer
            margin: Gap kept from the viewport edge when repositioning
        """
        self.cache = cache
        self.viewport = viewport
        self.size = size
        self.offset = offset
        self.margin = margin
        self.state: Optional[TooltipState] = None

    @property
    def is_visible(self) -> bool:
        return self.state is not None

    def activate(self, span: AnnotatedSpan, x: int, y: int) -> Optional[TooltipState]:
        """
        Show the tooltip for a tagged term at a pointer position

        Simple terms show only when the cache holds a definition; otherwise
        the current state is left unchanged.
        """
        if span.kind is SpanKind.SCIENTIFIC:
            definition = span.definition or ""
            label = span.source
        else:
            definition = self.cache.definition_for(span.term)
            if not definition:
                logger.debug(f"No cached definition for '{span.term}', tooltip unchanged")
                return self.state
            label = SIMPLE_SOURCE_LABEL

        width, height = self.size
        left, top = compute_position(
            x, y, width, height, self.viewport, offset=self.offset, margin=self.margin
        )
        self.state = TooltipState(span.term, definition, label, left, top)
        return self.state

    def dismiss(self):
        self.state = None

    def handle_click(self, span: Optional[AnnotatedSpan], x: int, y: int) -> Optional[TooltipState]:
        """Route a click: on a tag activates it, anywhere else dismisses"""
        if span is None:
            self.dismiss()
            return None
        return self.activate(span, x, y)

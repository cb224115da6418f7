"""Decide whether a page element is something a user could interact with.

Heuristic: false positives and negatives are acceptable. Layout checks are
skipped when the document backend has no layout (saved HTML).
"""
from __future__ import annotations

from autoapply.dom.base import Document, Element
from autoapply.errors import DocumentError
from autoapply.log import get_logger

log = get_logger(__name__)

# Elements this far outside the viewport can still be scrolled to.
ABOVE_VIEWPORT_TOLERANCE = 1.0
BELOW_VIEWPORT_TOLERANCE = 2.0


def _hidden_by_style(element: Element) -> bool:
    if element.computed_style("display") == "none":
        return True
    if element.computed_style("visibility") == "hidden":
        return True
    opacity = element.computed_style("opacity").strip()
    try:
        return opacity != "" and float(opacity) == 0
    except ValueError:
        return False


def _occluded(document: Document, element: Element, x: float, y: float) -> bool:
    top = document.element_from_point(x, y)
    if top is None:
        return False
    return not element.contains(top) and not top.contains(element)


def is_element_visible(document: Document, element: Element | None) -> bool:
    if element is None:
        return False
    try:
        if not element.is_connected():
            return False
        if _hidden_by_style(element):
            return False

        box = element.bounding_box()
        if box is None:
            return True
        if box.width == 0 or box.height == 0:
            return False

        view_height = document.viewport_height
        if box.bottom < -view_height * ABOVE_VIEWPORT_TOLERANCE:
            return False
        if box.top > view_height * BELOW_VIEWPORT_TOLERANCE:
            return False

        x, y = box.center
        return not _occluded(document, element, x, y)
    except DocumentError as exc:
        log.debug("Visibility check failed for %r: %s", element, exc)
        return False

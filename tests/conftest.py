"""Shared fixtures: a manual clock, saved-HTML documents and sessions."""
from __future__ import annotations

import pytest

from autoapply.dom.base import Box
from autoapply.dom.static import StaticDocument, StaticElement
from autoapply.session import Session


class ManualClock:
    """Millisecond clock that only moves when a test advances it."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


class LayoutElement(StaticElement):
    """Static element whose box comes from a ``data-box="x,y,w,h"`` attribute."""

    def bounding_box(self) -> Box | None:
        raw = self.get_attribute("data-box")
        if raw is None:
            return None
        x, y, w, h = (float(part) for part in raw.split(","))
        return Box(x, y, w, h)


class LayoutDocument(StaticDocument):
    """Saved HTML with hand-written geometry, for the layout checks.

    ``element_from_point`` returns the element with the highest ``data-z``
    whose box contains the point; later elements win ties.
    """

    def _wrap(self, tag) -> LayoutElement:
        return LayoutElement(self, tag)

    def element_from_point(self, x: float, y: float):
        best, best_z = None, None
        for element in self.query_selector_all("[data-box]"):
            box = element.bounding_box()
            if not (box.x <= x <= box.x + box.width and box.y <= y <= box.y + box.height):
                continue
            z = int(element.get_attribute("data-z") or 0)
            if best_z is None or z >= best_z:
                best, best_z = element, z
        return best


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def make_document():
    def factory(html: str, url: str = "https://example.com/apply") -> StaticDocument:
        return StaticDocument(html, url=url)

    return factory


@pytest.fixture
def make_layout_document():
    def factory(html: str, url: str = "https://example.com/apply", viewport_height: float = 800) -> LayoutDocument:
        return LayoutDocument(html, url=url, viewport_height=viewport_height)

    return factory


@pytest.fixture
def make_session(clock):
    def factory(document: StaticDocument) -> Session:
        return Session(document, clock)

    return factory

"""BeautifulSoup-backed document for saved HTML snapshots.

There is no layout engine: computed style comes from inline ``style``
attributes, the ``hidden`` attribute and hidden inputs, bounding boxes are
unknown and ``element_from_point`` finds nothing. Listeners run synchronously
when an event is dispatched, and every dispatched event is recorded in
``StaticDocument.events`` in order.
"""
from __future__ import annotations

import itertools
from typing import Iterator

from bs4 import BeautifulSoup, Tag

from autoapply.dom.base import Box, Document, Element, Listener, SelectOption

_tokens = itertools.count(1)


def parse_style(style: str | None) -> dict[str, str]:
    declarations: dict[str, str] = {}
    for chunk in (style or "").split(";"):
        prop, sep, value = chunk.partition(":")
        if sep and prop.strip():
            declarations[prop.strip().lower()] = value.strip()
    return declarations


def format_style(declarations: dict[str, str]) -> str:
    return "; ".join(f"{prop}: {value}" for prop, value in declarations.items())


class StaticElement(Element):
    def __init__(self, document: "StaticDocument", tag: Tag) -> None:
        self._doc = document
        self._tag = tag

    def __repr__(self) -> str:
        return f"<StaticElement {self.describe()}>"

    @property
    def tag(self) -> str:
        return (self._tag.name or "").lower()

    def get_attribute(self, name: str) -> str | None:
        value = self._tag.attrs.get(name)
        if value is None:
            return None
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    def set_attribute(self, name: str, value: str) -> None:
        self._tag[name] = value

    def remove_attribute(self, name: str) -> None:
        if name in self._tag.attrs:
            del self._tag[name]

    @property
    def value(self) -> str:
        if self.tag == "textarea":
            return self._tag.get_text()
        if self.tag == "select":
            options = self.options()
            index = self.selected_index
            return options[index].value if 0 <= index < len(options) else ""
        return self.get_attribute("value") or ""

    @value.setter
    def value(self, value: str) -> None:
        if self.tag == "textarea":
            self._tag.string = value
        elif self.tag == "select":
            for option in self.options():
                if option.value == value:
                    self.selected_index = option.index
                    return
        else:
            self._tag["value"] = value

    def text(self) -> str:
        return self._tag.get_text(" ", strip=True)

    def set_text(self, value: str) -> None:
        self._tag.string = value

    def computed_style(self, prop: str) -> str:
        prop = prop.lower()
        chain = [self._tag, *self._tag.parents]
        if prop == "display":
            for tag in chain:
                if not isinstance(tag, Tag) or tag.name == "[document]":
                    continue
                if tag.has_attr("hidden") or parse_style(tag.get("style")).get("display") == "none":
                    return "none"
                if tag.name == "input" and str(tag.get("type", "")).lower() == "hidden":
                    return "none"
            return parse_style(self._tag.get("style")).get("display", "block")
        if prop == "visibility":
            for tag in chain:
                if isinstance(tag, Tag):
                    value = parse_style(tag.get("style")).get("visibility")
                    if value:
                        return value
            return "visible"
        if prop == "opacity":
            for tag in chain:
                if isinstance(tag, Tag) and _is_zero(parse_style(tag.get("style")).get("opacity")):
                    return "0"
            return parse_style(self._tag.get("style")).get("opacity", "1")
        return parse_style(self._tag.get("style")).get(prop, "")

    def get_style(self, prop: str) -> str:
        return parse_style(self._tag.get("style")).get(prop.lower(), "")

    def set_style(self, prop: str, value: str) -> None:
        declarations = parse_style(self._tag.get("style"))
        if value:
            declarations[prop.lower()] = value
        else:
            declarations.pop(prop.lower(), None)
        if declarations:
            self._tag["style"] = format_style(declarations)
        elif self._tag.has_attr("style"):
            del self._tag["style"]

    def bounding_box(self) -> Box | None:
        return None

    def _option_tags(self) -> list[Tag]:
        if self.tag != "select":
            return []
        return self._tag.find_all("option")

    def options(self) -> list[SelectOption]:
        return [
            SelectOption(
                index=i,
                value=str(tag.get("value")) if tag.has_attr("value") else tag.get_text(strip=True),
                text=tag.get_text(" ", strip=True),
            )
            for i, tag in enumerate(self._option_tags())
        ]

    @property
    def selected_index(self) -> int:
        tags = self._option_tags()
        for i, tag in enumerate(tags):
            if tag.has_attr("selected"):
                return i
        return 0 if tags else -1

    @selected_index.setter
    def selected_index(self, index: int) -> None:
        for i, tag in enumerate(self._option_tags()):
            if i == index:
                tag["selected"] = "selected"
            elif tag.has_attr("selected"):
                del tag["selected"]

    def focus(self) -> None:
        self._doc.active_element = self
        self._doc.events.append((self, "focus"))

    def dispatch_event(self, event_type: str) -> None:
        self._doc.events.append((self, event_type))
        for tag in [self._tag, *self._tag.parents]:
            for listener in self._doc._listeners_for(tag, event_type):
                listener()

    def contains(self, other: Element) -> bool:
        if not isinstance(other, StaticElement):
            return False
        return other._tag is self._tag or any(p is self._tag for p in other._tag.parents)

    def is_same(self, other: Element) -> bool:
        return isinstance(other, StaticElement) and other._tag is self._tag

    def is_connected(self) -> bool:
        root = self._tag
        while root.parent is not None:
            root = root.parent
        return root is self._doc.soup

    def append_child(self, child: Element) -> None:
        assert isinstance(child, StaticElement)
        self._tag.append(child._tag)

    def remove(self) -> None:
        self._tag.extract()

    def child_count(self) -> int:
        return len(self._tag.find_all(recursive=False))

    def add_event_listener(self, event_type: str, listener: Listener) -> str:
        token = f"static-{next(_tokens)}"
        self._doc._listeners[token] = (self._tag, event_type, listener)
        return token

    def remove_event_listener(self, event_type: str, token: str) -> None:
        self._doc._listeners.pop(token, None)

    def closest(self, selector: str) -> Element | None:
        for tag in [self._tag, *self._tag.parents]:
            if isinstance(tag, Tag) and tag.name != "[document]" and tag.css.match(selector):
                return StaticElement(self._doc, tag)
        return None


def _is_zero(value: str | None) -> bool:
    if value is None:
        return False
    try:
        return float(value) == 0
    except ValueError:
        return False


class StaticDocument(Document):
    def __init__(self, html: str, url: str = "", *, viewport_height: float = 900) -> None:
        soup = BeautifulSoup(html, "html.parser")
        if soup.body is None:
            soup = BeautifulSoup(f"<html><body>{html}</body></html>", "html.parser")
        self.soup = soup
        self._url = url
        self._viewport_height = viewport_height
        self._listeners: dict[str, tuple[Tag, str, Listener]] = {}
        self.events: list[tuple[StaticElement, str]] = []
        self.active_element: StaticElement | None = None

    @classmethod
    def from_file(cls, path, url: str = "", **kwargs) -> "StaticDocument":
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            return cls(f.read(), url=url, **kwargs)

    def _wrap(self, tag: Tag) -> StaticElement:
        return StaticElement(self, tag)

    def _listeners_for(self, tag: Tag, event_type: str) -> Iterator[Listener]:
        for owner, kind, listener in list(self._listeners.values()):
            if owner is tag and kind == event_type:
                yield listener

    @property
    def url(self) -> str:
        return self._url

    @property
    def title(self) -> str:
        if self.soup.title and self.soup.title.string:
            return self.soup.title.string.strip()
        return ""

    @property
    def body(self) -> Element:
        return self._wrap(self.soup.body)

    @property
    def viewport_height(self) -> float:
        return self._viewport_height

    def query_selector(self, selector: str) -> Element | None:
        tag = self.soup.select_one(selector)
        return self._wrap(tag) if tag is not None else None

    def query_selector_all(self, selector: str) -> list[Element]:
        return [self._wrap(tag) for tag in self.soup.select(selector)]

    def create_element(self, tag: str) -> Element:
        return self._wrap(self.soup.new_tag(tag))

    def element_from_point(self, x: float, y: float) -> Element | None:
        return None

    def texts(self, selector: str) -> list[str]:
        return [tag.get_text(" ", strip=True) for tag in self.soup.select(selector)]

    def events_of(self, element: Element) -> list[str]:
        return [kind for owner, kind in self.events if owner.is_same(element)]

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def html(self) -> str:
        return str(self.soup)

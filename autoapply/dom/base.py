"""Document/Element interface the engine reads and mutates pages through."""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable

Listener = Callable[[], Any]

# Elements a fill pass may write into, in document order.
FORM_FIELD_SELECTOR = (
    'input:not([type="hidden"]):not([type="submit"]):not([type="button"])'
    ':not([type="checkbox"]):not([type="radio"]):not([type="file"])'
    ':not([type="image"]):not([type="reset"]), textarea, select'
)


@dataclass(frozen=True)
class Box:
    """Bounding client rect in viewport coordinates."""

    x: float
    y: float
    width: float
    height: float

    @property
    def top(self) -> float:
        return self.y

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2


@dataclass(frozen=True)
class SelectOption:
    index: int
    value: str
    text: str


class Element(ABC):
    @property
    @abstractmethod
    def tag(self) -> str:
        """Lowercase tag name."""

    @abstractmethod
    def get_attribute(self, name: str) -> str | None: ...

    @abstractmethod
    def set_attribute(self, name: str, value: str) -> None: ...

    @abstractmethod
    def remove_attribute(self, name: str) -> None: ...

    @property
    @abstractmethod
    def value(self) -> str: ...

    @value.setter
    @abstractmethod
    def value(self, value: str) -> None: ...

    @abstractmethod
    def text(self) -> str:
        """textContent, stripped."""

    @abstractmethod
    def set_text(self, value: str) -> None:
        """Replace the element's content with a text node."""

    @abstractmethod
    def computed_style(self, prop: str) -> str: ...

    @abstractmethod
    def get_style(self, prop: str) -> str:
        """Inline style value for a CSS property (kebab-case), '' if unset."""

    @abstractmethod
    def set_style(self, prop: str, value: str) -> None:
        """Set an inline style property; an empty value removes it."""

    @abstractmethod
    def bounding_box(self) -> Box | None:
        """Client rect, or None when the backend has no layout."""

    @abstractmethod
    def options(self) -> list[SelectOption]: ...

    @property
    @abstractmethod
    def selected_index(self) -> int: ...

    @selected_index.setter
    @abstractmethod
    def selected_index(self, index: int) -> None: ...

    @abstractmethod
    def focus(self) -> None: ...

    @abstractmethod
    def dispatch_event(self, event_type: str) -> None:
        """Dispatch a bubbling event of the given type."""

    @abstractmethod
    def contains(self, other: "Element") -> bool:
        """True when ``other`` is this element or one of its descendants."""

    @abstractmethod
    def is_same(self, other: "Element") -> bool: ...

    @abstractmethod
    def is_connected(self) -> bool: ...

    @abstractmethod
    def append_child(self, child: "Element") -> None: ...

    @abstractmethod
    def remove(self) -> None: ...

    @abstractmethod
    def child_count(self) -> int: ...

    @abstractmethod
    def add_event_listener(self, event_type: str, listener: Listener) -> str:
        """Attach a listener; returns a token for removal."""

    @abstractmethod
    def remove_event_listener(self, event_type: str, token: str) -> None: ...

    @abstractmethod
    def closest(self, selector: str) -> "Element | None": ...

    def has_attribute(self, name: str) -> bool:
        return self.get_attribute(name) is not None

    @property
    def disabled(self) -> bool:
        return self.has_attribute("disabled")

    @property
    def readonly(self) -> bool:
        return self.has_attribute("readonly")

    @property
    def element_id(self) -> str:
        return self.get_attribute("id") or ""

    def describe(self) -> str:
        """Short selector-ish label for log lines."""
        ident = self.element_id
        if ident:
            return f"{self.tag}#{ident}"
        name = self.get_attribute("name")
        if name:
            return f'{self.tag}[name="{name}"]'
        return self.tag


class Document(ABC):
    @property
    @abstractmethod
    def url(self) -> str: ...

    @property
    @abstractmethod
    def title(self) -> str: ...

    @property
    @abstractmethod
    def body(self) -> Element: ...

    @property
    @abstractmethod
    def viewport_height(self) -> float: ...

    @abstractmethod
    def query_selector(self, selector: str) -> Element | None: ...

    @abstractmethod
    def query_selector_all(self, selector: str) -> list[Element]: ...

    @abstractmethod
    def create_element(self, tag: str) -> Element: ...

    @abstractmethod
    def element_from_point(self, x: float, y: float) -> Element | None:
        """Topmost element at a viewport point, or None without layout."""

    @abstractmethod
    def texts(self, selector: str) -> list[str]:
        """Stripped textContent of every match, in document order."""

    def get_element_by_id(self, element_id: str) -> Element | None:
        if not element_id:
            return None
        for element in self.query_selector_all(f'[id="{_css_escape(element_id)}"]'):
            return element
        return None

    def first_text(self, selector: str) -> str:
        """Text of the first match with non-empty text, '' if none."""
        for text in self.texts(selector):
            if text:
                return text
        return ""

    def body_text(self) -> str:
        return self.body.text()


def _css_escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')

"""Playwright-backed document for a live browser page (sync API).

Each element operation is one ``evaluate`` on an ``ElementHandle``. Event
listeners are bridged back into Python through a single exposed binding, so
callbacks run on the driving thread whenever Playwright processes page events.
"""
from __future__ import annotations

import itertools
from typing import Any

from autoapply.dom.base import Box, Document, Element, Listener, SelectOption
from autoapply.errors import DocumentError
from autoapply.log import get_logger

log = get_logger(__name__)

_BINDING = "__autoapplyDispatch"
_REGISTRY = "__autoapplyListeners"
_tokens = itertools.count(1)

_SET_VALUE_JS = """(el, value) => {
  const proto = el.tagName === 'TEXTAREA' ? HTMLTextAreaElement.prototype
              : el.tagName === 'SELECT' ? HTMLSelectElement.prototype
              : HTMLInputElement.prototype;
  const setter = Object.getOwnPropertyDescriptor(proto, 'value').set;
  setter.call(el, value);
}"""

_BOX_JS = """el => {
  const r = el.getBoundingClientRect();
  return {x: r.left, y: r.top, width: r.width, height: r.height};
}"""

_ADD_LISTENER_JS = """(el, [type, token, binding, registry]) => {
  window[registry] = window[registry] || {};
  const fn = () => window[binding](token);
  window[registry][token] = fn;
  el.addEventListener(type, fn);
}"""

_REMOVE_LISTENER_JS = """(el, [type, token, registry]) => {
  const fn = (window[registry] || {})[token];
  if (fn) {
    el.removeEventListener(type, fn);
    delete window[registry][token];
  }
}"""


class LiveElement(Element):
    def __init__(self, document: "LiveDocument", handle: Any) -> None:
        self._doc = document
        self._handle = handle

    def __repr__(self) -> str:
        return f"<LiveElement {self._handle}>"

    @property
    def handle(self) -> Any:
        return self._handle

    def _eval(self, script: str, arg: Any = None) -> Any:
        from playwright.sync_api import Error as PlaywrightError

        try:
            if arg is None:
                return self._handle.evaluate(script)
            return self._handle.evaluate(script, arg)
        except PlaywrightError as exc:
            raise DocumentError(str(exc).split("\n")[0]) from exc

    @property
    def tag(self) -> str:
        return self._eval("el => el.tagName.toLowerCase()")

    def get_attribute(self, name: str) -> str | None:
        return self._eval("(el, name) => el.getAttribute(name)", name)

    def set_attribute(self, name: str, value: str) -> None:
        self._eval("(el, [n, v]) => el.setAttribute(n, v)", [name, value])

    def remove_attribute(self, name: str) -> None:
        self._eval("(el, name) => el.removeAttribute(name)", name)

    @property
    def value(self) -> str:
        return self._eval("el => el.value == null ? '' : String(el.value)")

    @value.setter
    def value(self, value: str) -> None:
        self._eval(_SET_VALUE_JS, value)

    @property
    def disabled(self) -> bool:
        return bool(self._eval("el => !!el.disabled"))

    @property
    def readonly(self) -> bool:
        return bool(self._eval("el => !!el.readOnly"))

    def text(self) -> str:
        return self._eval("el => (el.innerText || el.textContent || '').trim()")

    def set_text(self, value: str) -> None:
        self._eval("(el, v) => { el.textContent = v; }", value)

    def computed_style(self, prop: str) -> str:
        return self._eval("(el, p) => window.getComputedStyle(el).getPropertyValue(p)", prop)

    def get_style(self, prop: str) -> str:
        return self._eval("(el, p) => el.style.getPropertyValue(p)", prop)

    def set_style(self, prop: str, value: str) -> None:
        self._eval(
            "(el, [p, v]) => v ? el.style.setProperty(p, v) : el.style.removeProperty(p)",
            [prop, value],
        )

    def bounding_box(self) -> Box | None:
        rect = self._eval(_BOX_JS)
        return Box(rect["x"], rect["y"], rect["width"], rect["height"])

    def options(self) -> list[SelectOption]:
        rows = self._eval(
            "el => el.options ? Array.from(el.options).map(o => [o.value, o.text]) : []"
        )
        return [SelectOption(i, value, (text or "").strip()) for i, (value, text) in enumerate(rows)]

    @property
    def selected_index(self) -> int:
        return int(self._eval("el => el.selectedIndex === undefined ? -1 : el.selectedIndex"))

    @selected_index.setter
    def selected_index(self, index: int) -> None:
        self._eval("(el, i) => { el.selectedIndex = i; }", index)

    def focus(self) -> None:
        self._eval("el => el.focus()")

    def dispatch_event(self, event_type: str) -> None:
        self._eval("(el, t) => el.dispatchEvent(new Event(t, {bubbles: true}))", event_type)

    def contains(self, other: Element) -> bool:
        if not isinstance(other, LiveElement):
            return False
        return bool(self._eval("(el, other) => el.contains(other)", other._handle))

    def is_same(self, other: Element) -> bool:
        if not isinstance(other, LiveElement):
            return False
        if other._handle is self._handle:
            return True
        return bool(self._eval("(el, other) => el === other", other._handle))

    def is_connected(self) -> bool:
        try:
            return bool(self._eval("el => el.isConnected"))
        except DocumentError:
            return False

    def append_child(self, child: Element) -> None:
        assert isinstance(child, LiveElement)
        self._eval("(el, child) => el.appendChild(child)", child._handle)

    def remove(self) -> None:
        self._eval("el => el.remove()")

    def child_count(self) -> int:
        return int(self._eval("el => el.children.length"))

    def add_event_listener(self, event_type: str, listener: Listener) -> str:
        self._doc._ensure_binding()
        token = f"live-{next(_tokens)}"
        self._doc._callbacks[token] = listener
        self._eval(_ADD_LISTENER_JS, [event_type, token, _BINDING, _REGISTRY])
        return token

    def remove_event_listener(self, event_type: str, token: str) -> None:
        self._doc._callbacks.pop(token, None)
        self._eval(_REMOVE_LISTENER_JS, [event_type, token, _REGISTRY])

    def closest(self, selector: str) -> Element | None:
        handle = self._handle.evaluate_handle("(el, s) => el.closest(s)", selector)
        element = handle.as_element()
        return LiveElement(self._doc, element) if element is not None else None


class LiveDocument(Document):
    def __init__(self, page: Any) -> None:
        self.page = page
        self._callbacks: dict[str, Listener] = {}
        self._binding_ready = False

    def _ensure_binding(self) -> None:
        if self._binding_ready:
            return
        self.page.expose_binding(_BINDING, lambda source, token: self._fire(token))
        self._binding_ready = True

    def _fire(self, token: str) -> None:
        listener = self._callbacks.get(token)
        if listener is None:
            log.debug("Listener %s fired after removal", token)
            return
        listener()

    def _wrap(self, handle: Any) -> LiveElement:
        return LiveElement(self, handle)

    @property
    def url(self) -> str:
        return self.page.url

    @property
    def title(self) -> str:
        return self.page.title()

    @property
    def body(self) -> Element:
        return self._wrap(self.page.query_selector("body"))

    @property
    def viewport_height(self) -> float:
        return float(
            self.page.evaluate(
                "() => Math.max(document.documentElement.clientHeight, window.innerHeight || 0)"
            )
        )

    def query_selector(self, selector: str) -> Element | None:
        handle = self.page.query_selector(selector)
        return self._wrap(handle) if handle is not None else None

    def query_selector_all(self, selector: str) -> list[Element]:
        return [self._wrap(handle) for handle in self.page.query_selector_all(selector)]

    def create_element(self, tag: str) -> Element:
        handle = self.page.evaluate_handle("t => document.createElement(t)", tag)
        return self._wrap(handle.as_element())

    def element_from_point(self, x: float, y: float) -> Element | None:
        handle = self.page.evaluate_handle(
            "([x, y]) => document.elementFromPoint(x, y)", [x, y]
        )
        element = handle.as_element()
        return self._wrap(element) if element is not None else None

    def texts(self, selector: str) -> list[str]:
        return self.page.eval_on_selector_all(
            selector, "els => els.map(el => (el.textContent || '').replace(/\\s+/g, ' ').trim())"
        )

    def body_text(self) -> str:
        return self.page.evaluate("() => document.body ? document.body.innerText : ''")

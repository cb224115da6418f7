"""Ephemeral toast notifications rendered into the page.

Toasts stack in one lazily created container, fixed bottom-right. Each one
auto-dismisses after three seconds; dismissal fades it out before removal,
and removing the last toast removes the container.
"""
from __future__ import annotations

import itertools
import time

from autoapply.dom.base import Document, Element
from autoapply.errors import DocumentError
from autoapply.log import get_logger
from autoapply.models import Severity, ToastEntry
from autoapply.timers import TimerSet

log = get_logger(__name__)

TOAST_CONTAINER_ID = "autoapply-toast-container"
TOAST_DURATION_MS = 3000
ENTER_DELAY_MS = 10
EXIT_ANIMATION_MS = 300

SEVERITY_COLORS: dict[Severity, str] = {
    Severity.SUCCESS: "#4CAF50",
    Severity.WARNING: "#FF9800",
    Severity.ERROR: "#F44336",
    Severity.INFO: "#2196F3",
}

SEVERITY_ICONS: dict[Severity, str] = {
    Severity.SUCCESS: "✓",
    Severity.WARNING: "⚠",
    Severity.ERROR: "✕",
    Severity.INFO: "ℹ",
}

_CONTAINER_STYLE = (
    "position: fixed; bottom: 20px; right: 20px; z-index: 9999; "
    "display: flex; flex-direction: column; align-items: flex-end"
)

_TOAST_STYLE = (
    "background-color: {color}; color: white; padding: 12px 16px; border-radius: 4px; "
    "margin-top: 10px; box-shadow: 0 2px 5px rgba(0, 0, 0, 0.2); "
    "font-family: Arial, sans-serif; font-size: 14px; max-width: 300px; "
    "display: flex; align-items: center; opacity: 0; transform: translateY(20px); "
    "transition: opacity 0.3s, transform 0.3s"
)

_seq = itertools.count(1)


class ToastManager:
    def __init__(self, document: Document, timers: TimerSet, listeners) -> None:
        self._document = document
        self._timers = timers
        self._listeners = listeners
        self._entries: list[ToastEntry] = []
        self._container: Element | None = None

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def container(self) -> Element | None:
        return self._container

    def messages(self) -> list[str]:
        return [entry.message for entry in self._entries]

    def find(self, toast_id: str) -> ToastEntry | None:
        for entry in self._entries:
            if entry.id == toast_id:
                return entry
        return None

    def _ensure_container(self) -> Element:
        if self._container is not None and self._container.is_connected():
            return self._container
        container = self._document.get_element_by_id(TOAST_CONTAINER_ID)
        if container is None:
            container = self._document.create_element("div")
            container.set_attribute("id", TOAST_CONTAINER_ID)
            container.set_attribute("style", _CONTAINER_STYLE)
            self._document.body.append_child(container)
        self._container = container
        return container

    def show(self, message: str, severity: Severity | str = Severity.SUCCESS) -> str:
        severity = Severity(severity)
        toast_id = f"autoapply-toast-{int(time.time() * 1000)}-{next(_seq)}"
        container = self._ensure_container()

        toast = self._document.create_element("div")
        toast.set_attribute("id", toast_id)
        toast.set_attribute("class", f"autoapply-toast autoapply-toast-{severity.value}")
        toast.set_attribute("style", _TOAST_STYLE.format(color=SEVERITY_COLORS[severity]))

        icon = self._document.create_element("span")
        icon.set_attribute("style", "margin-right: 8px; font-weight: bold")
        icon.set_text(SEVERITY_ICONS[severity])
        toast.append_child(icon)

        text = self._document.create_element("span")
        text.set_attribute("class", "autoapply-toast-message")
        text.set_text(message)
        toast.append_child(text)

        close = self._document.create_element("span")
        close.set_attribute("id", f"{toast_id}-close")
        close.set_attribute("style", "margin-left: 8px; cursor: pointer; font-weight: bold; opacity: 0.7")
        close.set_text("×")
        toast.append_child(close)

        container.append_child(toast)

        entry = ToastEntry(id=toast_id, message=message, severity=severity, element=toast)
        entry.listener_key = self._listeners.add(close, "click", lambda: self.dismiss(toast_id))
        self._timers.call_later(ENTER_DELAY_MS, self._enter, toast_id)
        entry.dismiss_timer = self._timers.call_later(TOAST_DURATION_MS, self.dismiss, toast_id)
        self._entries.append(entry)

        log.debug("Toast %s [%s]: %s", toast_id, severity.value, message)
        return toast_id

    def _enter(self, toast_id: str) -> None:
        entry = self.find(toast_id)
        if entry is None or entry.dismissing:
            return
        entry.element.set_style("opacity", "1")
        entry.element.set_style("transform", "translateY(0)")

    def dismiss(self, toast_id: str) -> bool:
        entry = self.find(toast_id)
        if entry is None or entry.dismissing:
            return False
        entry.dismissing = True
        self._timers.cancel(entry.dismiss_timer)
        entry.dismiss_timer = None
        # queue removal first; styling can fail on a detached node
        self._timers.call_later(EXIT_ANIMATION_MS, self._remove, toast_id)
        entry.element.set_style("opacity", "0")
        entry.element.set_style("transform", "translateY(-20px)")
        return True

    def _remove(self, toast_id: str) -> None:
        entry = self.find(toast_id)
        if entry is None:
            return
        self._entries.remove(entry)
        self._listeners.remove(entry.listener_key)
        if entry.element.is_connected():
            entry.element.remove()
        container = self._container
        if container is not None and container.is_connected() and container.child_count() == 0:
            container.remove()
            self._container = None

    def teardown(self) -> int:
        """Drop every toast and the container. Timers are the caller's to cancel."""
        removed = len(self._entries)
        for entry in self._entries:
            self._listeners.remove(entry.listener_key)
        self._entries.clear()
        containers = [self._container] if self._container is not None else []
        stray = self._document.get_element_by_id(TOAST_CONTAINER_ID)
        if stray is not None and not any(stray.is_same(c) for c in containers):
            containers.append(stray)
        for container in containers:
            try:
                if container.is_connected():
                    container.remove()
            except DocumentError as exc:
                log.debug("Could not remove toast container: %s", exc)
        self._container = None
        return removed

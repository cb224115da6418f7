"""Per-page session state: timers, listeners, highlights and toasts.

One ``Session`` exists per page load. Everything the engine schedules or
attaches goes through it, so ``cleanup`` can release all of it at once.
"""
from __future__ import annotations

from typing import Callable

from autoapply.dom.base import Document, Element, Listener
from autoapply.errors import DocumentError
from autoapply.highlight import HighlightManager
from autoapply.log import get_logger
from autoapply.timers import TimerSet, monotonic_ms
from autoapply.toast import ToastManager

log = get_logger(__name__)


def _selector_of(element: Element) -> str:
    ident = element.element_id
    return f"#{ident}" if ident else element.describe()


class ListenerRegistry:
    """Listeners keyed by ``"<selector>|<event>"``; re-adding a key replaces it."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[Element, str, str]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def keys(self) -> list[str]:
        return list(self._entries)

    def add(self, element: Element, event_type: str, listener: Listener, selector: str | None = None) -> str:
        key = f"{selector or _selector_of(element)}|{event_type}"
        self.remove(key)
        token = element.add_event_listener(event_type, listener)
        self._entries[key] = (element, event_type, token)
        return key

    def remove(self, key: str | None) -> bool:
        if not key:
            return False
        entry = self._entries.pop(key, None)
        if entry is None:
            return False
        element, event_type, token = entry
        try:
            element.remove_event_listener(event_type, token)
        except DocumentError as exc:
            log.debug("Could not detach %s: %s", key, exc)
        return True

    def detach_all(self) -> int:
        count = 0
        for key in list(self._entries):
            if self.remove(key):
                count += 1
        return count


class Session:
    def __init__(self, document: Document, clock: Callable[[], float] = monotonic_ms) -> None:
        self.document = document
        self.timers = TimerSet(clock)
        self.listeners = ListenerRegistry()
        self.highlights = HighlightManager(self.timers)
        self.toasts = ToastManager(document, self.timers, self.listeners)

    def show_toast(self, message: str, severity="success") -> str:
        return self.toasts.show(message, severity)

    def highlight(self, element: Element) -> str:
        return self.highlights.highlight(element)

    def pump(self) -> int:
        """Run every timer that is due now."""
        return self.timers.run_due()

    def wait_idle(self, sleep=None, *, max_wait_ms: float = 30_000) -> int:
        return self.timers.run_until_idle(sleep, max_wait_ms=max_wait_ms)

    def cleanup(self) -> dict[str, int]:
        """Release everything the session holds. Safe to call more than once."""
        restored = self.highlights.restore_all()
        toasts = self.toasts.teardown()
        listeners = self.listeners.detach_all()
        timers = self.timers.cancel_all()
        released = {"timers": timers, "listeners": listeners, "highlights": restored, "toasts": toasts}
        if any(released.values()):
            log.info(
                "Session cleanup: %d timers, %d listeners, %d highlights, %d toasts",
                timers,
                listeners,
                restored,
                toasts,
            )
        return released

"""Transient yellow outline on filled fields, reverted by a session timer.

Snapshots live in a side table keyed by element, never on the element.
A revert only applies while the element's current session id is still the
one the timer was scheduled for. Highlighting an element again before its
revert snapshots the already-highlighted style, so the element can stay
outlined until cleanup; that race is kept as-is.
"""
from __future__ import annotations

import uuid

from autoapply.dom.base import Element
from autoapply.errors import DocumentError
from autoapply.log import get_logger
from autoapply.models import HighlightSession
from autoapply.timers import TimerSet

log = get_logger(__name__)

HIGHLIGHT_DURATION_MS = 1000
TRANSITION_RESET_MS = 300
HIGHLIGHT_COLOR = "#FFEB3B"

SNAPSHOT_PROPS = ("outline", "outline-offset", "box-shadow", "border", "transition")
_REVERT_PROPS = ("outline", "outline-offset", "box-shadow", "border")


def _new_session_id() -> str:
    return "autoapply-highlight-" + uuid.uuid4().hex[:9]


class HighlightManager:
    def __init__(self, timers: TimerSet) -> None:
        self._timers = timers
        self._sessions: list[HighlightSession] = []

    def __len__(self) -> int:
        return len(self._sessions)

    def find(self, element: Element) -> HighlightSession | None:
        for session in self._sessions:
            if session.element.is_same(element):
                return session
        return None

    def current_id(self, element: Element) -> str | None:
        session = self.find(element)
        return session.session_id if session else None

    def is_highlighted(self, element: Element) -> bool:
        return self.find(element) is not None

    def highlight(self, element: Element) -> str:
        session_id = _new_session_id()
        snapshot = {prop: element.get_style(prop) for prop in SNAPSHOT_PROPS}

        element.set_style("transition", "outline 0.3s, outline-offset 0.3s, border 0.3s, box-shadow 0.3s")
        element.set_style("outline", f"2px solid {HIGHLIGHT_COLOR}")
        element.set_style("outline-offset", "2px")
        element.set_style("box-shadow", "0 0 8px rgba(255, 235, 59, 0.5)")
        if snapshot["border"]:
            element.set_style("border", f"1px solid {HIGHLIGHT_COLOR}")

        session = self.find(element)
        if session is None:
            session = HighlightSession(element=element, session_id=session_id, snapshot=snapshot)
            self._sessions.append(session)
        else:
            session.session_id = session_id
            session.snapshot = snapshot
            self._timers.cancel(session.transition_timer)
            session.transition_timer = None

        session.revert_timer = self._timers.call_later(
            HIGHLIGHT_DURATION_MS, self._revert, element, session_id
        )
        log.debug("Highlighted %s (%s)", element.describe(), session_id)
        return session_id

    def _revert(self, element: Element, session_id: str) -> None:
        session = self.find(element)
        if session is None or session.session_id != session_id:
            log.debug("Skipping stale highlight revert %s", session_id)
            return
        session.revert_timer = None
        if not element.is_connected():
            self._sessions.remove(session)
            return
        for prop in _REVERT_PROPS:
            element.set_style(prop, session.snapshot[prop])
        session.transition_timer = self._timers.call_later(
            TRANSITION_RESET_MS, self._finish, element, session_id
        )

    def _finish(self, element: Element, session_id: str) -> None:
        session = self.find(element)
        if session is None or session.session_id != session_id:
            return
        element.set_style("transition", session.snapshot["transition"])
        self._sessions.remove(session)

    def restore_all(self) -> int:
        """Cancel every highlight timer and put every element back to its snapshot."""
        restored = 0
        for session in self._sessions:
            self._timers.cancel(session.revert_timer)
            self._timers.cancel(session.transition_timer)
            try:
                if session.element.is_connected():
                    for prop in SNAPSHOT_PROPS:
                        session.element.set_style(prop, session.snapshot[prop])
                    restored += 1
            except DocumentError as exc:
                log.debug("Could not restore %r: %s", session.element, exc)
        self._sessions.clear()
        return restored

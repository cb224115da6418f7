"""Write a value into one form field the way a user edit would look."""
from __future__ import annotations

from autoapply.dom.base import Element, SelectOption
from autoapply.log import get_logger
from autoapply.models import FieldDescriptor, FieldKind

log = get_logger(__name__)

INPUT_EVENTS = ("input", "change", "blur")


def is_fillable(descriptor: FieldDescriptor) -> bool:
    """Gate every injection: writable, empty and visible."""
    element = descriptor.element
    if element.disabled or element.readonly:
        return False
    # A choice is empty while its selected option carries no value.
    if not descriptor.is_empty:
        return False
    return descriptor.visible


def choose_option(options: list[SelectOption], target: str) -> SelectOption | None:
    """Exact value/text match first, then the first substring match either way."""
    wanted = target.strip().lower()
    if not wanted:
        return None
    for option in options:
        if option.value.lower() == wanted or option.text.lower() == wanted:
            return option
    for option in options:
        text = option.text.lower()
        if not text:
            continue
        if wanted in text or text in wanted:
            return option
    return None


def _set_choice(element: Element, value: str) -> bool:
    option = choose_option(element.options(), value)
    if option is None:
        log.debug("No option of %s matches %r", element.describe(), value)
        return False
    element.selected_index = option.index
    return True


def inject_value(session, descriptor: FieldDescriptor, value: str) -> bool:
    """Fill ``descriptor`` with ``value``; False when skipped or on any error.

    On success the element gets focus, the value, an ``input``, ``change``
    and ``blur`` event in that order, and a transient highlight.
    """
    if value is None or not str(value).strip():
        return False
    if not is_fillable(descriptor):
        return False

    element = descriptor.element
    value = str(value)
    try:
        element.focus()
        if descriptor.kind is FieldKind.CHOICE:
            if not _set_choice(element, value):
                return False
        else:
            element.value = value
        for event_type in INPUT_EVENTS:
            element.dispatch_event(event_type)
        session.highlight(element)
    except Exception as exc:
        log.debug("Injection into %r failed: %s", element, exc)
        return False
    return True

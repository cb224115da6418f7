"""Fill passes: walk the page's form fields and inject matching profile values.

A pass is element-centric. Every candidate field is described once, gated,
matched to a canonical key through a keyword table, resolved against the
profile and injected. Exactly one summary toast is shown per pass.
"""
from __future__ import annotations

from typing import Any

from autoapply.dom.base import FORM_FIELD_SELECTOR, Document, Element
from autoapply.field_map import GENERAL_FIELD_MAP, FieldMap, match_field
from autoapply.injector import inject_value, is_fillable
from autoapply.log import get_logger
from autoapply.models import FieldDescriptor, FieldKind, FillResult, MatchResult, Severity
from autoapply.visibility import is_element_visible

log = get_logger(__name__)

# Label keywords the select fallback uses to guess a choice field's key.
SELECT_FALLBACK_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("country", ("country",)),
    ("state", ("state", "province")),
    ("city", ("city",)),
    ("degree", ("education", "degree")),
    ("yearsOfExperience", ("experience", "years")),
)

_EDUCATION_KEYS = {"degree": "degree", "institution": "institution", "graduationYear": "year"}
_EXPERIENCE_KEYS = {"currentCompany": "company", "duration": "duration"}


# ---------------------------------------------------------------------------
# Field descriptors
# ---------------------------------------------------------------------------

def label_for(document: Document, element_id: str) -> Element | None:
    if not element_id:
        return None
    escaped = element_id.replace("\\", "\\\\").replace('"', '\\"')
    return document.query_selector(f'label[for="{escaped}"]')


def label_text(document: Document, element: Element) -> str:
    """``label[for=id]`` text, else the enclosing label, else ``aria-label``."""
    label = label_for(document, element.element_id)
    if label is not None:
        text = label.text()
        if text:
            return text
    enclosing = element.closest("label")
    if enclosing is not None:
        text = enclosing.text()
        if text:
            return text
    return element.get_attribute("aria-label") or ""


def describe_field(document: Document, element: Element) -> FieldDescriptor:
    return FieldDescriptor(
        element=element,
        kind=FieldKind.of(element),
        label=label_text(document, element),
        placeholder=element.get_attribute("placeholder") or "",
        name=element.get_attribute("name") or "",
        id=element.element_id,
        current_value=element.value or "",
        visible=is_element_visible(document, element),
    )


# ---------------------------------------------------------------------------
# Profile values
# ---------------------------------------------------------------------------

def _as_text(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (list, tuple)):
        parts = [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]
        return ", ".join(parts) or None
    return None


def _year(entry: dict[str, Any]) -> int:
    try:
        return int(str(entry.get("year", "")).strip()[:4])
    except ValueError:
        return 0


def most_recent_education(profile: dict[str, Any]) -> dict[str, Any] | None:
    entries = [e for e in profile.get("education") or [] if isinstance(e, dict)]
    if not entries:
        return None
    return sorted(entries, key=_year, reverse=True)[0]


def most_recent_experience(profile: dict[str, Any]) -> dict[str, Any] | None:
    entries = [e for e in profile.get("experience") or [] if isinstance(e, dict)]
    return entries[0] if entries else None


def resolve_profile_value(profile: dict[str, Any], key: str) -> str | None:
    """Text to write for a canonical key, or None when the profile has none.

    Direct values win. Otherwise names are derived from each other, education
    keys come from the most recent education entry (by year) and experience
    keys from the first experience entry.
    """
    if not key or key.startswith("_"):
        return None
    direct = _as_text(profile.get(key))
    if direct:
        return direct

    if key in ("name", "fullName"):
        name = _as_text(profile.get("name")) or _as_text(profile.get("fullName"))
        if name:
            return name
        parts = [_as_text(profile.get("firstName")), _as_text(profile.get("lastName"))]
        return " ".join(p for p in parts if p) or None

    if key in ("firstName", "lastName"):
        full = _as_text(profile.get("name")) or _as_text(profile.get("fullName"))
        if not full or " " not in full:
            return full if key == "firstName" else None
        first, _, last = full.partition(" ")
        return first if key == "firstName" else last.strip()

    if key in _EDUCATION_KEYS:
        entry = most_recent_education(profile)
        return _as_text(entry.get(_EDUCATION_KEYS[key])) if entry else None

    if key in _EXPERIENCE_KEYS:
        entry = most_recent_experience(profile)
        return _as_text(entry.get(_EXPERIENCE_KEYS[key])) if entry else None

    if key == "headline":
        entry = most_recent_experience(profile)
        return _as_text(entry.get("role")) if entry else None

    return None


# ---------------------------------------------------------------------------
# Passes
# ---------------------------------------------------------------------------

def _guess_select_key(label: str) -> str | None:
    text = label.lower()
    for key, words in SELECT_FALLBACK_RULES:
        if any(word in text for word in words):
            return key
    return None


def fill_selects_by_label(session, profile: dict[str, Any], result: FillResult) -> int:
    """Guess unfilled choice fields from their ``label[for]`` text."""
    document = session.document
    filled = 0
    for element in document.query_selector_all("select"):
        try:
            label = label_for(document, element.element_id)
            if label is None:
                continue
            key = _guess_select_key(label.text())
            value = resolve_profile_value(profile, key) if key else None
            if not value:
                continue
            descriptor = describe_field(document, element)
            if not is_fillable(descriptor):
                continue
            match = MatchResult(descriptor, key, value)
            if inject_value(session, descriptor, value):
                result.filled.append(match)
                filled += 1
                log.debug("Select fallback filled %s as %s", element.describe(), key)
            else:
                result.failed.append(match)
        except Exception as exc:
            result.errors += 1
            log.debug("Select fallback failed on %r: %s", element, exc)
    return filled


def run_fill_pass(
    session,
    profile: dict[str, Any],
    field_map: FieldMap = GENERAL_FIELD_MAP,
    mode: str = "general",
    *,
    select_fallback: bool = True,
) -> FillResult:
    """One fill pass over the session's document. Never overwrites a value."""
    session.cleanup()
    document = session.document
    result = FillResult(mode=mode)

    candidates = document.query_selector_all(FORM_FIELD_SELECTOR)
    log.info("%s fill: %d candidate fields on %s", mode.capitalize(), len(candidates), document.url or "page")

    for element in candidates:
        try:
            descriptor = describe_field(document, element)
            if not is_fillable(descriptor):
                continue
            key = match_field(field_map, *descriptor.signals)
            if key is None:
                continue
            value = resolve_profile_value(profile, key)
            if not value:
                continue
            match = MatchResult(descriptor, key, value)
            if inject_value(session, descriptor, value):
                result.filled.append(match)
                log.debug("Filled %s with %s", element.describe(), key)
            else:
                result.failed.append(match)
        except Exception as exc:
            result.errors += 1
            log.debug("Skipping %r: %s", element, exc)

    if not result.filled and select_fallback:
        fill_selects_by_label(session, profile, result)

    severity = Severity.SUCCESS if result.filled_count else Severity.WARNING
    session.show_toast(result.summary(), severity)
    log.info(
        "%s fill done: %d filled, %d failed, %d errors",
        mode.capitalize(),
        result.filled_count,
        len(result.failed),
        result.errors,
    )
    return result

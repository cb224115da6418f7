"""Command surface of the engine, one controller per browser tab.

The host (CLI, browser driver, tests) loads a document, dispatches commands
against it and unloads it on navigation. Every command answers with a plain
dict; profile and backend failures become an error toast plus a failed
response instead of an exception, and a broken page becomes a failed
response.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from autoapply.autofill import run_fill_pass
from autoapply.config import load_cached_profile
from autoapply.dom.base import Document
from autoapply.errors import ApiError, DocumentError, ProfileUnavailableError
from autoapply.field_map import GENERAL_FIELD_MAP, INSTANT_FIELD_MAP
from autoapply.jobs.extractor import extract_job, extract_job_description
from autoapply.log import get_logger
from autoapply.models import JobRecord, Severity
from autoapply.session import Session
from autoapply.timers import monotonic_ms

log = get_logger(__name__)

PROFILE_MISSING_MESSAGE = "Resume data not found. Please upload your resume in the AutoApply dashboard."


class Command(str, Enum):
    AUTOFILL = "autofill"
    INSTANT_AUTOFILL = "instantAutofill"
    EXTRACT_JOB = "extractJob"
    ANALYZE_JOB_DESCRIPTION = "analyzeJobDescription"
    CLEANUP = "cleanup"


class ContentController:
    def __init__(
        self,
        profile_provider: Callable[[], dict[str, Any]] | None = None,
        cached_profile_loader: Callable[[], dict[str, Any]] = load_cached_profile,
        job_sink: Callable[[JobRecord], Any] | None = None,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        self._profile_provider = profile_provider
        self._cached_profile_loader = cached_profile_loader
        self._job_sink = job_sink
        self._clock = clock
        self.session: Session | None = None
        self._handlers: dict[Command, Callable[..., dict[str, Any]]] = {
            Command.AUTOFILL: self._autofill,
            Command.INSTANT_AUTOFILL: self._instant_autofill,
            Command.EXTRACT_JOB: self._extract_job,
            Command.ANALYZE_JOB_DESCRIPTION: self._analyze_job_description,
            Command.CLEANUP: self._cleanup,
        }

    # -- lifecycle ----------------------------------------------------------

    def load(self, document: Document) -> Session:
        if self.session is not None:
            self.unload()
        self.session = Session(document, self._clock)
        log.debug("Loaded %s", document.url or "document")
        return self.session

    def unload(self) -> None:
        if self.session is None:
            return
        self.session.cleanup()
        self.session = None

    def pump(self) -> int:
        return self.session.pump() if self.session else 0

    def wait_idle(self, sleep=None, *, max_wait_ms: float = 30_000) -> int:
        if self.session is None:
            return 0
        return self.session.wait_idle(sleep, max_wait_ms=max_wait_ms)

    def _require_session(self) -> Session:
        if self.session is None:
            raise RuntimeError("No document loaded")
        return self.session

    # -- dispatch -----------------------------------------------------------

    def dispatch(self, command: Command | str, **payload: Any) -> dict[str, Any]:
        command = Command(command)
        session = self._require_session()
        log.debug("Command %s", command.value)
        try:
            return self._handlers[command](session, **payload)
        except ProfileUnavailableError as exc:
            log.warning("%s: %s", command.value, exc)
            self._error_toast(session, PROFILE_MISSING_MESSAGE)
            return {"success": False, "filledCount": 0, "error": str(exc)}
        except ApiError as exc:
            log.error("%s: %s", command.value, exc)
            self._error_toast(session, f"AutoApply Pro: {exc}")
            return {"success": False, "error": str(exc), "status": exc.status}
        except DocumentError as exc:
            # the page itself is unusable, so no toast
            log.error("%s: document error: %s", command.value, exc)
            return {"success": False, "error": str(exc)}

    def _error_toast(self, session: Session, message: str) -> None:
        try:
            session.show_toast(message, Severity.ERROR)
        except DocumentError as exc:
            log.warning("Could not show error toast: %s", exc)

    def _autofill(self, session: Session, profile: dict[str, Any] | None = None, **_: Any) -> dict[str, Any]:
        if not profile:
            if self._profile_provider is None:
                raise ProfileUnavailableError("No profile supplied and no profile provider configured")
            profile = self._profile_provider()
        result = run_fill_pass(session, profile, GENERAL_FIELD_MAP, "general")
        return {"success": True, "filledCount": result.filled_count}

    def _instant_autofill(self, session: Session, **_: Any) -> dict[str, Any]:
        profile = self._cached_profile_loader()
        result = run_fill_pass(session, profile, INSTANT_FIELD_MAP, "instant", select_fallback=False)
        return {"success": True, "filledCount": result.filled_count}

    def _extract_job(self, session: Session, save: bool = False, **_: Any) -> dict[str, Any]:
        record = extract_job(session.document)
        response: dict[str, Any] = {"success": record is not None, "job": record.to_dict() if record else None}
        if record is not None and save:
            if self._job_sink is None:
                raise ApiError("No job tracker configured")
            self._job_sink(record)
            session.show_toast(f"Saved {record.job_title} at {record.company}", Severity.SUCCESS)
            response["saved"] = True
        return response

    def _analyze_job_description(self, session: Session, **_: Any) -> dict[str, Any]:
        return {"success": True, "jobDescription": extract_job_description(session.document)}

    def _cleanup(self, session: Session, **_: Any) -> dict[str, Any]:
        session.cleanup()
        return {"success": True}

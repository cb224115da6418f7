"""HTTP client for the AutoApply backend: active profile in, job records out."""
from __future__ import annotations

from typing import Any

import requests

from autoapply.config import Settings, load_settings
from autoapply.errors import ApiError, ProfileUnavailableError
from autoapply.log import get_logger
from autoapply.models import JobRecord
from autoapply.retry import RetryPolicy, retry

log = get_logger(__name__)

PROFILE_PATH = "/resumes/profile/active"
JOB_TRACKER_PATH = "/job-tracker/add"

# Statuses a retry cannot fix.
FATAL_STATUSES = (400, 401, 403, 404, 422)
HTTP_RETRY = RetryPolicy(max_attempts=3, base_delay=1.0, max_delay=8.0)


def _is_fatal(exc: BaseException) -> bool:
    response = getattr(exc, "response", None)
    return isinstance(exc, requests.HTTPError) and response is not None and response.status_code in FATAL_STATUSES


def _unwrap(payload: Any) -> Any:
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


class ApiClient:
    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or load_settings()

    @property
    def base_url(self) -> str:
        return self.settings.api_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.settings.auth_token:
            headers["Authorization"] = f"Bearer {self.settings.auth_token}"
        return headers

    @retry(HTTP_RETRY, retryable=(requests.RequestException,), give_up=_is_fatal)
    def _get(self, path: str) -> Any:
        r = requests.get(self.base_url + path, headers=self._headers(), timeout=self.settings.request_timeout)
        r.raise_for_status()
        return r.json()

    @retry(HTTP_RETRY, retryable=(requests.RequestException,), give_up=_is_fatal)
    def _post(self, path: str, body: dict[str, Any]) -> Any:
        r = requests.post(
            self.base_url + path,
            json=body,
            headers=self._headers(),
            timeout=self.settings.request_timeout,
        )
        r.raise_for_status()
        return r.json()

    def _call(self, method, *args) -> Any:
        try:
            return method(*args)
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            raise ApiError(f"Backend returned {status} for {args[0]}", status) from exc
        except requests.RequestException as exc:
            raise ApiError(f"Backend unreachable: {exc}") from exc
        except ValueError as exc:
            raise ApiError(f"Backend sent invalid JSON for {args[0]}") from exc

    def fetch_active_profile(self) -> dict[str, Any]:
        """The signed-in user's active resume profile."""
        if not self.settings.auth_token:
            raise ProfileUnavailableError("No auth token configured (AUTOAPPLY_TOKEN)")
        try:
            data = _unwrap(self._call(self._get, PROFILE_PATH))
        except ApiError as exc:
            if exc.status == 404:
                raise ProfileUnavailableError("No active resume profile on the server") from exc
            raise
        if not isinstance(data, dict) or not data:
            raise ProfileUnavailableError("Active resume profile is empty")
        log.info("Fetched active profile (%d fields)", len(data))
        return data

    def save_job(self, record: JobRecord) -> dict[str, Any]:
        """Add ``record`` to the user's job tracker."""
        if not self.settings.auth_token:
            raise ApiError("No auth token configured (AUTOAPPLY_TOKEN)", 401)
        payload = self._call(self._post, JOB_TRACKER_PATH, record.to_dict())
        log.info("Saved %r at %r to job tracker", record.job_title, record.company)
        saved = _unwrap(payload)
        return saved if isinstance(saved, dict) else {"result": saved}

"""Tests for the backend client, with requests patched out."""
import pytest
import requests

from autoapply import api_client
from autoapply.api_client import ApiClient
from autoapply.config import Settings
from autoapply.errors import ApiError, ProfileUnavailableError
from autoapply.models import JobRecord


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self._payload = payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    monkeypatch.setattr("autoapply.retry.time.sleep", lambda seconds: None)


@pytest.fixture
def client():
    return ApiClient(Settings(api_url="http://api.test/api/", auth_token="tok"))


def _queue(monkeypatch, method, responses):
    calls = []

    def fake(url, **kwargs):
        calls.append((url, kwargs))
        item = responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    monkeypatch.setattr(api_client.requests, method, fake)
    return calls


class TestFetchActiveProfile:
    def test_unwraps_data(self, client, monkeypatch):
        calls = _queue(monkeypatch, "get", [FakeResponse(200, {"data": {"email": "a@b.com"}})])

        assert client.fetch_active_profile() == {"email": "a@b.com"}
        url, kwargs = calls[0]
        assert url == "http://api.test/api/resumes/profile/active"
        assert kwargs["headers"]["Authorization"] == "Bearer tok"

    def test_no_token(self, monkeypatch):
        calls = _queue(monkeypatch, "get", [])
        with pytest.raises(ProfileUnavailableError):
            ApiClient(Settings(auth_token="")).fetch_active_profile()
        assert calls == []

    def test_not_found_is_not_retried(self, client, monkeypatch):
        calls = _queue(monkeypatch, "get", [FakeResponse(404), FakeResponse(200, {"data": {"x": 1}})])
        with pytest.raises(ProfileUnavailableError):
            client.fetch_active_profile()
        assert len(calls) == 1

    def test_empty_profile(self, client, monkeypatch):
        _queue(monkeypatch, "get", [FakeResponse(200, {"data": {}})])
        with pytest.raises(ProfileUnavailableError):
            client.fetch_active_profile()

    def test_server_error_is_retried(self, client, monkeypatch):
        calls = _queue(
            monkeypatch,
            "get",
            [FakeResponse(503), requests.ConnectionError("reset"), FakeResponse(200, {"email": "a@b.com"})],
        )
        assert client.fetch_active_profile() == {"email": "a@b.com"}
        assert len(calls) == 3

    def test_gives_up_after_three_attempts(self, client, monkeypatch):
        _queue(monkeypatch, "get", [FakeResponse(500)] * 3)
        with pytest.raises(ApiError) as info:
            client.fetch_active_profile()
        assert info.value.status == 500

    def test_unauthorized(self, client, monkeypatch):
        _queue(monkeypatch, "get", [FakeResponse(401)])
        with pytest.raises(ApiError) as info:
            client.fetch_active_profile()
        assert info.value.status == 401

    def test_invalid_json(self, client, monkeypatch):
        _queue(monkeypatch, "get", [FakeResponse(200, ValueError("bad json"))])
        with pytest.raises(ApiError):
            client.fetch_active_profile()


class TestSaveJob:
    def test_posts_tracker_payload(self, client, monkeypatch):
        calls = _queue(monkeypatch, "post", [FakeResponse(201, {"data": {"id": "j1"}})])
        record = JobRecord(job_title="Backend Engineer", company="Acme Co", jd_url="https://acme.example/jobs/1")

        assert client.save_job(record) == {"id": "j1"}

        url, kwargs = calls[0]
        assert url == "http://api.test/api/job-tracker/add"
        assert kwargs["json"]["jobTitle"] == "Backend Engineer"
        assert kwargs["json"]["salaryRange"]["currency"] == "USD"

    def test_no_token(self):
        with pytest.raises(ApiError) as info:
            ApiClient(Settings(auth_token="")).save_job(JobRecord())
        assert info.value.status == 401

    def test_validation_error(self, client, monkeypatch):
        calls = _queue(monkeypatch, "post", [FakeResponse(422)])
        with pytest.raises(ApiError) as info:
            client.save_job(JobRecord())
        assert info.value.status == 422
        assert len(calls) == 1

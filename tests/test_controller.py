"""Tests for command dispatch on the content controller."""
import pytest

from autoapply.controller import PROFILE_MISSING_MESSAGE, Command, ContentController
from autoapply.errors import ApiError, DocumentError, ProfileUnavailableError

FORM = """
<form>
  <label for="fn">Full name</label><input id="fn">
  <input name="user_email">
  <input name="phone_number" value="already here">
</form>
"""

JOB_PAGE = '<h1>Backend Engineer</h1><div class="company-name">Acme Co</div>'

PROFILE = {"name": "Jane Doe", "email": "jane@example.com", "phone": "555"}


@pytest.fixture
def controller(clock):
    return ContentController(
        profile_provider=lambda: dict(PROFILE),
        cached_profile_loader=lambda: dict(PROFILE),
        clock=clock,
    )


class TestAutofill:
    def test_fills_with_provider_profile(self, controller, make_document):
        doc = make_document(FORM)
        controller.load(doc)

        response = controller.dispatch("autofill")

        assert response == {"success": True, "filledCount": 2}
        assert doc.get_element_by_id("fn").value == "Jane Doe"
        assert doc.query_selector('[name="phone_number"]').value == "already here"

    def test_payload_profile_wins(self, controller, make_document):
        doc = make_document(FORM)
        controller.load(doc)
        response = controller.dispatch(Command.AUTOFILL, profile={"email": "other@example.com"})
        assert response["filledCount"] == 1
        assert doc.query_selector('[name="user_email"]').value == "other@example.com"

    def test_missing_profile_gives_error_toast(self, make_document):
        controller = ContentController(profile_provider=None)
        doc = make_document(FORM)
        session = controller.load(doc)

        response = controller.dispatch("autofill")

        assert response["success"] is False
        assert response["filledCount"] == 0
        assert session.toasts.messages() == [PROFILE_MISSING_MESSAGE]
        assert doc.query_selector(".autoapply-toast-error") is not None

    def test_provider_failure_is_reported(self, make_document):
        def provider():
            raise ProfileUnavailableError("No active resume profile on the server")

        controller = ContentController(profile_provider=provider)
        controller.load(make_document(FORM))
        response = controller.dispatch("autofill")
        assert response["error"] == "No active resume profile on the server"

    def test_backend_error_is_reported(self, make_document):
        def provider():
            raise ApiError("Backend returned 500 for /resumes/profile/active", 500)

        controller = ContentController(profile_provider=provider)
        session = controller.load(make_document(FORM))

        response = controller.dispatch("autofill")

        assert response["success"] is False
        assert response["status"] == 500
        assert session.toasts.messages()[0].startswith("AutoApply Pro:")

    def test_broken_page_gives_failed_response(self, controller, make_document, monkeypatch):
        doc = make_document(FORM)
        controller.load(doc)

        def gone(tag):
            raise DocumentError("Execution context was destroyed")

        monkeypatch.setattr(doc, "create_element", gone)

        response = controller.dispatch("autofill")

        assert response == {"success": False, "error": "Execution context was destroyed"}

    def test_error_toast_failure_is_not_raised(self, make_document, monkeypatch):
        controller = ContentController(profile_provider=None)
        doc = make_document(FORM)
        controller.load(doc)

        def gone(tag):
            raise DocumentError("no body")

        monkeypatch.setattr(doc, "create_element", gone)

        response = controller.dispatch("autofill")

        assert response["success"] is False
        assert response["filledCount"] == 0


class TestInstantAutofill:
    def test_uses_cached_profile(self, controller, make_document):
        doc = make_document('<input name="applicant">')
        controller.load(doc)
        assert controller.dispatch("instantAutofill") == {"success": True, "filledCount": 1}
        assert doc.query_selector("input").value == "Jane Doe"

    def test_no_cache(self, make_document):
        def loader():
            raise ProfileUnavailableError("No cached profile at /nowhere")

        controller = ContentController(cached_profile_loader=loader)
        controller.load(make_document(FORM))
        assert controller.dispatch("instantAutofill")["success"] is False


class TestExtractJob:
    def test_returns_job(self, controller, make_document):
        controller.load(make_document(JOB_PAGE, url="https://acme.example/jobs/1"))

        response = controller.dispatch("extractJob")

        assert response["success"] is True
        assert response["job"]["jobTitle"] == "Backend Engineer"
        assert response["job"]["company"] == "Acme Co"
        assert "saved" not in response

    def test_nothing_found(self, controller, make_document):
        controller.load(make_document("<p>hello</p>", url="https://blog.example/"))
        assert controller.dispatch("extractJob") == {"success": False, "job": None}

    def test_save_sends_record_to_sink(self, make_document):
        saved = []
        controller = ContentController(job_sink=saved.append)
        session = controller.load(make_document(JOB_PAGE, url="https://acme.example/jobs/1"))

        response = controller.dispatch("extractJob", save=True)

        assert response["saved"] is True
        assert saved[0].company == "Acme Co"
        assert session.toasts.messages() == ["Saved Backend Engineer at Acme Co"]

    def test_save_without_sink(self, controller, make_document):
        controller.load(make_document(JOB_PAGE, url="https://acme.example/jobs/1"))
        response = controller.dispatch("extractJob", save=True)
        assert response["success"] is False
        assert "job tracker" in response["error"]


class TestLifecycle:
    def test_analyze_job_description(self, controller, make_document):
        controller.load(make_document("<main>Ship code daily</main>"))
        assert controller.dispatch("analyzeJobDescription") == {"success": True, "jobDescription": "Ship code daily"}

    def test_cleanup_command(self, controller, make_document):
        doc = make_document(FORM)
        controller.load(doc)
        controller.dispatch("autofill")

        assert controller.dispatch("cleanup") == {"success": True}
        assert doc.get_element_by_id("autoapply-toast-container") is None
        assert doc.get_element_by_id("fn").get_attribute("style") is None

    def test_unload_releases_session(self, controller, make_document):
        doc = make_document(FORM)
        controller.load(doc)
        controller.dispatch("autofill")

        controller.unload()

        assert controller.session is None
        assert doc.listener_count == 0
        assert controller.pump() == 0

    def test_reload_replaces_session(self, controller, make_document):
        first = controller.load(make_document(FORM))
        first.show_toast("hello")
        second = controller.load(make_document(FORM))
        assert first is not second
        assert len(first.toasts) == 0

    def test_dispatch_without_document(self, controller):
        with pytest.raises(RuntimeError):
            controller.dispatch("cleanup")

    def test_unknown_command(self, controller, make_document):
        controller.load(make_document(FORM))
        with pytest.raises(ValueError):
            controller.dispatch("submitApplication")

    def test_timers_run_through_the_controller(self, controller, make_document, clock):
        controller.load(make_document(FORM))
        controller.dispatch("autofill")

        clock.advance(5000)
        assert controller.pump() > 0
        assert len(controller.session.toasts) == 0

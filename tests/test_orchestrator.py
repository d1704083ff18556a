"""
Unit tests for sales_curiosity/extension/orchestrator.py

Most workflow tests run the real API in-process: the relay talks to the
FastAPI app through httpx.ASGITransport, with the in-memory database.
"""

import asyncio

import httpx
import pytest

from sales_curiosity.extension.extractor import NO_PROFILE_DATA_MESSAGE
from sales_curiosity.extension.orchestrator import (
    CONNECT_FAILED_MESSAGE,
    NO_URL_MESSAGE,
    NOT_LINKEDIN_MESSAGE,
    AnalysisOrchestrator,
    BackendError,
    WorkflowState,
    is_linkedin_url,
)
from sales_curiosity.extension.relay import MessageRelay, RelayResponse
from sales_curiosity.extension.session_store import SessionStore
from sales_curiosity.extension.tabs import BrowserTab, TabSource
from sales_curiosity.main import app
from sales_curiosity.models import ProfileData
from sales_curiosity.routers.deps import supabase_dependency
from sales_curiosity.services.ai import mock_analysis, mock_email
from sales_curiosity.services.analysis import build_result

API_BASE = "http://testserver"
PROFILE_URL = "https://www.linkedin.com/in/janedoe/"
EXTENSION_ORIGIN = "chrome-extension://abcdefghijklmnop"


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def api_relay(fake_supabase):
    app.dependency_overrides[supabase_dependency] = lambda: fake_supabase
    yield MessageRelay(origin=EXTENSION_ORIGIN, transport=httpx.ASGITransport(app=app))
    app.dependency_overrides.clear()


@pytest.fixture
def session():
    store = SessionStore()
    store.set_api_base(API_BASE)
    return store


@pytest.fixture
def profile_tab(profile_html):
    return BrowserTab(PROFILE_URL, html=profile_html)


@pytest.fixture
def orchestrator(api_relay, session, profile_tab):
    return AnalysisOrchestrator(TabSource(profile_tab), api_relay, session)


class GatedRelay:
    """Relay whose responses are released by the test, in any order."""

    def __init__(self):
        self.pending = []

    async def ping_api(self, url, method="GET", body=None, auth_token=None):
        entry = {"body": body, "release": asyncio.Event(), "response": None}
        self.pending.append(entry)
        await entry["release"].wait()
        return entry["response"]

    def respond(self, index, response):
        self.pending[index]["response"] = response
        self.pending[index]["release"].set()

    async def wait_for(self, count):
        while len(self.pending) < count:
            await asyncio.sleep(0)


def backend_response(action, text):
    text, payload = build_result(action, text)
    return RelayResponse(ok=True, status=200, data={"ok": True, "analysis": text, "result": payload.to_wire()})


# =============================================================================
# TAB GATE
# =============================================================================


@pytest.mark.parametrize("url, expected", [
    ("https://www.linkedin.com/in/janedoe/", True),
    ("https://linkedin.com/in/janedoe", True),
    ("http://uk.linkedin.com/in/janedoe", True),
    ("https://www.linkedin.com.evil.example/in/janedoe", False),
    ("https://notlinkedin.com/in/janedoe", False),
    ("chrome://extensions/", False),
    ("", False),
    (None, False),
])
def test_is_linkedin_url(url, expected):
    assert is_linkedin_url(url) is expected
    assert is_linkedin_url(url) is expected


class TestGate:
    @pytest.mark.asyncio
    async def test_non_linkedin_tab(self, api_relay, session):
        orchestrator = AnalysisOrchestrator(TabSource(BrowserTab("https://example.com")), api_relay, session)

        assert await orchestrator.can_analyze() is False
        assert await orchestrator.can_analyze() is False

        await orchestrator.run()

        assert orchestrator.state == WorkflowState.ERROR
        assert orchestrator.error == NOT_LINKEDIN_MESSAGE

    @pytest.mark.asyncio
    async def test_no_active_tab(self, api_relay, session):
        orchestrator = AnalysisOrchestrator(TabSource(), api_relay, session)

        await orchestrator.run()

        assert orchestrator.error == NO_URL_MESSAGE

    @pytest.mark.asyncio
    async def test_linkedin_tab(self, orchestrator):
        assert await orchestrator.can_analyze() is True


# =============================================================================
# EXTRACTION FAILURES
# =============================================================================


class TestExtractionFailures:
    @pytest.mark.asyncio
    async def test_content_script_not_loaded(self, api_relay, session):
        tab = BrowserTab(PROFILE_URL, content_script=False)
        orchestrator = AnalysisOrchestrator(TabSource(tab), api_relay, session)

        result = await orchestrator.run()

        assert result is None
        assert orchestrator.state == WorkflowState.ERROR
        assert orchestrator.error.startswith(f"Error: {CONNECT_FAILED_MESSAGE}\n\nTroubleshooting:\n")
        assert orchestrator.error.endswith(f"3. Make sure your backend is running at {API_BASE}")

    @pytest.mark.asyncio
    async def test_page_without_profile(self, api_relay, session):
        tab = BrowserTab(PROFILE_URL, html="<html><body><main></main></body></html>")
        orchestrator = AnalysisOrchestrator(TabSource(tab), api_relay, session)

        await orchestrator.run()

        assert NO_PROFILE_DATA_MESSAGE in orchestrator.error
        assert orchestrator.history == [
            WorkflowState.IDLE,
            WorkflowState.EXTRACTING,
            WorkflowState.ERROR,
        ]


# =============================================================================
# END TO END
# =============================================================================


class TestWorkflow:
    @pytest.mark.asyncio
    async def test_analyze(self, orchestrator):
        result = await orchestrator.run("analyze")

        assert orchestrator.state == WorkflowState.DONE
        assert orchestrator.history == [
            WorkflowState.IDLE,
            WorkflowState.EXTRACTING,
            WorkflowState.SCRAPING_VALIDATED,
            WorkflowState.REQUESTING,
            WorkflowState.DONE,
        ]
        assert result.text.startswith("**1. Executive Summary**")
        assert result.payload.kind == "analysis"
        assert result.profile.name == "Jane Doe"
        assert result.linkedin_url == PROFILE_URL

    @pytest.mark.asyncio
    async def test_email_uses_saved_context(self, orchestrator, session):
        await orchestrator.save_user_context("I run sales at Acme", "book a demo")

        result = await orchestrator.run("email", email_context="We met at SaaStr")

        assert result.payload.kind == "email"
        assert result.payload.subject.startswith("Quick question")
        assert "I run sales at Acme" in result.payload.body
        assert "We met at SaaStr" in result.payload.body

    @pytest.mark.asyncio
    async def test_backend_rejects_origin(self, session, profile_tab, api_relay):
        relay = MessageRelay(origin="https://evil.example", transport=httpx.ASGITransport(app=app))
        orchestrator = AnalysisOrchestrator(TabSource(profile_tab), relay, session)

        await orchestrator.run()

        assert orchestrator.state == WorkflowState.ERROR
        assert orchestrator.error.startswith("Error: API Error: Forbidden")
        assert orchestrator.result is None

    @pytest.mark.asyncio
    async def test_backend_unreachable(self, session, profile_tab):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        relay = MessageRelay(transport=httpx.MockTransport(handler))
        orchestrator = AnalysisOrchestrator(TabSource(profile_tab), relay, session)

        await orchestrator.run()

        assert orchestrator.error.startswith("Error: API Error: Connection refused")

    @pytest.mark.asyncio
    async def test_legacy_backend_without_tagged_result(self, session, profile_tab):
        def handler(request):
            return httpx.Response(200, json={"ok": True, "analysis": "**1. Executive Summary**\nHi"})

        relay = MessageRelay(transport=httpx.MockTransport(handler))
        orchestrator = AnalysisOrchestrator(TabSource(profile_tab), relay, session)

        result = await orchestrator.run()

        assert result.payload.kind == "analysis"
        assert result.payload.sections[0].title == "1. Executive Summary"

    @pytest.mark.asyncio
    async def test_unexpected_backend_payload(self, session, profile_tab):
        relay = MessageRelay(transport=httpx.MockTransport(lambda request: httpx.Response(200, json={"ok": True})))
        orchestrator = AnalysisOrchestrator(TabSource(profile_tab), relay, session)

        await orchestrator.run()

        assert orchestrator.state == WorkflowState.ERROR
        assert "Unexpected response from backend" in orchestrator.error

    @pytest.mark.asyncio
    async def test_signed_in_run_is_saved(self, orchestrator, fake_supabase):
        fake_supabase.add_user(email="rep@example.com", password="secret123")

        await orchestrator.login("rep@example.com", "secret123")
        await orchestrator.run()

        assert fake_supabase.tables["linkedin_analyses"][0]["linkedin_url"] == PROFILE_URL


# =============================================================================
# OVERLAPPING RUNS
# =============================================================================


class TestOverlappingRuns:
    @pytest.mark.asyncio
    async def test_latest_request_wins(self, session, profile_tab):
        relay = GatedRelay()
        orchestrator = AnalysisOrchestrator(TabSource(profile_tab), relay, session)
        jane = ProfileData(name="Jane Doe", headline="CMO")

        first = asyncio.create_task(orchestrator.run("analyze"))
        await relay.wait_for(1)
        second = asyncio.create_task(orchestrator.run("email"))
        await relay.wait_for(2)

        relay.respond(1, backend_response("email", mock_email(jane)))
        assert (await second).action == "email"

        relay.respond(0, backend_response("analyze", mock_analysis(jane)))
        assert await first is None

        assert orchestrator.state == WorkflowState.DONE
        assert orchestrator.result.action == "email"

    @pytest.mark.asyncio
    async def test_stale_failure_is_discarded(self, session, profile_tab):
        relay = GatedRelay()
        orchestrator = AnalysisOrchestrator(TabSource(profile_tab), relay, session)

        first = asyncio.create_task(orchestrator.run())
        await relay.wait_for(1)
        second = asyncio.create_task(orchestrator.run())
        await relay.wait_for(2)

        relay.respond(1, backend_response("analyze", mock_analysis(ProfileData(name="Jane Doe"))))
        await second
        relay.respond(0, RelayResponse(ok=False, error="Connection reset"))
        await first

        assert orchestrator.state == WorkflowState.DONE
        assert orchestrator.error is None

    @pytest.mark.asyncio
    async def test_clear_discards_request_in_flight(self, session, profile_tab):
        relay = GatedRelay()
        orchestrator = AnalysisOrchestrator(TabSource(profile_tab), relay, session)

        pending = asyncio.create_task(orchestrator.run())
        await relay.wait_for(1)
        orchestrator.clear_result()

        relay.respond(0, backend_response("analyze", mock_analysis(ProfileData(name="Jane Doe"))))

        assert await pending is None
        assert orchestrator.state == WorkflowState.IDLE
        assert orchestrator.result is None
        assert orchestrator.export_text() is None


# =============================================================================
# EXPORTS
# =============================================================================


class TestExports:
    @pytest.mark.asyncio
    async def test_nothing_to_export_before_a_result(self, orchestrator):
        assert orchestrator.export_text() is None
        assert orchestrator.export_pdf() is None
        assert await orchestrator.export_docx() is None

    @pytest.mark.asyncio
    async def test_exports_after_analysis(self, orchestrator):
        await orchestrator.run()

        text = orchestrator.export_text()
        pdf = orchestrator.export_pdf()
        docx = await orchestrator.export_docx()

        assert text.filename == "Jane-Doe-analysis.txt"
        assert pdf.content.startswith(b"%PDF")
        assert docx.filename == "Jane-Doe-analysis.docx"
        assert docx.content.startswith(b"PK")

    @pytest.mark.asyncio
    async def test_clear_result(self, orchestrator):
        await orchestrator.run()

        orchestrator.clear_result()

        assert orchestrator.state == WorkflowState.IDLE
        assert orchestrator.export_text() is None


# =============================================================================
# ACCOUNT
# =============================================================================


class TestAccount:
    @pytest.mark.asyncio
    async def test_login_and_logout(self, orchestrator, fake_supabase, session):
        fake_supabase.add_user(email="rep@example.com", password="secret123")

        logged_in = await orchestrator.login("rep@example.com", "secret123")

        assert logged_in.access_token == "token-rep@example.com"
        assert session.get_auth_token() == "token-rep@example.com"
        assert session.get_user()["email"] == "rep@example.com"

        await orchestrator.logout()

        assert session.get_auth_token() is None
        assert session.get_api_base() == API_BASE
        assert fake_supabase.auth.signed_out == ["token-rep@example.com"]

    @pytest.mark.asyncio
    async def test_bad_login(self, orchestrator, fake_supabase, session):
        fake_supabase.add_user(email="rep@example.com", password="secret123")

        with pytest.raises(BackendError, match="Invalid login credentials"):
            await orchestrator.login("rep@example.com", "nope")
        assert session.get_auth_token() is None

    @pytest.mark.asyncio
    async def test_signup_without_session(self, orchestrator, session):
        assert await orchestrator.signup("new@example.com", "secret123", full_name="New Rep") is None
        assert session.get_auth_token() is None

    @pytest.mark.asyncio
    async def test_user_context_local_only(self, orchestrator, session):
        synced = await orchestrator.save_user_context("About", "Goals")

        assert synced is False
        assert (await orchestrator.load_user_context()).objectives == "Goals"

    @pytest.mark.asyncio
    async def test_user_context_synced(self, orchestrator, fake_supabase, session):
        fake_supabase.add_user(email="rep@example.com", password="secret123")
        await orchestrator.login("rep@example.com", "secret123")

        assert await orchestrator.save_user_context("About", "Goals") is True

        session.clear("userContext")
        loaded = await orchestrator.load_user_context()

        assert loaded.about_me == "About"
        assert session.get_user_context().objectives == "Goals"

    def test_set_api_base(self, orchestrator, session):
        orchestrator.set_api_base("https://api.salescuriosity.test/")

        assert session.get_api_base() == "https://api.salescuriosity.test"

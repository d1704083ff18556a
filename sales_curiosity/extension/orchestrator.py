"""
Analysis Orchestrator - popup logic of the extension.

Drives one workflow per user action:

    idle -> extracting -> scraping-validated -> requesting -> done | error

Handles:
- Gating on the active tab being a LinkedIn page
- Asking the tab's content script for the profile
- Sending the AnalysisRequest through the relay and reading the tagged result
- Keeping the last result for text/PDF/DOCX export
- Sign in / sign up / sign out and the saved user context

Overlapping runs are allowed. Every run takes a new generation number and a
run that is no longer the latest drops its outcome, so the last request wins.
"""

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Literal, Optional, Union
from urllib.parse import urlparse

from pydantic import ValidationError

from ..models import (
    AnalysisPayload,
    AnalysisRequest,
    AnalysisResult,
    EmailPayload,
    ProfileData,
    Session,
    UserContext,
)
from ..services.analysis import build_result
from .exports import ExportFile, docx_from_base64, export_pdf, export_text
from .extractor import EXTRACT_MESSAGE, NO_PROFILE_DATA_MESSAGE
from .relay import MessageRelay, RelayResponse
from .session_store import SessionStore
from .tabs import MessageDeliveryError, TabSource

Action = Literal["analyze", "email"]

NO_URL_MESSAGE = "No URL detected"
NOT_LINKEDIN_MESSAGE = "Not a LinkedIn page. Please navigate to a LinkedIn profile to use this extension."
CONNECT_FAILED_MESSAGE = (
    "Could not connect to the page. Please refresh the LinkedIn page and try again.\n\n"
    "Tip: After installing or updating the extension, you need to refresh any open LinkedIn tabs."
)
EXTRACT_FAILED_MESSAGE = (
    "Failed to extract profile data. Please make sure you're on a LinkedIn profile page "
    "and refresh the page."
)

STATUS_MESSAGES = {
    "extracting": "Extracting profile data...",
    "scraping-validated": "Profile data extracted",
    "requesting": "Analyzing with AI...",
}


class WorkflowState(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    SCRAPING_VALIDATED = "scraping-validated"
    REQUESTING = "requesting"
    DONE = "done"
    ERROR = "error"


# ============================================
# Errors
# ============================================

class OrchestratorError(Exception):
    """Base class for failures raised inside a workflow."""


class NavigationError(OrchestratorError):
    """The active tab is missing or not a LinkedIn page."""


class ExtractionError(OrchestratorError):
    """The content script could not be reached or found nothing usable."""


class BackendError(OrchestratorError):
    """The relay failed or the backend declared an error."""


def is_linkedin_url(url: Optional[str]) -> bool:
    """True for linkedin.com and its subdomains, over http(s)."""
    if not url:
        return False
    parsed = urlparse(url)
    host = (parsed.hostname or "").lower()
    return parsed.scheme in ("http", "https") and (host == "linkedin.com" or host.endswith(".linkedin.com"))


def troubleshooting_message(error: Union[Exception, str], api_base: str) -> str:
    return (
        f"Error: {error}\n\n"
        "Troubleshooting:\n"
        "1. Refresh this LinkedIn page\n"
        "2. Reload the extension at chrome://extensions/\n"
        f"3. Make sure your backend is running at {api_base}"
    )


@dataclass
class WorkflowResult:
    action: str
    text: str
    payload: Union[AnalysisPayload, EmailPayload]
    profile: ProfileData
    linkedin_url: Optional[str] = None


class AnalysisOrchestrator:
    def __init__(
        self,
        tabs: TabSource,
        relay: MessageRelay,
        session: Optional[SessionStore] = None,
        on_change: Optional[Callable[["AnalysisOrchestrator"], None]] = None,
    ):
        self.tabs = tabs
        self.relay = relay
        self.session = session if session is not None else SessionStore()
        self.on_change = on_change

        self.state = WorkflowState.IDLE
        self.message = ""
        self.error: Optional[str] = None
        self.result: Optional[WorkflowResult] = None
        self.history: List[WorkflowState] = [self.state]
        self._generation = 0

    # ============================================
    # State
    # ============================================

    @property
    def generation(self) -> int:
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    def _set_state(self, state: WorkflowState, message: str = "") -> None:
        self.state = state
        self.message = message
        self.history.append(state)
        if self.on_change:
            self.on_change(self)

    def _advance(self, generation: int, state: WorkflowState) -> bool:
        """Move a run forward; False once the run has been superseded."""
        if not self._is_current(generation):
            return False
        self._set_state(state, STATUS_MESSAGES.get(state.value, ""))
        return True

    def clear_result(self) -> None:
        # Any run still in flight is stale from here on
        self._generation += 1
        self.result = None
        self.error = None
        self._set_state(WorkflowState.IDLE)

    # ============================================
    # Tab gate
    # ============================================

    async def current_url(self) -> Optional[str]:
        tab = await self.tabs.active_tab()
        return tab.url if tab else None

    async def can_analyze(self) -> bool:
        """Whether action selection should be offered for the active tab."""
        return is_linkedin_url(await self.current_url())

    # ============================================
    # Workflow
    # ============================================

    async def run(self, action: Action = "analyze", email_context: Optional[str] = None) -> Optional[WorkflowResult]:
        """
        Extract the active profile and ask the backend for an analysis or email.

        Returns:
            The result when this run finished as the latest one, otherwise None
        """
        self._generation += 1
        generation = self._generation
        self.result = None
        self.error = None
        api_base = self.session.get_api_base()

        try:
            tab = await self.tabs.active_tab()
            if tab is None or not tab.url:
                raise NavigationError(NO_URL_MESSAGE)
            if not is_linkedin_url(tab.url):
                raise NavigationError(NOT_LINKEDIN_MESSAGE)

            if not self._advance(generation, WorkflowState.EXTRACTING):
                return None
            profile = await self._extract(tab)

            if not self._advance(generation, WorkflowState.SCRAPING_VALIDATED):
                return None

            request = AnalysisRequest(
                profile_data=profile,
                linkedin_url=tab.url,
                action=action,
                user_context=self.session.get_user_context(),
                email_context=email_context if action == "email" else None,
            )

            if not self._advance(generation, WorkflowState.REQUESTING):
                return None
            response = await self.relay.ping_api(
                f"{api_base}/api/prospects",
                method="POST",
                body=request.to_wire(),
                auth_token=self.session.get_auth_token(),
            )

            if not self._is_current(generation):
                print(f"[Orchestrator] Discarding stale response of run {generation}")
                return None

            text, payload = self._read_result(action, response)
            result = WorkflowResult(action, text, payload, profile, tab.url)

        except NavigationError as e:
            return self._fail(generation, str(e))
        except Exception as e:
            print(f"[Orchestrator] Run {generation} failed: {e}")
            return self._fail(generation, troubleshooting_message(e, api_base))

        self.result = result
        self._set_state(WorkflowState.DONE, text)
        return result

    def _fail(self, generation: int, message: str) -> None:
        if not self._is_current(generation):
            print(f"[Orchestrator] Discarding stale error of run {generation}")
            return None
        self.error = message
        self._set_state(WorkflowState.ERROR, message)
        return None

    async def _extract(self, tab) -> ProfileData:
        try:
            response = await tab.send_message({"type": EXTRACT_MESSAGE})
        except MessageDeliveryError as e:
            raise ExtractionError(CONNECT_FAILED_MESSAGE) from e

        if not response or not response.get("success"):
            raise ExtractionError((response or {}).get("error") or EXTRACT_FAILED_MESSAGE)

        profile = ProfileData.model_validate(response.get("data") or {})
        if not profile.has_usable_data():
            raise ExtractionError(NO_PROFILE_DATA_MESSAGE)
        return profile

    def _read_result(self, action: str, response: RelayResponse):
        if not response.ok:
            raise BackendError(f"API Error: {response.error}")

        data = response.data
        if not isinstance(data, dict):
            raise BackendError(f"Unexpected response from backend (HTTP {response.status})")

        try:
            result = AnalysisResult.model_validate(data)
        except ValidationError as e:
            raise BackendError(f"Unexpected response from backend: {e}") from e

        if result.error or not result.ok:
            raise BackendError(f"API Error: {result.error or f'HTTP {response.status}'}")

        if result.result is not None:
            return result.analysis or "", result.result
        if result.analysis:
            # Older backends only send the legacy string
            return build_result(action, result.analysis)
        raise BackendError(f"Unexpected response from backend: {json.dumps(data)[:500]}")

    # ============================================
    # Exports
    # ============================================

    def export_text(self) -> Optional[ExportFile]:
        if self.result is None:
            return None
        return export_text(self.result.text, self.result.profile)

    def export_pdf(self) -> Optional[ExportFile]:
        if self.result is None:
            return None
        return export_pdf(self.result.text, self.result.profile, self.result.linkedin_url)

    async def export_docx(self) -> Optional[ExportFile]:
        """Ask the backend to render the current result as DOCX."""
        if self.result is None or not self.result.text.strip():
            return None

        response = await self.relay.ping_api(
            f"{self.session.get_api_base()}/api/export/docx",
            method="POST",
            body={
                "analysis": self.result.text,
                "profileData": self.result.profile.to_wire(),
                "linkedinUrl": self.result.linkedin_url,
            },
            auth_token=self.session.get_auth_token(),
        )
        data = self._require_ok(response, "DOCX export failed")
        return docx_from_base64(data.get("docxBase64", ""), data.get("filename") or "analysis.docx")

    # ============================================
    # Account
    # ============================================

    def _require_ok(self, response: RelayResponse, what: str) -> Dict[str, Any]:
        if not response.ok:
            raise BackendError(f"{what}: {response.error}")
        data = response.data if isinstance(response.data, dict) else {}
        if not data.get("ok"):
            raise BackendError(f"{what}: {data.get('error') or f'HTTP {response.status}'}")
        return data

    async def _call(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> RelayResponse:
        return await self.relay.ping_api(
            f"{self.session.get_api_base()}{path}",
            method=method,
            body=body,
            auth_token=self.session.get_auth_token(),
        )

    def set_api_base(self, api_base: str) -> None:
        self.session.set_api_base(api_base)

    async def login(self, email: str, password: str) -> Session:
        response = await self._call("POST", "/api/auth/login", {"email": email, "password": password})
        data = self._require_ok(response, "Login failed")

        session = Session.model_validate(data.get("session") or {})
        self.session.save_session(session)
        print(f"[Orchestrator] Signed in as {email}")
        return session

    async def signup(
        self,
        email: str,
        password: str,
        full_name: Optional[str] = None,
        account_type: str = "individual",
        organization_name: Optional[str] = None,
    ) -> Optional[Session]:
        """Create an account; signs in straight away when the backend returns a session."""
        body = {
            "email": email,
            "password": password,
            "fullName": full_name,
            "accountType": account_type,
            "organizationName": organization_name,
        }
        response = await self._call("POST", "/api/auth/signup", {k: v for k, v in body.items() if v is not None})
        data = self._require_ok(response, "Signup failed")

        if not data.get("session"):
            return None
        session = Session.model_validate(data["session"])
        self.session.save_session(session)
        return session

    async def logout(self) -> None:
        """Sign out locally; telling the backend is best effort."""
        if self.session.get_auth_token():
            response = await self._call("POST", "/api/auth/logout")
            if not response.ok:
                print(f"[Orchestrator] Logout request failed: {response.error}")
        self.session.clear()
        self.clear_result()

    async def save_user_context(self, about_me: str, objectives: str) -> bool:
        """
        Save the context locally and, when signed in, on the backend.

        Returns:
            True if the backend copy was updated too
        """
        context = UserContext(about_me=about_me, objectives=objectives)
        self.session.set_user_context(context)

        if not self.session.get_auth_token():
            return False
        response = await self._call("POST", "/api/user/context", context.to_wire())
        try:
            self._require_ok(response, "Saving context failed")
        except BackendError as e:
            print(f"[Orchestrator] {e}")
            return False
        return True

    async def load_user_context(self) -> Optional[UserContext]:
        """Backend copy when signed in, otherwise the local one."""
        if self.session.get_auth_token():
            response = await self._call("GET", "/api/user/context")
            try:
                data = self._require_ok(response, "Loading context failed")
            except BackendError as e:
                print(f"[Orchestrator] {e}")
            else:
                context = UserContext.model_validate(data.get("userContext") or {})
                self.session.set_user_context(context)
                return context
        return self.session.get_user_context()

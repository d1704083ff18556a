# Browser extension client: content script, relay, popup workflow
from .extractor import ContentScript, extract_profile_data
from .orchestrator import AnalysisOrchestrator, WorkflowState, is_linkedin_url
from .relay import MessageRelay, RelayResponse
from .session_store import SessionStore
from .storage import JSONFileStorage, MemoryStorage
from .tabs import BrowserTab, MessageDeliveryError, TabSource

__all__ = [
    "ContentScript",
    "extract_profile_data",
    "AnalysisOrchestrator",
    "WorkflowState",
    "is_linkedin_url",
    "MessageRelay",
    "RelayResponse",
    "SessionStore",
    "JSONFileStorage",
    "MemoryStorage",
    "BrowserTab",
    "MessageDeliveryError",
    "TabSource",
]

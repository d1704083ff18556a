"""
Session Store - the one place the client reads and writes persisted state.

Keys (camelCase, as stored by the extension):
- apiBase: backend base URL (default http://localhost:3000)
- authToken: Supabase access token
- user: the signed-in user record
- userContext: saved "about me" / objectives

Reads go through an in-memory copy that is loaded once and refreshed on every
write.
"""

from typing import Any, Dict, Optional

from ..config import DEFAULT_API_BASE
from ..models import Session, UserContext
from .storage import MemoryStorage

API_BASE = "apiBase"
AUTH_TOKEN = "authToken"
USER = "user"
USER_CONTEXT = "userContext"


class SessionStore:
    def __init__(self, storage: Optional[MemoryStorage] = None):
        self.storage = storage if storage is not None else MemoryStorage()
        self._cache: Optional[Dict[str, Any]] = None

    def _state(self) -> Dict[str, Any]:
        if self._cache is None:
            self._cache = self.storage.read()
        return self._cache

    # ============================================
    # get / set / clear
    # ============================================

    def get(self, key: str, default: Any = None) -> Any:
        return self._state().get(key, default)

    def set(self, **items: Any) -> None:
        self.storage.set(**items)
        self._cache = self.storage.read()

    def clear(self, *keys: str) -> None:
        """Remove the given keys, or the signed-in session when none are given."""
        self.storage.remove(keys or (AUTH_TOKEN, USER))
        self._cache = self.storage.read()

    # ============================================
    # Typed accessors
    # ============================================

    def get_api_base(self) -> str:
        return (self.get(API_BASE) or DEFAULT_API_BASE).rstrip("/")

    def set_api_base(self, api_base: str) -> None:
        self.set(**{API_BASE: api_base.strip().rstrip("/") or DEFAULT_API_BASE})

    def get_auth_token(self) -> Optional[str]:
        return self.get(AUTH_TOKEN) or None

    def get_user(self) -> Optional[Dict[str, Any]]:
        return self.get(USER) or None

    def save_session(self, session: Session) -> None:
        self.set(**{AUTH_TOKEN: session.access_token, USER: session.user})

    def get_user_context(self) -> Optional[UserContext]:
        raw = self.get(USER_CONTEXT)
        if not raw:
            return None
        return UserContext.model_validate(raw)

    def set_user_context(self, context: UserContext) -> None:
        self.set(**{USER_CONTEXT: context.to_wire()})

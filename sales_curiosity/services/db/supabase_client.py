"""
Supabase client - REST (PostgREST) and auth (GoTrue) over httpx directly.

Uses the service role key for table access, so row level security is bypassed;
callers scope every query by user or organization id themselves.
"""

from typing import Dict, Any, Optional

import httpx

from ...config import SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_ANON_KEY


class SupabaseAuthError(Exception):
    """Raised when the auth endpoint rejects a request."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class SupabaseTable:
    """Simple table query builder."""

    def __init__(self, client: "SupabaseClient", table_name: str):
        self.client = client
        self.table_name = table_name
        self._select_columns = "*"
        self._filters = []
        self._order_by = None
        self._order_desc = False
        self._limit = None
        self._operation = "select"
        self._payload = None
        self._on_conflict = None

    def select(self, columns: str = "*") -> "SupabaseTable":
        self._select_columns = columns
        return self

    def eq(self, column: str, value: Any) -> "SupabaseTable":
        self._filters.append(f"{column}=eq.{value}")
        return self

    def order(self, column: str, desc: bool = False) -> "SupabaseTable":
        self._order_by = column
        self._order_desc = desc
        return self

    def limit(self, count: int) -> "SupabaseTable":
        self._limit = count
        return self

    def _build_url(self) -> str:
        url = f"{self.client.rest_url}/{self.table_name}"
        params = [f"select={self._select_columns}"]
        params.extend(self._filters)

        if self._order_by:
            direction = ".desc" if self._order_desc else ".asc"
            params.append(f"order={self._order_by}{direction}")

        if self._limit:
            params.append(f"limit={self._limit}")

        return f"{url}?{'&'.join(params)}"

    def insert(self, data: Dict[str, Any]) -> "SupabaseTable":
        self._payload = data
        self._operation = "insert"
        return self

    def upsert(self, data: Dict[str, Any], on_conflict: Optional[str] = None) -> "SupabaseTable":
        self._payload = data
        self._on_conflict = on_conflict
        self._operation = "upsert"
        return self

    def update(self, data: Dict[str, Any]) -> "SupabaseTable":
        self._payload = data
        self._operation = "update"
        return self

    def execute(self) -> "SupabaseResponse":
        url = f"{self.client.rest_url}/{self.table_name}"

        if self._operation == "insert":
            response = self.client._request("POST", url, json=self._payload)
            return SupabaseResponse(response)

        if self._operation == "upsert":
            headers = {"Prefer": "resolution=merge-duplicates,return=representation"}
            if self._on_conflict:
                url = f"{url}?on_conflict={self._on_conflict}"
            response = self.client._request("POST", url, json=self._payload, extra_headers=headers)
            return SupabaseResponse(response)

        if self._operation == "update":
            if self._filters:
                url = f"{url}?{'&'.join(self._filters)}"
            response = self.client._request("PATCH", url, json=self._payload)
            return SupabaseResponse(response)

        response = self.client._request("GET", self._build_url())
        return SupabaseResponse(response)


class SupabaseResponse:
    """Response wrapper."""

    def __init__(self, response: httpx.Response):
        self.status_code = response.status_code
        try:
            self.data = response.json() if response.text else []
        except ValueError:
            self.data = []

        # Ensure data is always a list for consistency
        if isinstance(self.data, dict):
            self.data = [self.data]


class SupabaseAuth:
    """GoTrue endpoints used by the app: signup, password login, user lookup, logout."""

    def __init__(self, client: "SupabaseClient", anon_key: str):
        self.client = client
        self.auth_url = f"{client.url}/auth/v1"
        self.anon_key = anon_key

    def _call(
        self,
        method: str,
        path: str,
        json: Optional[Dict] = None,
        access_token: Optional[str] = None,
    ) -> Dict[str, Any]:
        headers = {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {access_token or self.anon_key}",
            "Content-Type": "application/json",
        }
        response = self.client._client.request(
            method, f"{self.auth_url}{path}", json=json, headers=headers
        )
        try:
            payload = response.json() if response.text else {}
        except ValueError:
            payload = {}

        if response.status_code >= 400:
            message = (
                payload.get("msg")
                or payload.get("error_description")
                or payload.get("message")
                or payload.get("error")
                or f"Auth request failed ({response.status_code})"
            )
            print(f"[Supabase Auth] {method} {path} -> {response.status_code}: {message}")
            raise SupabaseAuthError(message, response.status_code)
        return payload

    def sign_up(self, email: str, password: str, metadata: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Create an auth user.

        Returns the raw GoTrue payload. With email confirmation on, this is the
        bare user; with autoconfirm it also carries access/refresh tokens.
        """
        return self._call("POST", "/signup", json={
            "email": email,
            "password": password,
            "data": metadata or {},
        })

    def sign_in_with_password(self, email: str, password: str) -> Dict[str, Any]:
        return self._call("POST", "/token?grant_type=password", json={
            "email": email,
            "password": password,
        })

    def get_user(self, access_token: str) -> Optional[Dict[str, Any]]:
        """Resolve an access token to its user, or None if the token is invalid."""
        if not access_token:
            return None
        try:
            return self._call("GET", "/user", access_token=access_token)
        except SupabaseAuthError:
            return None

    def sign_out(self, access_token: str) -> None:
        self._call("POST", "/logout", access_token=access_token)


class SupabaseClient:
    """Simple Supabase REST client."""

    def __init__(self, url: str, key: str, anon_key: Optional[str] = None):
        self.url = url.rstrip("/")
        self.key = key
        self.rest_url = f"{self.url}/rest/v1"
        self.headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Content-Type": "application/json",
            "Prefer": "return=representation"
        }
        self._client = httpx.Client(timeout=30.0)
        self.auth = SupabaseAuth(self, anon_key or key)

    def _request(
        self,
        method: str,
        url: str,
        json: Optional[Dict] = None,
        extra_headers: Optional[Dict] = None
    ) -> httpx.Response:
        headers = {**self.headers}
        if extra_headers:
            headers.update(extra_headers)

        response = self._client.request(method, url, json=json, headers=headers)
        if response.status_code >= 400:
            print(f"[Supabase Error] {method} {url}")
            print(f"[Supabase Error] Status: {response.status_code}")
            print(f"[Supabase Error] Response: {response.text[:500]}")
        response.raise_for_status()
        return response

    def table(self, table_name: str) -> SupabaseTable:
        return SupabaseTable(self, table_name)


_client: Optional[SupabaseClient] = None
_warned_missing = False


def get_supabase() -> Optional[SupabaseClient]:
    """
    Return the shared client, creating it on first use.

    Returns None when SUPABASE_URL / service key are not configured, so the
    API can still serve (mock) analyses without a database.
    """
    global _client, _warned_missing
    if _client is not None:
        return _client
    if not SUPABASE_URL or not SUPABASE_SERVICE_ROLE_KEY:
        if not _warned_missing:
            _warned_missing = True
            print("[Supabase] SUPABASE_URL or service key missing - persistence disabled")
        return None
    _client = SupabaseClient(SUPABASE_URL, SUPABASE_SERVICE_ROLE_KEY, SUPABASE_ANON_KEY)
    return _client


def test_connection() -> bool:
    """Test if Supabase connection works."""
    supabase = get_supabase()
    if supabase is None:
        return False
    try:
        supabase.table("users").select("id").limit(1).execute()
        return True
    except Exception as e:
        print(f"Connection test failed: {e}")
        return False

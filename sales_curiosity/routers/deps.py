"""
Shared router dependencies - origin gate, Supabase handle, bearer-token users.
"""

import re
from typing import Any, Dict, Optional

from fastapi import Depends, Header, HTTPException, Request

from ..config import get_allowed_origin_prefixes
from ..services.db.supabase_client import SupabaseClient, get_supabase


def is_allowed_origin(origin: str) -> bool:
    """
    Check an Origin header against the allow-list.

    Scheme-only entries (`chrome-extension://`) match by prefix; full origins
    (the web app URL) must match exactly.
    """
    origin = (origin or "").rstrip("/")
    if not origin:
        return False
    for allowed in get_allowed_origin_prefixes():
        if allowed.endswith("://"):
            if origin.startswith(allowed):
                return True
        elif origin == allowed:
            return True
    return False


def allowed_origin_regex() -> str:
    """Same allow-list as a regex, for CORSMiddleware."""
    parts = []
    for allowed in get_allowed_origin_prefixes():
        if allowed.endswith("://"):
            parts.append(f"{re.escape(allowed)}.+")
        else:
            parts.append(re.escape(allowed))
    return "^(" + "|".join(parts) + ")$"


def is_rejected_origin(request: Request) -> bool:
    """True for browser requests from origins outside the allow-list."""
    origin = request.headers.get("origin")
    if origin is not None and not is_allowed_origin(origin):
        print(f"[Origin] Rejected request from {origin} to {request.url.path}", flush=True)
        return True
    return False


def supabase_dependency() -> Optional[SupabaseClient]:
    return get_supabase()


def require_supabase(
    supabase: Optional[SupabaseClient] = Depends(supabase_dependency),
) -> SupabaseClient:
    if supabase is None:
        raise HTTPException(status_code=503, detail="Supabase is not configured")
    return supabase


def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> Optional[str]:
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer "):].strip()
    return token or None


def get_optional_user(
    token: Optional[str] = Depends(get_bearer_token),
    supabase: Optional[SupabaseClient] = Depends(supabase_dependency),
) -> Optional[Dict[str, Any]]:
    """The authenticated user, or None (no token, bad token, or no database)."""
    if not token or supabase is None:
        return None
    try:
        return supabase.auth.get_user(token)
    except Exception as e:
        print(f"[Auth] User lookup failed, continuing anonymously: {e}", flush=True)
        return None


def require_user(
    token: Optional[str] = Depends(get_bearer_token),
    supabase: SupabaseClient = Depends(require_supabase),
) -> Dict[str, Any]:
    if not token:
        raise HTTPException(status_code=401, detail="Unauthorized")
    user = supabase.auth.get_user(token)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid token")
    return user

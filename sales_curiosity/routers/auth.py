"""
Auth Router - Email/password accounts backed by Supabase Auth

Endpoints:
- POST /api/auth/signup - Create an account (individual or organization)
- POST /api/auth/login - Password login, returns a session
- POST /api/auth/logout - Revoke the bearer token
"""

from typing import Any, Dict, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..models import CamelModel, Session
from ..services.db.supabase_client import SupabaseAuthError, SupabaseClient
from .deps import get_bearer_token, require_supabase, supabase_dependency

router = APIRouter()


# ============================================
# Pydantic Models
# ============================================

class SignupRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = None
    account_type: Literal["individual", "organization"] = "individual"
    organization_name: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


def _session_from_tokens(payload: Dict[str, Any]) -> Optional[Session]:
    if not payload.get("access_token"):
        return None
    return Session(
        access_token=payload["access_token"],
        refresh_token=payload.get("refresh_token"),
        expires_in=payload.get("expires_in"),
        user=payload.get("user") or {},
    )


# ============================================
# Endpoints
# ============================================

@router.post("/signup")
async def signup(body: SignupRequest, supabase: SupabaseClient = Depends(require_supabase)):
    """Create a Supabase auth user; the database trigger creates the profile row."""
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")
    if body.account_type == "organization" and not (body.organization_name or "").strip():
        raise HTTPException(status_code=400, detail="Organization name is required")

    try:
        payload = supabase.auth.sign_up(body.email, body.password, metadata={
            "full_name": body.full_name,
            "account_type": body.account_type,
            "organization_name": body.organization_name,
        })
    except SupabaseAuthError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except Exception as e:
        print(f"[Auth] Signup error: {e}", flush=True)
        raise HTTPException(status_code=500, detail="Internal Server Error")

    # With autoconfirm GoTrue returns tokens + user, otherwise the bare user
    user = payload.get("user") or payload
    session = _session_from_tokens(payload)
    print(f"[Auth] Created account {user.get('id')} ({body.account_type})", flush=True)

    response = {
        "ok": True,
        "user": user,
        "message": "Account created successfully!",
    }
    if session:
        response["session"] = session.to_wire()
    return response


@router.post("/login")
async def login(body: LoginRequest, supabase: SupabaseClient = Depends(require_supabase)):
    """Password login; the account must also exist in the users table."""
    if not body.email or not body.password:
        raise HTTPException(status_code=400, detail="Email and password are required")

    try:
        payload = supabase.auth.sign_in_with_password(body.email, body.password)
    except SupabaseAuthError as e:
        raise HTTPException(status_code=401, detail=e.message)
    except Exception as e:
        print(f"[Auth] Login error: {e}", flush=True)
        raise HTTPException(status_code=500, detail="Internal Server Error")

    session = _session_from_tokens(payload)
    if session is None:
        raise HTTPException(status_code=401, detail="Login did not return a session")

    try:
        user_id = session.user.get("id")
        user_result = supabase.table("users").select("role,organization_id").eq("id", user_id).execute()

        if not user_result.data:
            try:
                supabase.auth.sign_out(session.access_token)
            except SupabaseAuthError as e:
                print(f"[Auth] Sign out after missing profile failed: {e}", flush=True)
            raise HTTPException(status_code=404, detail="Account not found. Please sign up")

        user_row = user_result.data[0]
        return {
            "ok": True,
            "user": session.user,
            "session": session.to_wire(),
            "role": user_row.get("role"),
            "organizationId": user_row.get("organization_id"),
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/logout")
async def logout(
    token: Optional[str] = Depends(get_bearer_token),
    supabase: Optional[SupabaseClient] = Depends(supabase_dependency),
):
    """Revoke the session server-side. Always succeeds for the caller."""
    if token and supabase is not None:
        try:
            supabase.auth.sign_out(token)
        except Exception as e:
            print(f"[Auth] Logout failed: {e}", flush=True)
    return {"ok": True}

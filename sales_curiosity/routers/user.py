"""
User Router - Role lookup and saved user context

Endpoints:
- GET /api/user/role - Role, organization and account type of the caller
- GET /api/user/context - Saved "about me" / objectives
- POST /api/user/context - Save "about me" / objectives
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException

from ..models import UserContext
from ..services.db.supabase_client import SupabaseClient
from .deps import require_supabase, require_user

router = APIRouter()


@router.get("/role")
async def get_role(
    user: Dict[str, Any] = Depends(require_user),
    supabase: SupabaseClient = Depends(require_supabase),
):
    """Get the caller's role (service role key, bypasses RLS)."""
    try:
        result = (
            supabase.table("users")
            .select("role,organization_id,organizations(account_type)")
            .eq("id", user["id"])
            .execute()
        )
        if not result.data:
            raise HTTPException(status_code=404, detail="User not found in database")

        row = result.data[0]
        organization = row.get("organizations") or {}
        return {
            "ok": True,
            "role": row.get("role"),
            "organizationId": row.get("organization_id"),
            "accountType": organization.get("account_type"),
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.get("/context")
async def get_context(
    user: Dict[str, Any] = Depends(require_user),
    supabase: SupabaseClient = Depends(require_supabase),
):
    try:
        result = supabase.table("users").select("user_context").eq("id", user["id"]).execute()
        if not result.data:
            raise HTTPException(status_code=404, detail="User not found in database")

        context = UserContext.model_validate(result.data[0].get("user_context") or {})
        return {"ok": True, "userContext": context.to_wire()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/context")
async def save_context(
    context: UserContext,
    user: Dict[str, Any] = Depends(require_user),
    supabase: SupabaseClient = Depends(require_supabase),
):
    """Replace the saved context wholesale (no merge, no versioning)."""
    try:
        result = supabase.table("users").update({
            "user_context": context.to_wire(),
        }).eq("id", user["id"]).execute()

        if not result.data:
            raise HTTPException(status_code=404, detail="User not found in database")

        return {"ok": True, "userContext": context.to_wire()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

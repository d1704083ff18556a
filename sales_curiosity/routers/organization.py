"""
Organization Router - Admin view of an organization

Endpoints:
- GET /api/organization - Users, analyses, emails and integrations of the org
- POST /api/organization/invitations - Invite a user by email
- PUT /api/organization/integrations/{integration_type} - Enable/disable an integration

Only org_admin and super_admin users may call these.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..services.db.supabase_client import SupabaseClient
from .deps import require_supabase, require_user

router = APIRouter()

ADMIN_ROLES = {"org_admin", "super_admin"}
INVITATION_TTL_DAYS = 7


# ============================================
# Pydantic Models
# ============================================

class InvitationCreate(BaseModel):
    email: str
    role: Literal["member", "org_admin"] = "member"


class IntegrationToggle(BaseModel):
    enabled: bool


def _require_admin(supabase: SupabaseClient, user: Dict[str, Any]) -> Dict[str, Any]:
    """Return the caller's users row (with organization) or raise 403."""
    result = supabase.table("users").select("*,organizations(*)").eq("id", user["id"]).execute()
    if not result.data:
        raise HTTPException(status_code=404, detail="User not found in database")

    row = result.data[0]
    if row.get("role") not in ADMIN_ROLES or not row.get("organization_id"):
        raise HTTPException(status_code=403, detail="Organization admin access required")
    return row


def _now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================
# Endpoints
# ============================================

@router.get("")
async def get_organization(
    user: Dict[str, Any] = Depends(require_user),
    supabase: SupabaseClient = Depends(require_supabase),
):
    """Everything the organization dashboard shows."""
    try:
        admin = _require_admin(supabase, user)
        organization_id = admin["organization_id"]

        users = (
            supabase.table("users").select("*")
            .eq("organization_id", organization_id)
            .order("created_at", desc=True).execute()
        )
        analyses = (
            supabase.table("linkedin_analyses").select("*,users(email,full_name)")
            .eq("organization_id", organization_id)
            .order("created_at", desc=True).execute()
        )
        emails = (
            supabase.table("email_generations").select("*,users(email,full_name)")
            .eq("organization_id", organization_id)
            .order("created_at", desc=True).execute()
        )
        integrations = (
            supabase.table("organization_integrations").select("*")
            .eq("organization_id", organization_id).execute()
        )

        return {
            "ok": True,
            "organization": admin.get("organizations"),
            "users": users.data,
            "analyses": analyses.data,
            "emails": emails.data,
            "integrations": integrations.data,
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/invitations")
async def invite_user(
    invitation: InvitationCreate,
    user: Dict[str, Any] = Depends(require_user),
    supabase: SupabaseClient = Depends(require_supabase),
):
    """Create a 7-day invitation. Sending the email is left to the mail integration."""
    try:
        admin = _require_admin(supabase, user)

        result = supabase.table("user_invitations").insert({
            "organization_id": admin["organization_id"],
            "email": invitation.email,
            "role": invitation.role,
            "invited_by": user["id"],
            "invitation_token": str(uuid.uuid4()),
            "expires_at": (_now() + timedelta(days=INVITATION_TTL_DAYS)).isoformat(),
        }).execute()

        print(f"[Organization] Invited {invitation.email} as {invitation.role}", flush=True)
        return {"ok": True, "invitation": result.data[0] if result.data else None}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.put("/integrations/{integration_type}")
async def toggle_integration(
    integration_type: str,
    toggle: IntegrationToggle,
    user: Dict[str, Any] = Depends(require_user),
    supabase: SupabaseClient = Depends(require_supabase),
):
    try:
        admin = _require_admin(supabase, user)

        result = supabase.table("organization_integrations").upsert({
            "organization_id": admin["organization_id"],
            "integration_type": integration_type,
            "is_enabled": toggle.enabled,
            "enabled_at": _now().isoformat() if toggle.enabled else None,
            "enabled_by": user["id"],
        }, on_conflict="organization_id,integration_type").execute()

        return {"ok": True, "integration": result.data[0] if result.data else None}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

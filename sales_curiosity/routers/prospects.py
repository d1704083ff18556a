"""
Prospects Router - AI analysis and email drafting for LinkedIn profiles

Endpoints:
- POST /api/prospects - Analyze a profile or draft an outreach email
- GET /api/prospects - Recent analyses of the signed-in user
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException

from ..models import AnalysisRequest, AnalysisResult, ProfileSummary
from ..services.ai import AIConfigurationError, AIProviderError
from ..services.analysis import build_result, generate_text, save_result
from ..services.db.supabase_client import SupabaseClient
from .deps import get_optional_user, supabase_dependency

router = APIRouter()

HISTORY_LIMIT = 20


# ============================================
# Endpoints
# ============================================

@router.post("", response_model=AnalysisResult, response_model_exclude_none=True)
async def analyze_prospect(
    payload: AnalysisRequest,
    user: Optional[Dict[str, Any]] = Depends(get_optional_user),
    supabase: Optional[SupabaseClient] = Depends(supabase_dependency),
):
    """
    Build a prompt from the extracted profile and return the AI output.

    `action="analyze"` returns the five-section sales report,
    `action="email"` returns a subject + body draft. Results are saved when
    the request carries a valid bearer token.
    """
    profile = payload.profile_data
    if profile is None:
        raise HTTPException(status_code=400, detail="profileData is required")
    if not profile.has_usable_data():
        raise HTTPException(
            status_code=400,
            detail="profileData must include at least one of name, headline or fullPageText",
        )

    try:
        print(f"[Prospects] {payload.action} request for {payload.linkedin_url or 'unknown URL'}", flush=True)
        text = await generate_text(payload)
        text, result = build_result(payload.action, text)

        save_result(supabase, user, payload, text, result)

        return AnalysisResult(
            ok=True,
            analysis=text,
            result=result,
            profile_data=ProfileSummary(
                name=profile.name,
                headline=profile.headline,
                location=profile.location,
                url=payload.linkedin_url,
            ),
        )

    except AIConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except AIProviderError as e:
        raise HTTPException(status_code=502, detail=str(e))
    except HTTPException:
        raise
    except Exception as e:
        print(f"[Prospects] Error analyzing prospect: {e}", flush=True)
        raise HTTPException(status_code=500, detail=str(e))


@router.get("")
async def list_prospects(
    user: Optional[Dict[str, Any]] = Depends(get_optional_user),
    supabase: Optional[SupabaseClient] = Depends(supabase_dependency),
):
    """List the caller's recent analyses (empty when not signed in)."""
    if not user or supabase is None:
        return {"ok": True, "prospects": []}

    try:
        result = (
            supabase.table("linkedin_analyses")
            .select("id,linkedin_url,profile_name,profile_headline,profile_location,created_at")
            .eq("user_id", user["id"])
            .order("created_at", desc=True)
            .limit(HISTORY_LIMIT)
            .execute()
        )
        return {"ok": True, "prospects": result.data}
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))

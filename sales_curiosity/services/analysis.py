"""
Analysis Service - generate and persist prospect analyses and outreach emails.

Handles:
- Choosing mock templates vs. a live OpenAI call
- Wrapping the text into the tagged result payload
- Saving the result for authenticated users (best effort)
"""

import asyncio
from typing import Any, Dict, Optional, Tuple, Union

from ..config import SYSTEM_PROMPT_ANALYSIS, SYSTEM_PROMPT_EMAIL, use_mock_ai
from ..models import AnalysisPayload, AnalysisRequest, EmailPayload
from .ai import build_analysis_prompt, build_email_prompt, complete, mock_analysis, mock_email
from .db.supabase_client import SupabaseClient
from .formatting import build_analysis_payload, build_email_payload, format_email_text

FALLBACK_SUBJECT = "Following up"


async def generate_text(request: AnalysisRequest) -> str:
    """
    Produce the raw analysis/email text for a request.

    Raises:
        AIProviderError: when the live provider is used and fails
    """
    profile = request.profile_data

    if use_mock_ai():
        print("[Analysis] Using MOCK AI response (set USE_MOCK_AI=0 to use real OpenAI)", flush=True)
        if request.action == "email":
            return mock_email(profile, request.user_context, request.email_context)
        return mock_analysis(profile)

    if request.action == "email":
        prompt = build_email_prompt(profile, request.user_context, request.email_context)
        system_prompt = SYSTEM_PROMPT_EMAIL
    else:
        prompt = build_analysis_prompt(profile, request.user_context)
        system_prompt = SYSTEM_PROMPT_ANALYSIS

    # The OpenAI SDK client is synchronous; keep the event loop free.
    return await asyncio.to_thread(complete, system_prompt, prompt)


def build_result(action: str, text: str) -> Tuple[str, Union[AnalysisPayload, EmailPayload]]:
    """
    Wrap raw text into (legacy text, tagged payload).

    An email reply that ignores the subject/body format keeps the whole text
    as the body under a generic subject, and the text is re-rendered in the
    marker format.
    """
    if action == "email":
        payload = build_email_payload(text)
        if payload is None:
            payload = EmailPayload(subject=FALLBACK_SUBJECT, body=text.strip())
            text = format_email_text(payload.subject, payload.body)
        return text, payload
    return text, build_analysis_payload(text)


def _get_organization_id(supabase: SupabaseClient, user_id: str) -> Optional[str]:
    result = supabase.table("users").select("organization_id").eq("id", user_id).execute()
    if result.data:
        return result.data[0].get("organization_id")
    return None


def save_result(
    supabase: Optional[SupabaseClient],
    user: Optional[Dict[str, Any]],
    request: AnalysisRequest,
    text: str,
    payload: Union[AnalysisPayload, EmailPayload],
) -> bool:
    """
    Persist an analysis or email for an authenticated user.

    Never raises: a failed save must not cost the user their result.

    Returns:
        True if a row was written
    """
    if supabase is None or not user or not user.get("id"):
        print("[Analysis] No authenticated user, skipping database save", flush=True)
        return False

    user_id = user["id"]
    profile = request.profile_data
    try:
        organization_id = _get_organization_id(supabase, user_id)

        if isinstance(payload, EmailPayload):
            supabase.table("email_generations").insert({
                "user_id": user_id,
                "organization_id": organization_id,
                "linkedin_url": request.linkedin_url,
                "profile_name": profile.name,
                "subject": payload.subject,
                "body": payload.body,
                "email_context": request.email_context,
            }).execute()
        else:
            supabase.table("linkedin_analyses").insert({
                "user_id": user_id,
                "organization_id": organization_id,
                "linkedin_url": request.linkedin_url,
                "profile_name": profile.name,
                "profile_headline": profile.headline,
                "profile_location": profile.location,
                "profile_data": profile.to_wire(),
                "ai_analysis": text,
            }).execute()

        print(f"[Analysis] Saved {request.action} result for user {user_id}", flush=True)
        return True

    except Exception as e:
        print(f"[Analysis] Database save error for user {user_id}: {e}", flush=True)
        return False

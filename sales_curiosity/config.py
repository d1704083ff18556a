"""
Configuration - environment-driven settings for the backend and the extension client.

Loads `.env.local` first, then `.env`, so local overrides win.
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv(".env.local")
load_dotenv()

# ============================================================================
# SUPABASE
# ============================================================================

SUPABASE_URL = os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL")
SUPABASE_SERVICE_ROLE_KEY = os.getenv("SUPABASE_SERVICE_ROLE_KEY") or os.getenv("SUPABASE_KEY")
SUPABASE_ANON_KEY = (
    os.getenv("SUPABASE_ANON_KEY")
    or os.getenv("NEXT_PUBLIC_SUPABASE_ANON_KEY")
    or SUPABASE_SERVICE_ROLE_KEY
)

# ============================================================================
# AI PROVIDER
# ============================================================================

OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
OPENAI_TEMPERATURE = 0.7
OPENAI_MAX_TOKENS = 1500

SYSTEM_PROMPT_ANALYSIS = (
    "You are an expert sales intelligence analyst who provides deep, actionable "
    "insights about prospects based on their LinkedIn profiles."
)
SYSTEM_PROMPT_EMAIL = (
    "You are an expert sales copywriter who drafts short, personalized outreach "
    "emails based on LinkedIn profiles."
)

# ============================================================================
# EXTENSION CLIENT
# ============================================================================

DEFAULT_API_BASE = "http://localhost:3000"
EXTENSION_ORIGIN = os.getenv("EXTENSION_ORIGIN", "chrome-extension://sales-curiosity")

_TRUTHY = {"1", "true", "yes", "on"}


def _is_truthy(value: str) -> bool:
    return (value or "").strip().lower() in _TRUTHY


def use_mock_ai() -> bool:
    """
    Whether the backend returns canned responses instead of calling OpenAI.

    Either USE_MOCK_AI or NEXT_PUBLIC_MOCK_AI being truthy turns mock mode on.
    """
    return _is_truthy(os.getenv("USE_MOCK_AI", "")) or _is_truthy(os.getenv("NEXT_PUBLIC_MOCK_AI", ""))


def get_openai_api_key() -> str:
    return os.getenv("OPENAI_API_KEY", "")


def get_app_url() -> str:
    return (os.getenv("APP_URL") or os.getenv("NEXT_PUBLIC_APP_URL") or "").rstrip("/")


def get_allowed_origin_prefixes() -> List[str]:
    """Origin prefixes accepted by the API (extension pages + the web app)."""
    prefixes = ["chrome-extension://"]
    app_url = get_app_url()
    if app_url:
        prefixes.append(app_url)
    extra = os.getenv("EXTRA_ALLOWED_ORIGINS", "")
    prefixes.extend(o.strip().rstrip("/") for o in extra.split(",") if o.strip())
    return prefixes

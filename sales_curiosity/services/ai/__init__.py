# AI services
from .openai_client import AIConfigurationError, AIProviderError, complete
from .prompts import build_analysis_prompt, build_email_prompt, build_profile_context
from .mock_responses import mock_analysis, mock_email

__all__ = [
    "AIConfigurationError",
    "AIProviderError",
    "complete",
    "build_analysis_prompt",
    "build_email_prompt",
    "build_profile_context",
    "mock_analysis",
    "mock_email",
]

"""
OpenAI client - chat completions for prospect analyses and outreach emails.
"""

from typing import Optional

from openai import OpenAI

from ...config import (
    OPENAI_MODEL,
    OPENAI_TEMPERATURE,
    OPENAI_MAX_TOKENS,
    get_openai_api_key,
)


class AIProviderError(Exception):
    """The AI provider call failed."""


class AIConfigurationError(AIProviderError):
    """No API key configured for the AI provider."""


_client: Optional[OpenAI] = None


def get_client() -> OpenAI:
    global _client
    if _client is None:
        api_key = get_openai_api_key()
        if not api_key:
            raise AIConfigurationError("OPENAI_API_KEY is not set")
        _client = OpenAI(api_key=api_key)
    return _client


def complete(system_prompt: str, prompt: str, model: str = OPENAI_MODEL) -> str:
    """
    Run one chat completion and return the message text.

    Raises:
        AIConfigurationError: OPENAI_API_KEY missing
        AIProviderError: any provider-side failure
    """
    client = get_client()

    print(f"[OpenAI] Sending prompt ({len(prompt)} chars) to {model}", flush=True)
    try:
        completion = client.chat.completions.create(
            model=model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            temperature=OPENAI_TEMPERATURE,
            max_tokens=OPENAI_MAX_TOKENS,
        )
    except Exception as e:
        print(f"[OpenAI] API error: {type(e).__name__}: {e}", flush=True)
        raise AIProviderError(f"OpenAI API failed: {e}") from e

    content = completion.choices[0].message.content if completion.choices else None
    text = content or "No analysis generated"
    print(f"[OpenAI] Completion received, length: {len(text)}", flush=True)
    return text

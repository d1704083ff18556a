"""
Mock AI responses - deterministic templates used when mock mode is on.

Lets the extension and the web app be developed and tested without OpenAI
credits. Output follows the same text conventions as the real prompts.
"""

from typing import Optional

from ...models import ProfileData, UserContext
from ..formatting import format_email_text

MOCK_NOTE = (
    "*Note: This is a MOCK response generated for testing. To use real AI analysis, "
    "add OpenAI credits and set USE_MOCK_AI=0 in your .env.local file.*"
)


def _headline_has(headline: Optional[str], needle: str) -> bool:
    return bool(headline) and needle.lower() in headline.lower()


def _field_phrase(headline: Optional[str]) -> str:
    if not headline:
        return "your industry"
    if _headline_has(headline, "ai"):
        return "AI and innovation"
    if _headline_has(headline, "healthcare"):
        return "healthcare tech"
    return "your field"


def _peer_group(headline: Optional[str]) -> str:
    if headline and "CMO" in headline:
        return "marketing leaders"
    if headline and "CEO" in headline:
        return "executives"
    return "professionals"


def _primary_role(headline: Optional[str]) -> str:
    return headline.split("|")[0].strip() if headline else ""


def mock_analysis(profile: ProfileData) -> str:
    name = profile.name or "This professional"
    headline = profile.headline
    location = profile.location

    located = f" based in {location}" if location else ""
    hub = (
        f"Located in {location}, which is a major business hub"
        if location else "Operating in a key market area"
    )
    identity = "clearly defined professional identity" if headline else "established career trajectory"
    if headline and "AI" in headline:
        sector = "cutting-edge AI/technology sector"
    elif headline and "healthcare" in headline:
        sector = "healthcare innovation"
    else:
        sector = "their specialized field"
    role = _primary_role(headline) or "innovative projects"
    location_opener = f"I see you're in {location} - " if location else ""

    return f"""**1. Executive Summary**
{name} is {headline or 'a professional in their field'}{located}. They appear to be an experienced professional with a strong background in their industry.

**2. Key Insights**
• Current role suggests leadership experience and strategic thinking
• {hub}
• Active LinkedIn presence with professional networking ({identity})
• Experience in {sector}
• Likely decision-maker or influencer in their organization

**3. Sales Angles**
• Innovation focus: If in tech/AI, they value cutting-edge solutions
• Efficiency and ROI: Leadership roles prioritize business outcomes
• Industry expertise: They understand sector-specific challenges
• Growth mindset: Active professionals are open to new opportunities
• Network effects: Well-connected professionals can become advocates

**4. Potential Pain Points**
• Scaling challenges as the business grows
• Need for operational efficiency and automation
• Staying competitive in a rapidly evolving market
• Managing team productivity and collaboration
• Balancing innovation with practical implementation
• ROI pressure from stakeholders or investors

**5. Conversation Starters**
• "I noticed you're working on {role} - I'd love to hear about the biggest challenges you're tackling in that space."

• "{location_opener}I've been working with similar {_peer_group(headline)} who've shared some interesting insights about [specific challenge]. Would love to compare notes."

• "Your background in {_field_phrase(headline)} is impressive. I'm curious - how are you approaching [relevant industry challenge]?"

---
{MOCK_NOTE}"""


def mock_email(
    profile: ProfileData,
    user_context: Optional[UserContext] = None,
    email_context: Optional[str] = None,
) -> str:
    first_name = (profile.name or "").split(" ")[0] or "there"
    role = _primary_role(profile.headline)
    subject = f"Quick question about your work as {role}" if role else "Quick question"

    opener = (
        f"I came across your profile and noticed your work as {role}"
        if role else "I came across your LinkedIn profile"
    )
    if profile.location:
        opener += f" in {profile.location}"
    opener += "."

    lines = [f"Hi {first_name},", "", opener]
    if user_context and user_context.about_me:
        lines.extend(["", f"A bit about me: {user_context.about_me.strip()}"])
    if user_context and user_context.objectives:
        lines.extend(["", f"I'm reaching out because {user_context.objectives.strip()}"])
    if email_context and email_context.strip():
        lines.extend(["", email_context.strip()])
    lines.extend([
        "",
        f"I've been speaking with other {_peer_group(profile.headline)} about similar challenges "
        "and thought a short conversation could be useful for both of us.",
        "",
        "Would you be open to a 15-minute call next week?",
        "",
        "Best regards",
    ])

    return format_email_text(subject, "\n".join(lines))

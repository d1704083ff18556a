"""
Prompt Builder - turn extracted profile data into AI prompts.

Two prompts:
- sales intelligence analysis (five fixed sections)
- personalized outreach email (subject + body, marker format)
"""

from typing import Optional

from ...models import ProfileData, UserContext

FULL_PAGE_TEXT_LIMIT = 8000

ANALYSIS_PROMPT = """You are an expert sales intelligence assistant. Analyze this LinkedIn profile and provide insightful, actionable intelligence for a sales professional.

{context}

Based on this LinkedIn profile information, please provide:

**1. Executive Summary**
A brief 2-3 sentence overview of who this person is professionally and what makes them interesting.

**2. Key Insights**
3-5 notable observations about their career, expertise, industry position, or professional background.

**3. Sales Angles**
Specific talking points, shared interests, or connection opportunities that would be valuable for outreach.

**4. Potential Pain Points**
Based on their role and industry, what challenges might they be facing that your product/service could address?

**5. Conversation Starters**
2-3 personalized, natural opening lines you could use to start a conversation or send a connection request.
{sender_block}
Be specific and actionable. If information is limited, focus on what you can infer from the available data."""

EMAIL_PROMPT = """You are drafting a personalized outreach email to the LinkedIn prospect below.

## PROSPECT

{context}
{sender_block}{email_block}
## TASK

Write one short, natural outreach email (under 150 words) that references something specific from the prospect's profile, connects it to the sender's objectives, and ends with a low-pressure call to action. Do not invent facts that are not in the profile.

## RESPONSE FORMAT

Respond in exactly this format and nothing else:

**Subject:** <subject line>

**Email:**
<email body>"""


def build_profile_context(profile: ProfileData) -> str:
    """
    Build the prospect context block from all available profile data.

    The raw page text is only included (first 8000 chars) when neither the
    about nor the experience section was extracted.
    """
    context = ""

    if profile.name:
        context += f"Name: {profile.name}\n"
    if profile.headline:
        context += f"Headline: {profile.headline}\n"
    if profile.location:
        context += f"Location: {profile.location}\n\n"

    if profile.about_section:
        context += f"About:\n{profile.about_section}\n\n"
    if profile.experience_section:
        context += f"Experience:\n{profile.experience_section}\n\n"
    if profile.education_section:
        context += f"Education:\n{profile.education_section}\n\n"
    if profile.skills_section:
        context += f"Skills:\n{profile.skills_section}\n\n"

    if not profile.about_section and not profile.experience_section and profile.full_page_text:
        context += f"Profile Content:\n{profile.full_page_text[:FULL_PAGE_TEXT_LIMIT]}\n"

    return context


def build_sender_block(user_context: Optional[UserContext]) -> str:
    if user_context is None or not (user_context.about_me or user_context.objectives):
        return ""
    block = "\n## ABOUT THE SENDER\n\n"
    if user_context.about_me:
        block += f"About me: {user_context.about_me}\n"
    if user_context.objectives:
        block += f"My objectives: {user_context.objectives}\n"
    return block


def build_analysis_prompt(profile: ProfileData, user_context: Optional[UserContext] = None) -> str:
    return ANALYSIS_PROMPT.format(
        context=build_profile_context(profile),
        sender_block=build_sender_block(user_context),
    )


def build_email_prompt(
    profile: ProfileData,
    user_context: Optional[UserContext] = None,
    email_context: Optional[str] = None,
) -> str:
    email_block = ""
    if email_context and email_context.strip():
        email_block = f"\n## ADDITIONAL CONTEXT FROM THE SENDER\n\n{email_context.strip()}\n"
    return EMAIL_PROMPT.format(
        context=build_profile_context(profile),
        sender_block=build_sender_block(user_context),
        email_block=email_block,
    )

"""
Shared data models for the extension client and the backend API.

Attributes are snake_case; the wire format is camelCase (aliases), matching
what the browser extension sends.
"""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        """Dump as camelCase JSON-ready dict, dropping unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# ============================================
# Profile + request
# ============================================

class ProfileData(CamelModel):
    """One extraction of a LinkedIn profile page. Immutable once built."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True, extra="ignore"
    )

    name: Optional[str] = None
    headline: Optional[str] = None
    location: Optional[str] = None
    about_section: Optional[str] = None
    experience_section: Optional[str] = None
    education_section: Optional[str] = None
    skills_section: Optional[str] = None
    full_page_text: Optional[str] = None

    def has_usable_data(self) -> bool:
        # Usable means at least one of name, headline or full page text.
        return bool(self.name or self.headline or self.full_page_text)


class UserContext(CamelModel):
    about_me: str = ""
    objectives: str = ""


class AnalysisRequest(CamelModel):
    profile_data: Optional[ProfileData] = None
    linkedin_url: Optional[str] = None
    action: Literal["analyze", "email"] = "analyze"
    user_context: Optional[UserContext] = None
    email_context: Optional[str] = None


# ============================================
# Tagged results
# ============================================

class AnalysisSection(CamelModel):
    title: str
    body: str


class AnalysisPayload(CamelModel):
    kind: Literal["analysis"] = "analysis"
    sections: List[AnalysisSection] = Field(default_factory=list)


class EmailPayload(CamelModel):
    kind: Literal["email"] = "email"
    subject: str
    body: str


ResultPayload = Annotated[Union[AnalysisPayload, EmailPayload], Field(discriminator="kind")]


class ProfileSummary(CamelModel):
    name: Optional[str] = None
    headline: Optional[str] = None
    location: Optional[str] = None
    url: Optional[str] = None


class AnalysisResult(CamelModel):
    """
    Backend answer to POST /api/prospects.

    `analysis` is the legacy single-string rendering; `result` carries the
    same content as a tagged payload.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    ok: bool = False
    analysis: Optional[str] = None
    result: Optional[ResultPayload] = None
    profile_data: Optional[ProfileSummary] = None
    error: Optional[str] = None
    details: Optional[str] = None


# ============================================
# Session
# ============================================

class Session(CamelModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    user: Dict[str, Any] = Field(default_factory=dict)

"""
Profile Extractor - turn a LinkedIn profile page into ProfileData.

Runs at the content-script boundary: it only reacts to an explicit
EXTRACT_LINKEDIN_PROFILE message and reads the page HTML it is attached to.
No retries; a failed extraction is reported back to the caller as-is.
"""

from typing import Any, Callable, Dict, List, Optional

from bs4 import BeautifulSoup

from ..models import ProfileData

EXTRACT_MESSAGE = "EXTRACT_LINKEDIN_PROFILE"

FULL_PAGE_TEXT_LIMIT = 20000

NO_PROFILE_DATA_MESSAGE = (
    "Could not extract any profile information from the page. "
    "Please scroll down on the LinkedIn profile to load more content, then try again."
)

# ProfileData field -> anchor id LinkedIn puts at the top of each card
SECTION_ANCHORS = {
    "about_section": "about",
    "experience_section": "experience",
    "education_section": "education",
    "skills_section": "skills",
}

NAME_SELECTORS = ["h1.text-heading-xlarge", "main h1", "h1"]
HEADLINE_SELECTORS = [
    ".pv-text-details__left-panel .text-body-medium",
    "div.text-body-medium.break-words",
    "div.text-body-medium",
]
LOCATION_SELECTORS = [
    ".pv-text-details__left-panel .text-body-small.inline",
    "span.text-body-small.inline.t-black--light",
    "span.text-body-small.inline",
]

NOISE_TAGS = ["script", "style", "noscript", "svg", "template"]


def _text_lines(element) -> List[str]:
    """Visible text of an element, one stripped line per text node, no consecutive repeats."""
    lines: List[str] = []
    for raw in element.get_text(separator="\n").splitlines():
        line = " ".join(raw.split())
        if line and (not lines or lines[-1] != line):
            lines.append(line)
    return lines


def _first_text(soup: BeautifulSoup, selectors: List[str]) -> Optional[str]:
    for selector in selectors:
        element = soup.select_one(selector)
        if element:
            text = " ".join(element.get_text(separator=" ").split())
            if text:
                return text
    return None


def _find_section(soup: BeautifulSoup, anchor_id: str):
    anchor = soup.find(id=anchor_id)
    if anchor is not None:
        section = anchor.find_parent("section")
        if section is not None:
            return section

    # Older layouts: match the card by its heading
    for section in soup.find_all("section"):
        heading = section.find(["h2", "h3"])
        if heading and " ".join(heading.get_text(separator=" ").split()).lower() == anchor_id:
            return section
    return None


def _section_text(soup: BeautifulSoup, anchor_id: str) -> Optional[str]:
    section = _find_section(soup, anchor_id)
    if section is None:
        return None

    lines = _text_lines(section)
    # Drop the card title ("About", "Experience", ...)
    if lines and lines[0].lower() == anchor_id:
        lines = lines[1:]
    return "\n".join(lines) or None


def extract_profile_data(html: str) -> ProfileData:
    """
    Extract name, headline, location, the main profile cards and the page text.

    Fields that cannot be found are left as None; deciding whether the
    result is usable is up to the caller.
    """
    soup = BeautifulSoup(html or "", "lxml")

    # Screen-reader duplicates and non-visible content
    for element in soup.select(".visually-hidden"):
        element.decompose()
    for tag in soup.find_all(NOISE_TAGS):
        tag.decompose()

    fields: Dict[str, Any] = {
        "name": _first_text(soup, NAME_SELECTORS),
        "headline": _first_text(soup, HEADLINE_SELECTORS),
        "location": _first_text(soup, LOCATION_SELECTORS),
    }
    for field, anchor_id in SECTION_ANCHORS.items():
        fields[field] = _section_text(soup, anchor_id)

    root = soup.find("main") or soup.body or soup
    page_text = "\n".join(_text_lines(root))
    fields["full_page_text"] = page_text[:FULL_PAGE_TEXT_LIMIT] or None

    return ProfileData(**fields)


class ContentScript:
    """
    Message handler injected into a LinkedIn tab.

    `read_dom` returns the current page HTML each time it is called, so a
    re-rendered page is read fresh on every request.
    """

    def __init__(self, read_dom: Callable[[], str]):
        self.read_dom = read_dom

    def on_message(self, message: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Handle EXTRACT_LINKEDIN_PROFILE; other message types get no response."""
        if not isinstance(message, dict) or message.get("type") != EXTRACT_MESSAGE:
            return None

        try:
            profile = extract_profile_data(self.read_dom())
        except Exception as e:
            print(f"[Extractor] Extraction failed: {e}")
            return {"success": False, "error": f"Failed to extract profile data: {e}"}

        if not profile.has_usable_data():
            print("[Extractor] No name, headline or page text found")
            return {"success": False, "error": NO_PROFILE_DATA_MESSAGE}

        print(f"[Extractor] Extracted profile: {profile.name or 'unknown name'}")
        return {"success": True, "data": profile.to_wire()}

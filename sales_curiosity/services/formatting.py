"""
Response formatting - convert between the markdown-like analysis/email text and
the tagged result payloads.

The text conventions are the ones the AI prompt asks for:
- analysis sections start with a bold numbered header, e.g. `**1. Executive Summary**`
- bullets start with `•`, a `---` line separates the footer note
- emails are `**Subject:** <subject>\\n\\n**Email:**\\n<body>`
"""

import re
from typing import List, Optional, Tuple

from ..models import AnalysisPayload, AnalysisSection, EmailPayload

SUBJECT_MARKER = "**Subject:**"
EMAIL_MARKER = "**Email:**"

SECTION_HEADER_RE = re.compile(r"^\*\*\s*(\d+\.\s*[^*]+?)\s*\*\*\s*$")
BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
BULLET_RE = re.compile(r"^(?:•|[-*]\s)\s*")


def format_email_text(subject: str, body: str) -> str:
    return f"{SUBJECT_MARKER} {subject.strip()}\n\n{EMAIL_MARKER}\n{body.strip()}"


def parse_email_text(text: str) -> Optional[Tuple[str, str]]:
    """
    Split `**Subject:** ...\\n\\n**Email:**\\n...` into (subject, body).

    Returns None when either marker is missing or either part is empty.
    """
    if not text:
        return None

    subject_at = text.find(SUBJECT_MARKER)
    email_at = text.find(EMAIL_MARKER)
    if subject_at == -1 or email_at == -1 or email_at < subject_at:
        return None

    subject = text[subject_at + len(SUBJECT_MARKER):email_at].strip()
    body = text[email_at + len(EMAIL_MARKER):].strip()
    if not subject or not body:
        return None
    return subject, body


def parse_analysis_sections(text: str) -> List[AnalysisSection]:
    """
    Split an analysis into its numbered sections.

    Text before the first header lands in an untitled "Overview" section; the
    footer after a `---` line is kept as a "Note" section.
    """
    sections: List[AnalysisSection] = []
    title = "Overview"
    lines: List[str] = []

    def flush():
        body = "\n".join(lines).strip()
        if body:
            sections.append(AnalysisSection(title=title, body=body))

    for raw_line in (text or "").splitlines():
        line = raw_line.rstrip()
        header = SECTION_HEADER_RE.match(line.strip())
        if header:
            flush()
            title = header.group(1).strip()
            lines = []
        elif line.strip() == "---":
            flush()
            title = "Note"
            lines = []
        else:
            lines.append(line)
    flush()

    return sections


def build_email_payload(text: str) -> Optional[EmailPayload]:
    parsed = parse_email_text(text)
    if parsed is None:
        return None
    subject, body = parsed
    return EmailPayload(subject=subject, body=body)


def build_analysis_payload(text: str) -> AnalysisPayload:
    return AnalysisPayload(sections=parse_analysis_sections(text))


def strip_markdown(line: str) -> str:
    """Drop bold markers and a wrapping pair of emphasis markers."""
    line = BOLD_RE.sub(r"\1", line).strip()
    if len(line) > 1 and line[0] == line[-1] and line[0] in "*_":
        line = line[1:-1].strip()
    return line


def classify_line(line: str) -> Tuple[str, str]:
    """
    Classify one analysis line for document renderers.

    Returns (kind, text) where kind is one of
    "heading", "bullet", "rule", "blank", "text".
    """
    stripped = line.strip()
    if not stripped:
        return "blank", ""
    if stripped == "---":
        return "rule", ""
    if SECTION_HEADER_RE.match(stripped) or (
        stripped.startswith("**") and stripped.endswith("**") and len(stripped) > 4
    ):
        return "heading", stripped.strip("*").strip()
    if BULLET_RE.match(stripped):
        return "bullet", strip_markdown(BULLET_RE.sub("", stripped, count=1))
    return "text", strip_markdown(stripped)

"""
DOCX Export - render an analysis as a Word document.
"""

import base64
import io
from typing import Optional

from docx import Document

from ...models import ProfileData
from ..formatting import classify_line


def build_analysis_docx(
    analysis: str,
    profile: Optional[ProfileData] = None,
    linkedin_url: Optional[str] = None,
) -> bytes:
    """
    Build a .docx with a header block (name, headline, location, URL)
    followed by the analysis, one paragraph per line.
    """
    profile = profile or ProfileData()
    doc = Document()

    title = doc.add_heading(profile.name or "LinkedIn Profile", level=1)
    title.runs[0].font.bold = True

    details = [d for d in (profile.headline, profile.location, linkedin_url) if d]
    for detail in details:
        doc.add_paragraph(detail)
    if details:
        doc.add_paragraph()

    for line in analysis.splitlines():
        kind, text = classify_line(line)
        if kind == "heading":
            doc.add_heading(text, level=2)
        elif kind == "bullet":
            doc.add_paragraph(text, style="List Bullet")
        elif kind == "text":
            doc.add_paragraph(text)
        elif kind == "rule":
            doc.add_paragraph()

    buffer = io.BytesIO()
    doc.save(buffer)
    return buffer.getvalue()


def build_analysis_docx_base64(
    analysis: str,
    profile: Optional[ProfileData] = None,
    linkedin_url: Optional[str] = None,
) -> str:
    return base64.b64encode(build_analysis_docx(analysis, profile, linkedin_url)).decode("ascii")


"""
PDF Export - render an analysis as a simple PDF on the client side.

Uses fpdf2 core fonts (Helvetica), which only cover latin-1, so typographic
characters are folded to ASCII equivalents before rendering.
"""

from typing import Optional

from fpdf import FPDF

from ...models import ProfileData
from ..formatting import classify_line

_FOLD = str.maketrans({
    "•": "-",
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "–": "-",
    "—": "-",
    "…": "...",
})


def _pdf_text(text: str) -> str:
    return text.translate(_FOLD).encode("latin-1", "replace").decode("latin-1")


def build_analysis_pdf(
    analysis: str,
    profile: Optional[ProfileData] = None,
    linkedin_url: Optional[str] = None,
) -> bytes:
    profile = profile or ProfileData()
    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    pdf.set_font("Helvetica", style="B", size=16)
    pdf.multi_cell(0, 9, _pdf_text(profile.name or "LinkedIn Profile"), new_x="LMARGIN", new_y="NEXT")

    pdf.set_font("Helvetica", size=10)
    for detail in (profile.headline, profile.location, linkedin_url):
        if detail:
            pdf.multi_cell(0, 5, _pdf_text(detail), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(4)

    for line in analysis.splitlines():
        kind, text = classify_line(line)
        if kind == "heading":
            pdf.ln(2)
            pdf.set_font("Helvetica", style="B", size=12)
            pdf.multi_cell(0, 7, _pdf_text(text), new_x="LMARGIN", new_y="NEXT")
        elif kind == "bullet":
            pdf.set_font("Helvetica", size=11)
            pdf.multi_cell(0, 6, _pdf_text(f"  - {text}"), new_x="LMARGIN", new_y="NEXT")
        elif kind == "text":
            pdf.set_font("Helvetica", size=11)
            pdf.multi_cell(0, 6, _pdf_text(text), new_x="LMARGIN", new_y="NEXT")
        else:
            pdf.ln(3)

    return bytes(pdf.output())

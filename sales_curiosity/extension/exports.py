"""
Client-side exports of a finished analysis: plain text and PDF.

DOCX is rendered by the backend (see the orchestrator's export_docx).
"""

import base64
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..models import ProfileData
from ..services.export import build_analysis_pdf, export_filename

TEXT_MEDIA_TYPE = "text/plain"
PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


@dataclass
class ExportFile:
    filename: str
    content: bytes
    media_type: str

    def save(self, directory: Union[str, Path] = ".") -> Path:
        path = Path(directory) / self.filename
        path.write_bytes(self.content)
        print(f"[Export] Wrote {path}")
        return path


def export_text(analysis: str, profile: Optional[ProfileData] = None) -> Optional[ExportFile]:
    """Plain text download; nothing to export for an empty analysis."""
    if not analysis or not analysis.strip():
        return None
    name = profile.name if profile else None
    return ExportFile(export_filename(name, "txt"), analysis.encode("utf-8"), TEXT_MEDIA_TYPE)


def export_pdf(
    analysis: str,
    profile: Optional[ProfileData] = None,
    linkedin_url: Optional[str] = None,
) -> Optional[ExportFile]:
    if not analysis or not analysis.strip():
        return None
    name = profile.name if profile else None
    content = build_analysis_pdf(analysis, profile, linkedin_url)
    return ExportFile(export_filename(name, "pdf"), content, PDF_MEDIA_TYPE)


def docx_from_base64(docx_base64: str, filename: str) -> ExportFile:
    return ExportFile(filename, base64.b64decode(docx_base64), DOCX_MEDIA_TYPE)

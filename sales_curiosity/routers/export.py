"""
Export Router - Server-rendered document exports

Endpoints:
- POST /api/export/docx - Render an analysis as DOCX (base64 in JSON)
"""

from typing import Optional

from fastapi import APIRouter, HTTPException

from ..models import CamelModel, ProfileData
from ..services.export import build_analysis_docx_base64, export_filename

router = APIRouter()


class DocxExportRequest(CamelModel):
    analysis: str = ""
    profile_data: Optional[ProfileData] = None
    linkedin_url: Optional[str] = None


@router.post("/docx")
async def export_docx(body: DocxExportRequest):
    if not body.analysis.strip():
        raise HTTPException(status_code=400, detail="analysis is required")

    profile = body.profile_data or ProfileData()
    try:
        docx_base64 = build_analysis_docx_base64(body.analysis, profile, body.linkedin_url)
    except Exception as e:
        print(f"[Export] DOCX render failed: {e}", flush=True)
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "ok": True,
        "docxBase64": docx_base64,
        "filename": export_filename(profile.name, "docx"),
    }

# Export renderers (text, PDF, DOCX) for finished analyses
from .filenames import export_filename
from .docx_export import build_analysis_docx, build_analysis_docx_base64
from .pdf_export import build_analysis_pdf

__all__ = [
    "export_filename",
    "build_analysis_docx",
    "build_analysis_docx_base64",
    "build_analysis_pdf",
]

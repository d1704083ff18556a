"""Download filenames for exported analyses."""

import re
from typing import Optional

DEFAULT_PROFILE_NAME = "linkedin-profile"

_RESERVED = re.compile(r'[\\/:*?"<>|\x00-\x1f]')
_WHITESPACE = re.compile(r"\s+")


def export_filename(profile_name: Optional[str], ext: str) -> str:
    """`<profileName>-analysis.<ext>`, safe to write on any filesystem."""
    name = _RESERVED.sub("", profile_name or "").strip()
    name = _WHITESPACE.sub("-", name) or DEFAULT_PROFILE_NAME
    return f"{name}-analysis.{ext.lstrip('.')}"

"""
Run the full extension workflow against a running backend.

Extracts a saved profile page, asks the backend for an analysis (or email)
and writes the text/PDF/DOCX exports to ./exports.

Usage: python scripts/test_workflow.py profile.html [analyze|email] [api_base]
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sales_curiosity.extension import (
    AnalysisOrchestrator,
    BrowserTab,
    JSONFileStorage,
    MessageRelay,
    SessionStore,
    TabSource,
    WorkflowState,
)

OUTPUT_DIR = Path("exports")
PROFILE_URL = "https://www.linkedin.com/in/sample-profile/"


async def main():
    html_file = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("tests/fixtures/linkedin_profile.html")
    action = sys.argv[2] if len(sys.argv) > 2 else "analyze"

    session = SessionStore(JSONFileStorage(Path.home() / ".sales_curiosity" / "storage.json"))
    if len(sys.argv) > 3:
        session.set_api_base(sys.argv[3])

    tab = BrowserTab(PROFILE_URL, html=html_file.read_text(encoding="utf-8", errors="ignore"))
    orchestrator = AnalysisOrchestrator(
        TabSource(tab),
        MessageRelay(),
        session,
        on_change=lambda o: print(f"[{o.state.value}] {o.message[:80]}"),
    )

    print("=" * 60)
    print(f"WORKFLOW TEST ({action}) against {session.get_api_base()}")
    print("=" * 60)

    await orchestrator.run(action)

    if orchestrator.state != WorkflowState.DONE:
        print(f"\n{orchestrator.error}")
        return

    print("\n" + orchestrator.result.text)

    OUTPUT_DIR.mkdir(exist_ok=True)
    orchestrator.export_text().save(OUTPUT_DIR)
    orchestrator.export_pdf().save(OUTPUT_DIR)
    docx = await orchestrator.export_docx()
    docx.save(OUTPUT_DIR)


if __name__ == "__main__":
    asyncio.run(main())

"""Print the mock analysis and email for a sample profile (no OpenAI calls)."""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sales_curiosity.models import ProfileData, UserContext
from sales_curiosity.services.ai import mock_analysis, mock_email
from sales_curiosity.services.analysis import build_result

profile = ProfileData(name="Jane Doe", headline="CMO | AI-driven growth", location="NYC")
context = UserContext(about_me="I run partnerships at Acme", objectives="book intro calls with CMOs")

print("=" * 60)
print("MOCK ANALYSIS")
print("=" * 60)
text, payload = build_result("analyze", mock_analysis(profile))
print(text)
print(f"\nSections: {[s.title for s in payload.sections]}")

print("\n" + "=" * 60)
print("MOCK EMAIL")
print("=" * 60)
text, payload = build_result("email", mock_email(profile, context, "We met at SaaStr"))
print(f"Subject: {payload.subject}\n")
print(payload.body)

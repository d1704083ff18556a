# Services
#
# Organized by domain:
#   - db/         Database clients (Supabase)
#   - ai/         Prompts, mock responses, OpenAI client
#   - export/     DOCX/PDF rendering and export filenames
#
# analysis.py sits at the root and ties ai/ and db/ together

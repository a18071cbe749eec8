"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Look up businesses for a category near coordinates or in a named place.
- Fetch contact details and opening hours for a single business.
- Draft a short outreach email to a business.
"""

"""
LLM integration layer.

Responsibilities:
- Manage Groq API configuration and credentials.
- Build the enrichment prompt from a booth conversation transcript.
- Extract tags, skills, interests and sentiment as structured JSON.
- Fall back to a neutral record when the LLM is unavailable or returns invalid output.
"""

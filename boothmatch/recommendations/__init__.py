"""
Booth recommendation engine.

Responsibilities:
- Aggregate a user's interaction history into top tags, skills and interests.
- Drop booths the user has already visited.
- Score the remaining booths with fixed point weights and explain each match.
- Persist the top recommendations with a 24 hour expiry.
"""

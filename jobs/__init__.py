"""jobs/ -- Job posting persistence and lifecycle rules.

Layer rule: jobs/ may import from core/ and auth/ (for identity types).
It does NOT import from api/.
"""

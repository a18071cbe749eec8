"""
Favorites persistence.

Responsibilities:
- Keep a client's favorite businesses keyed by place id.
- Persist the whole set to a named storage slot after every change.
- Recover from an unreadable slot with an empty set and a visible warning.
"""

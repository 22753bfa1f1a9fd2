"""
Repositories package — data-access layer.

Each repository file handles all DB operations for one domain concern.
Repositories do NOT handle HTTP concerns or business logic beyond
basic data integrity.

Convention:
    - One file per concern (e.g., sequences.py, catalog.py)
    - All functions accept `AsyncSession` as the first argument
    - Use `flush()` internally; the session commit/rollback is handled
      by the caller (the `get_db` dependency or the sequence generator)
"""

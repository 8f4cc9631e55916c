"""circulation - an in-memory lending service for a catalog of items.

Tracks lendable items, registered borrowers and the borrow/return history,
enforcing per-borrower lending limits and per-item availability.
"""

__version__ = "0.1.0"

"""Pluggable catalog search."""

from .strategies import (
    STRATEGIES,
    SearchStrategy,
    by_contributor,
    by_identifier,
    by_title,
    get_strategy,
)

__all__ = [
    "STRATEGIES",
    "SearchStrategy",
    "by_contributor",
    "by_identifier",
    "by_title",
    "get_strategy",
]

"""Catalog search strategies.

A strategy is any function taking a catalog snapshot and a query string
and returning the matching items in their original order. The lending
service accepts one per search call, so new query kinds need no change
to the service.
"""

from typing import Callable, Sequence

from ..catalog.schemas import Item
from ..utils import normalize

SearchStrategy = Callable[[Sequence[Item], str], list[Item]]


def by_title(items: Sequence[Item], query: str) -> list[Item]:
    """Case-insensitive substring match on title."""
    term = normalize(query)
    return [item for item in items if term in item.title.lower()]


def by_contributor(items: Sequence[Item], query: str) -> list[Item]:
    """Case-insensitive substring match on contributor."""
    term = normalize(query)
    return [item for item in items if term in item.contributor.lower()]


def by_identifier(items: Sequence[Item], query: str) -> list[Item]:
    """Exact match on item identifier."""
    return [item for item in items if item.item_id == query.strip()]


STRATEGIES: dict[str, SearchStrategy] = {
    "title": by_title,
    "contributor": by_contributor,
    "identifier": by_identifier,
}


def get_strategy(name: str) -> SearchStrategy:
    """Look up a standard strategy by name.

    Raises:
        KeyError: If the name is unknown
    """
    try:
        return STRATEGIES[name.lower()]
    except KeyError:
        valid = ", ".join(STRATEGIES)
        raise KeyError(f"Unknown search strategy '{name}' (valid: {valid})") from None

"""Filter engine: visible subset of locations for a search query and a category."""
from typing import Any, Iterable, Mapping, Optional, Sequence

Location = Mapping[str, Any]


def _businesses(location: Location) -> list[Mapping[str, Any]]:
    businesses = location.get("businesses") or []
    if not isinstance(businesses, list):
        return []
    return [b for b in businesses if isinstance(b, Mapping)]


def _contains(value: Any, needle: str) -> bool:
    return isinstance(value, str) and needle in value.lower()


def normalize_query(query: Optional[str]) -> str:
    """Lower-cased query; whitespace-only counts as empty."""
    if not query or not query.strip():
        return ""
    return query.lower()


def has_active_filter(query: Optional[str], category: Optional[str]) -> bool:
    return bool(normalize_query(query)) or bool(category)


def matches_query(location: Location, query: str) -> bool:
    """Case-insensitive substring match on name, address, then any business name."""
    needle = normalize_query(query)
    if not needle:
        return True
    if _contains(location.get("name"), needle):
        return True
    if _contains(location.get("address"), needle):
        return True
    return any(_contains(b.get("name"), needle) for b in _businesses(location))


def matches_category(location: Location, category: Optional[str]) -> bool:
    if not category:
        return True
    return any(b.get("category") == category for b in _businesses(location))


def filter_locations(
    locations: Sequence[Location],
    query: Optional[str] = "",
    category: Optional[str] = "",
) -> list[Location]:
    """Locations passing both the text and the category filter, in input order."""
    return [
        loc for loc in locations
        if matches_query(loc, query or "") and matches_category(loc, category)
    ]


def categories(locations: Iterable[Location]) -> list[str]:
    """Sorted, de-duplicated business categories across all locations."""
    found: set[str] = set()
    for loc in locations:
        for business in _businesses(loc):
            category = business.get("category")
            if isinstance(category, str) and category:
                found.add(category)
    return sorted(found)

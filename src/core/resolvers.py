"""Category name resolution for spending breakdowns.

Pure functions that resolve user-friendly names (partial, case-insensitive)
to the exact category keys the backend reports. No I/O; they operate on
already-fetched data.
"""

from __future__ import annotations


class ResolverError(Exception):
    """Raised when an entity cannot be resolved by name."""

    def __init__(
        self,
        entity_type: str,
        query: str,
        available: list[str] | None = None,
    ):
        self.entity_type = entity_type
        self.query = query
        self.available = available or []
        detail = f"No {entity_type} found matching '{query}'."
        if self.available:
            detail += f" Available: {', '.join(self.available)}"
        super().__init__(detail)


def resolve_category(
    breakdown: dict[str, float],
    name: str,
) -> str:
    """Find a category key by name.

    Exact (case-insensitive) matches win over partial ones, so ``"Servicios"``
    is not shadowed by ``"Servicios Digitales"``.

    Raises :class:`ResolverError` if nothing matches.
    """
    query = name.strip().lower()
    if query:
        for key in breakdown:
            if key.lower() == query:
                return key
        for key in breakdown:
            if query in key.lower():
                return key
    raise ResolverError("category", name, available=sorted(breakdown))


def resolve_adjustments(
    breakdown: dict[str, float],
    adjustments: dict[str, float],
) -> dict[str, float]:
    """Map user-typed category names in *adjustments* onto breakdown keys.

    Two names resolving to the same category add up.
    """
    resolved: dict[str, float] = {}
    for name, pct in adjustments.items():
        key = resolve_category(breakdown, name)
        resolved[key] = resolved.get(key, 0.0) + pct
    return resolved

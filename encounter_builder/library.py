"""Filtering and search over template collections."""

from collections.abc import Iterable

from .models import AdversaryTemplate, EnvironmentTemplate


def _matches_search(search: str, *fields: str) -> bool:
    needle = search.strip().lower()
    if not needle:
        return True
    return any(needle in field.lower() for field in fields)


def filter_adversaries(
    templates: Iterable[AdversaryTemplate],
    tier: int | None = None,
    type: str | None = None,
    search: str = "",
    custom: bool | None = None,
) -> list[AdversaryTemplate]:
    """Filter by tier, type and custom flag; search name, description and motives.

    Type comparison is case-insensitive. Results are sorted by (tier, name).
    """
    results = []
    for template in templates:
        if tier is not None and template.tier != tier:
            continue
        if type and template.type.lower() != type.lower():
            continue
        if custom is not None and template.is_custom != custom:
            continue
        if not _matches_search(search, template.name, template.description, template.motives):
            continue
        results.append(template)
    return sorted(results, key=lambda t: (t.tier, t.name.lower()))


def filter_environments(
    templates: Iterable[EnvironmentTemplate],
    type: str | None = None,
    search: str = "",
    custom: bool | None = None,
) -> list[EnvironmentTemplate]:
    """Filter by type and custom flag; search name and description. Sorted by name."""
    results = []
    for template in templates:
        if type and template.type.lower() != type.lower():
            continue
        if custom is not None and template.is_custom != custom:
            continue
        if not _matches_search(search, template.name, template.description):
            continue
        results.append(template)
    return sorted(results, key=lambda t: t.name.lower())

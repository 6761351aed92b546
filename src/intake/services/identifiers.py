"""Deliverable identifier resolution.

Every deliverable ends up with a unique slug id.  The alias map returned
alongside lets the dependency linker resolve references written against any
spelling of a deliverable (raw id, title, lowercase forms, slug).
"""
from __future__ import annotations

from src.intake.services.deliverables import DraftDeliverable
from src.intake.services.normalizer import slugify


def _unique_slug(base: str, used: set[str]) -> str:
    if base not in used:
        return base
    suffix = 1
    while f"{base}-{suffix}" in used:
        suffix += 1
    return f"{base}-{suffix}"


def resolve_ids(
    deliverables: list[DraftDeliverable],
) -> tuple[list[DraftDeliverable], dict[str, str]]:
    """Assign unique ids in place and build the alias map.

    Collisions get ``-1``, ``-2``, ... appended in list order.  In the alias
    map resolved ids always map to themselves; any other spelling belongs to
    the first deliverable that claims it.
    """
    used: set[str] = set()
    for index, deliverable in enumerate(deliverables):
        base = slugify(deliverable.id or deliverable.title, f"deliverable-{index + 1}")
        deliverable.id = _unique_slug(base, used)
        used.add(deliverable.id)

    alias_map: dict[str, str] = {d.id: d.id for d in deliverables}
    for deliverable in deliverables:
        spellings = (
            deliverable.source_id,
            deliverable.source_id.lower(),
            deliverable.title,
            deliverable.title.lower(),
            slugify(deliverable.title, ""),
        )
        for spelling in spellings:
            if spelling:
                alias_map.setdefault(spelling, deliverable.id)
    return deliverables, alias_map

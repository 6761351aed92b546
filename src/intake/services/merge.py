"""Deep merge of caller data and embedded JSON fragments."""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def merge_objects(base: Mapping[str, Any], addition: Any) -> dict[str, Any]:
    """Return a new mapping with *addition* deep-merged over *base*.

    Rules per key of *addition*:
      - ``None`` never overwrites anything.
      - Lists concatenate (``base[k] + addition[k]``).
      - Mappings merge recursively.
      - Any other value overwrites.

    Neither argument is mutated.  A non-mapping *addition* yields a shallow
    copy of *base*.
    """
    merged: dict[str, Any] = dict(base)
    if not isinstance(addition, Mapping):
        return merged

    for key, value in addition.items():
        if value is None:
            continue
        if isinstance(value, list):
            current = merged.get(key)
            merged[key] = (list(current) if isinstance(current, list) else []) + list(value)
        elif isinstance(value, Mapping):
            current = merged.get(key)
            merged[key] = merge_objects(current if isinstance(current, Mapping) else {}, value)
        else:
            merged[key] = value
    return merged


def build_candidate(
    existing: Mapping[str, Any],
    fragments: list[dict[str, Any]],
) -> dict[str, Any]:
    """Fold *fragments* left to right, then apply *existing* last.

    Caller-supplied data is the final addition, so its scalars win over
    anything pasted into the prose.
    """
    accumulated: dict[str, Any] = {}
    for fragment in fragments:
        accumulated = merge_objects(accumulated, fragment)
    return merge_objects(accumulated, existing)

from __future__ import annotations

from uuid import UUID


def parse_id(raw: object) -> UUID | None:
    """Parse a client-supplied identifier; None when it is not a UUID."""
    if isinstance(raw, UUID):
        return raw
    if not isinstance(raw, str):
        return None
    try:
        return UUID(raw)
    except ValueError:
        return None

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional


def doc_to_dict(doc) -> Dict[str, Any]:
    """Snapshot -> plain dict with its document id under "id"."""
    return {"id": doc.id, **(doc.to_dict() or {})}


def first(query) -> Optional[Dict[str, Any]]:
    """First document of a query (as dict), or None."""
    for d in query.limit(1).stream():
        return doc_to_dict(d)
    return None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)

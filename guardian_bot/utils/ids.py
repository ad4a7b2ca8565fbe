from __future__ import annotations
import uuid

def new_id(prefix: str) -> str:
    # e.g. "hst-3f2a9c1b0d4e"
    return f"{prefix}-{uuid.uuid4().hex[:12]}"

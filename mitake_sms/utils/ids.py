from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional


def generate_client_id(now: Optional[datetime] = None) -> str:
    # YYYYMMDDHHMMSSmmm-xxxxxxxx: local time to the millisecond plus 8 hex chars of a uuid4.
    now = now or datetime.now()
    stamp = now.strftime("%Y%m%d%H%M%S") + f"{now.microsecond // 1000:03d}"
    return f"{stamp}-{uuid.uuid4().hex[:8]}"


def dest_hint(v: str, keep: int = 4) -> str:
    # Masked destination for log lines.
    v = (v or "").strip()
    if not v:
        return ""
    if len(v) <= keep:
        return v
    return f"...{v[-keep:]}"

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditEntry:
    """Immutable record of a privileged action."""

    action: AuditAction
    performed_by: int
    target_user_id: Optional[int]
    details: str = ""
    ip_address: str = ""
    created_at: Optional[datetime] = None
    audit_id: Optional[int] = None

from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role


@dataclass(frozen=True)
class Employee:
    """Domain entity: a directory entry.

    Note: credentials live with the identity layer, not here.
    """

    user_id: int
    name: str
    email: str
    role: Role
    department: str
    is_active: bool = True

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "department": self.department,
        }

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee


class EmployeeRepository(Protocol):
    """Directory of employees.

    "Active employees" means role=employee and is_active; admins are never
    counted or swept.
    """

    def get_by_id(self, user_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_active_employees(self) -> Sequence[Employee]:
        raise NotImplementedError

    def list_active_employee_ids(self) -> Sequence[int]:
        raise NotImplementedError

    def set_active(self, user_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

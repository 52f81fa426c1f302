"""Identity schemas."""

import uuid

from pydantic import BaseModel

from hrportal.common.constants import UserRole


class Actor(BaseModel):
    """The authenticated caller behind a lifecycle operation."""

    employee_id: uuid.UUID
    role: UserRole = UserRole.employee

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.admin

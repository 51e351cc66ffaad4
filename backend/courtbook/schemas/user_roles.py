# backend/courtbook/schemas/user_roles.py

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..constants import Role


class UserRoleAssign(BaseModel):
    role: Role
    email: Optional[str] = None


class UserRoleRead(BaseModel):
    identity_id: str
    email: Optional[str] = None
    role: Role
    assigned_at: datetime

    model_config = {"from_attributes": True}


class MeRead(BaseModel):
    identity_id: str
    email: Optional[str] = None
    role: Role

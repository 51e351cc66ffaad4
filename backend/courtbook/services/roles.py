# backend/courtbook/services/roles.py
"""
Role assignments (identity → customer | admin).

A missing assignment means customer. A failed lookup also falls back to
customer, so a store outage never grants admin rights.
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..constants import Role
from ..models import UserRoles as DBUserRoles
from ..schemas.user_roles import UserRoleRead
from .reservations.errors import PersistenceFailure

logger = logging.getLogger(__name__)


class RoleStore:

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def get_role(self, identity_id: str) -> Role:
        try:
            with self._session_factory() as db:
                obj = db.get(DBUserRoles, identity_id)
        except SQLAlchemyError as e:
            logger.error(f"Role lookup failed for {identity_id}, assuming customer: {e}")
            return Role.CUSTOMER

        if obj is None:
            return Role.CUSTOMER
        return Role(obj.role)

    def assign_role(self, identity_id: str, role: Role, email: str | None = None) -> UserRoleRead:
        """Create or replace the role of an identity."""
        try:
            with self._session_factory() as db:
                obj = db.get(DBUserRoles, identity_id)
                if obj is None:
                    obj = DBUserRoles(identity_id=identity_id)
                    db.add(obj)
                obj.role = Role(role).value
                if email is not None:
                    obj.email = email
                obj.assigned_at = datetime.now(timezone.utc)
                db.commit()
                db.refresh(obj)
                logger.info(f"Role {obj.role} assigned to {identity_id}")
                return UserRoleRead.model_validate(obj)
        except SQLAlchemyError as e:
            logger.error(f"Failed to assign role to {identity_id}: {e}")
            raise PersistenceFailure() from e

    def list_assignments(self) -> list[UserRoleRead]:
        try:
            with self._session_factory() as db:
                rows = db.query(DBUserRoles).order_by(DBUserRoles.identity_id).all()
                return [UserRoleRead.model_validate(row) for row in rows]
        except SQLAlchemyError as e:
            logger.error(f"Failed to list role assignments: {e}")
            raise PersistenceFailure() from e

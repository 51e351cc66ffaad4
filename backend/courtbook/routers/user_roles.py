# backend/courtbook/routers/user_roles.py
# Admin only. No DELETE: assign "customer" to revoke admin.

from fastapi import APIRouter, Depends

from ..context import AppContext
from ..dependencies import get_ctx, require_admin
from ..schemas.user_roles import UserRoleAssign, UserRoleRead
from ..services.sessions import AdminSession

router = APIRouter(prefix="/user_roles", tags=["user_roles"])


@router.get("/", response_model=list[UserRoleRead])
def list_user_roles(
    _: AdminSession = Depends(require_admin),
    ctx: AppContext = Depends(get_ctx),
):
    return ctx.roles.list_assignments()


@router.put("/{identity_id}", response_model=UserRoleRead)
def assign_user_role(
    identity_id: str,
    data: UserRoleAssign,
    _: AdminSession = Depends(require_admin),
    ctx: AppContext = Depends(get_ctx),
):
    return ctx.roles.assign_role(identity_id, data.role, email=data.email)

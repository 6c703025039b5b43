"""
FastAPI router for user management endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from common.utils import unwrap
from auth_app.dependencies import require_auth, get_user_service, get_session_store
from auth_app.middleware.auth import AuthContext
from auth_app.models.identity import IdentityPatch, Role
from auth_app.services.auth.session_store import SessionStore
from auth_app.services.user.user_service import UserService
from auth_app.schemas.user import (
    ToggleBlockRequest,
    SoftDeleteRequest,
    RestoreRequest,
    SetRoleRequest,
)
from auth_app.pipelines import user as pipelines

router = APIRouter(prefix="/users", tags=["users"])


@router.get("")
async def list_users(
    user_service: Annotated[UserService, Depends(get_user_service)],
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
):
    """List regular users, paginated."""
    result = await pipelines.list_users_pipeline(
        user_service=user_service,
        page=page,
        limit=limit,
        role=Role.USER.value,
    )

    return unwrap(result)


@router.get("/search/{searchKey}")
async def search_users(
    searchKey: str,
    auth: Annotated[AuthContext, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Search users by username or name."""
    result = await pipelines.search_users_pipeline(
        user_service=user_service,
        search_key=searchKey,
    )

    return unwrap(result)


@router.put("")
async def update_profile(
    body: IdentityPatch,
    auth: Annotated[AuthContext, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Update the caller's profile fields."""
    result = await pipelines.update_profile_pipeline(
        user_service=user_service,
        user_id=auth.user_id,
        patch=body,
    )

    return unwrap(result)


@router.patch("/toggle-block")
async def toggle_block(
    body: ToggleBlockRequest,
    auth: Annotated[AuthContext, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Block or unblock a user (admin)."""
    result = await pipelines.toggle_block_pipeline(
        user_service=user_service,
        actor=auth.user,
        user_id=body.userId,
        block=body.block,
    )

    return unwrap(result)


@router.patch("/soft-delete")
async def soft_delete(
    body: SoftDeleteRequest,
    auth: Annotated[AuthContext, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Soft-delete your own account, or another user's (admin)."""
    result = await pipelines.soft_delete_pipeline(
        user_service=user_service,
        actor=auth.user,
        user_id=body.userId,
    )

    return unwrap(result)


@router.patch("/restore")
async def restore(
    body: RestoreRequest,
    auth: Annotated[AuthContext, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Restore a soft-deleted user (admin)."""
    result = await pipelines.restore_pipeline(
        user_service=user_service,
        actor=auth.user,
        user_id=body.userId,
    )

    return unwrap(result)


@router.patch("/role")
async def set_role(
    body: SetRoleRequest,
    auth: Annotated[AuthContext, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    """Change a user's role (super-admin)."""
    result = await pipelines.set_role_pipeline(
        user_service=user_service,
        actor=auth.user,
        user_id=body.userId,
        role=body.role,
    )

    return unwrap(result)


@router.delete("/{userId}")
async def delete_account(
    userId: str,
    auth: Annotated[AuthContext, Depends(require_auth)],
    user_service: Annotated[UserService, Depends(get_user_service)],
    session_store: Annotated[SessionStore, Depends(get_session_store)],
):
    """Permanently delete a user and all of their sessions (admin)."""
    result = await pipelines.delete_account_pipeline(
        user_service=user_service,
        session_store=session_store,
        actor=auth.user,
        user_id=userId,
    )

    return unwrap(result)

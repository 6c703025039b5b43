"""
User management pipeline functions.

Listing, search, profile edits and the privileged status changes
(block, soft-delete, restore, hard delete, role).
"""

import logging
from typing import Optional, Dict, Any

from common.utils.responses import message_response, list_response
from common.utils.result import Ok, Err, ErrorKind, Result, flow_boundary
from auth_app.models.identity import IdentityPatch, Role, to_public_user, to_profile, is_admin
from auth_app.services.auth.session_store import SessionStore
from auth_app.services.user.user_service import UserService

logger = logging.getLogger(__name__)

USER_NOT_FOUND = "User not found."
ACCESS_DENIED = "You are not allowed to perform this action."
SOFT_DELETED = "User has been deleted temporarily."
RESTORED = "User has been restored."
HARD_DELETED = "User has been deleted permanently."


def _require_admin(actor: dict) -> Optional[Err]:
    if not is_admin(actor):
        logger.warning(f"Non-admin {actor.get('_id')} attempted a privileged action")
        return Err(ErrorKind.AUTHORIZATION, ACCESS_DENIED, "ACCESS_DENIED")
    return None


def _not_found() -> Err:
    return Err(ErrorKind.NOT_FOUND, USER_NOT_FOUND, "USER_NOT_FOUND")


@flow_boundary
async def list_users_pipeline(
    user_service: UserService,
    page: int = 1,
    limit: int = 10,
    role: str = Role.USER.value,
) -> Result[Dict[str, Any]]:
    """
    Paginated listing of users with one role.

    Returns:
        Ok({"data", "count", "page", "limit"})
    """
    users = await user_service.list_users(page=page, limit=limit, role=role)

    data = [to_public_user(u) for u in users]

    return Ok(list_response(data, page=page, limit=limit))


@flow_boundary
async def search_users_pipeline(
    user_service: UserService,
    search_key: str,
) -> Result[Dict[str, Any]]:
    """Case-insensitive search on username or name."""
    users = await user_service.search_users(search_key)

    data = [to_public_user(u) for u in users]

    return Ok(list_response(data))


@flow_boundary
async def update_profile_pipeline(
    user_service: UserService,
    user_id: str,
    patch: IdentityPatch,
) -> Result[Dict[str, Any]]:
    """
    Apply a profile patch to the caller's own identity.

    An empty patch returns the current profile unchanged.
    """
    update = patch.to_update()
    if update:
        user = await user_service.update_profile(user_id, patch)
    else:
        user = await user_service.get_user_by_id(user_id)

    if not user:
        return _not_found()

    return Ok(to_profile(user))


@flow_boundary
async def toggle_block_pipeline(
    user_service: UserService,
    actor: dict,
    user_id: str,
    block: bool,
) -> Result[Dict[str, Any]]:
    """Block or unblock another user. Admins only."""
    rejected = _require_admin(actor)
    if rejected:
        return rejected

    user = await user_service.set_blocked(user_id, block)
    if not user:
        return _not_found()

    logger.info(f"User {user_id} {'blocked' if block else 'unblocked'} by {actor['_id']}")

    return Ok(to_public_user(user))


@flow_boundary
async def soft_delete_pipeline(
    user_service: UserService,
    actor: dict,
    user_id: Optional[str] = None,
) -> Result[Dict[str, Any]]:
    """
    Soft-delete an identity.

    Without ``user_id`` the caller deletes their own account; deleting
    someone else requires an admin role.
    """
    target_id = user_id or actor["_id"]

    if target_id != actor["_id"]:
        rejected = _require_admin(actor)
        if rejected:
            return rejected

    user = await user_service.set_deleted(target_id, True)
    if not user:
        return _not_found()

    logger.info(f"User {target_id} soft-deleted by {actor['_id']}")

    return Ok(message_response(SOFT_DELETED))


@flow_boundary
async def restore_pipeline(
    user_service: UserService,
    actor: dict,
    user_id: str,
) -> Result[Dict[str, Any]]:
    """Undo a soft delete. Admins only."""
    rejected = _require_admin(actor)
    if rejected:
        return rejected

    user = await user_service.set_deleted(user_id, False)
    if not user:
        return _not_found()

    logger.info(f"User {user_id} restored by {actor['_id']}")

    return Ok(message_response(RESTORED))


@flow_boundary
async def delete_account_pipeline(
    user_service: UserService,
    session_store: SessionStore,
    actor: dict,
    user_id: str,
) -> Result[Dict[str, Any]]:
    """
    Permanently remove an identity together with all of its sessions.
    Admins only.
    """
    rejected = _require_admin(actor)
    if rejected:
        return rejected

    if not await user_service.delete_user(user_id):
        return _not_found()

    revoked = await session_store.delete_all(user_id)

    logger.info(f"User {user_id} deleted by {actor['_id']} ({revoked} session(s) revoked)")

    return Ok(message_response(HARD_DELETED))


@flow_boundary
async def set_role_pipeline(
    user_service: UserService,
    actor: dict,
    user_id: str,
    role: Role,
) -> Result[Dict[str, Any]]:
    """Change a user's role. Only a super-admin may do this."""
    if actor.get("role") != Role.SUPER_ADMIN.value:
        logger.warning(f"User {actor.get('_id')} attempted to change a role")
        return Err(ErrorKind.AUTHORIZATION, ACCESS_DENIED, "ACCESS_DENIED")

    user = await user_service.set_role(user_id, role)
    if not user:
        return _not_found()

    logger.info(f"Role of user {user_id} set to {Role(role).value} by {actor['_id']}")

    return Ok(to_public_user(user))

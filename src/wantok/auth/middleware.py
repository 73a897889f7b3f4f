"""Authentication helpers — the external identity provider stores the user id in the session."""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, Any

from fastapi import HTTPException, Request, status

from wantok.database.repositories.users import UserRepository
from wantok.models.user import Permission, User

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Coroutine


def get_session_user(request: Request) -> dict[str, Any] | None:
    """Extract the authenticated session principal, if present."""
    return request.session.get("user") if hasattr(request, "session") else None


def require_authenticated_user(request: Request) -> dict[str, Any]:
    """Return the session principal or raise HTTP 401."""
    user = get_session_user(request)
    if not user or not user.get("id"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


def require_auth(
    func: Callable[..., Coroutine[object, object, object]],
) -> Callable[..., Coroutine[object, object, object]]:
    """Ensure the request has an authenticated session."""

    @wraps(func)
    async def wrapper(request: Request, *args: object, **kwargs: object) -> object:
        require_authenticated_user(request)
        return await func(request, *args, **kwargs)

    return wrapper


async def get_current_user(request: Request) -> User:
    """Load the acting user's profile for the authenticated session."""
    principal = require_authenticated_user(request)
    repo = UserRepository(request.app.state.cosmos.database)
    user = await repo.get_user(str(principal["id"]))
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is missing or deactivated",
        )
    return user


def require_permission(
    permission: Permission,
) -> Callable[[Request], Awaitable[User]]:
    """Build a dependency that loads the user and checks one permission."""

    async def dependency(request: Request) -> User:
        user = await get_current_user(request)
        if not user.has_permission(permission):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Missing permission {permission}",
            )
        return user

    return dependency

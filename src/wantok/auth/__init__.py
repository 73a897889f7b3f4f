"""Session authentication and permission gates."""

from wantok.auth.middleware import get_current_user, require_auth, require_permission

__all__ = ["get_current_user", "require_auth", "require_permission"]

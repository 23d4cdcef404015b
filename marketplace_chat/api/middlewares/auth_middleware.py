# marketplace_chat/api/middlewares/auth_middleware.py
from functools import wraps
from typing import Any, Callable, TypeVar

from flask import g, request

from marketplace_chat.api.dependencies import get_container
from marketplace_chat.core.exceptions import ForbiddenError, UnauthorizedError
from marketplace_chat.core.roles import Role
from marketplace_chat.entities.session_identity import SessionIdentity

F = TypeVar("F", bound=Callable[..., Any])


def _get_session_token() -> str:
    # 1) Authorization: Bearer <token>
    auth = request.headers.get("Authorization", "")
    parts = auth.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]

    # 2) session cookie
    token = request.cookies.get(get_container().settings.session_cookie_name)
    if token:
        return token

    raise UnauthorizedError("Unauthorized")


def current_identity() -> SessionIdentity:
    identity = getattr(g, "auth", None)
    if identity is None:
        raise UnauthorizedError("Unauthorized")
    return identity


def require_auth(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        token = _get_session_token()
        g.auth = get_container().session_validator.validate(token)
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def require_roles(*allowed_roles: Role, message: str = "Access denied"):
    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):
            identity = current_identity()
            if identity.role not in allowed_roles:
                raise ForbiddenError(message)
            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator

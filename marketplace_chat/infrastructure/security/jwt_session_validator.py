# marketplace_chat/infrastructure/security/jwt_session_validator.py
import logging

from marketplace_chat.core.exceptions import UnauthorizedError
from marketplace_chat.core.roles import Role
from marketplace_chat.entities.session_identity import SessionIdentity
from marketplace_chat.infrastructure.security.jwt_provider import JwtProvider

logger = logging.getLogger(__name__)


class JwtSessionValidator:
    def __init__(self, jwt_provider: JwtProvider) -> None:
        self._jwt = jwt_provider

    def validate(self, token: str) -> SessionIdentity:
        if not token:
            raise UnauthorizedError("Unauthorized")

        claims = self._jwt.decode(token)
        if claims.get("typ") != "access":
            raise UnauthorizedError("Invalid session")

        role = Role.from_claim(claims.get("role"))
        if role is None:
            logger.warning("Rejected token with unknown role for sub=%s", claims.get("sub"))
            raise UnauthorizedError("Invalid session")

        return SessionIdentity(user_id=str(claims["sub"]), role=role, session_id=str(claims["jti"]))

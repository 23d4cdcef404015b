# marketplace_chat/infrastructure/security/db_session_validator.py
import hashlib
import logging

from marketplace_chat.core.clock import utcnow
from marketplace_chat.core.exceptions import UnauthorizedError
from marketplace_chat.core.roles import Role
from marketplace_chat.entities.session_identity import SessionIdentity
from marketplace_chat.infrastructure.database.session import Database
from marketplace_chat.repositories.session_repository import SessionRepository

logger = logging.getLogger(__name__)


def hash_token(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class DbSessionValidator:
    """Looks the session cookie up in the sessions table (token stored as sha256)."""

    def __init__(self, database: Database) -> None:
        self._database = database

    def validate(self, token: str) -> SessionIdentity:
        if not token:
            raise UnauthorizedError("Unauthorized")

        with self._database.session() as session:
            row = SessionRepository(session).get_active_by_token_hash(
                token_hash=hash_token(token), now=utcnow()
            )
            if row is None:
                raise UnauthorizedError("Invalid session")

            role = Role.from_claim(row.user_role)
            if role is None:
                logger.warning("Session %s carries unknown role %r", row.id, row.user_role)
                raise UnauthorizedError("Invalid session")

            return SessionIdentity(user_id=str(row.user_id), role=role, session_id=row.id)

# marketplace_chat/repositories/session_repository.py
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from marketplace_chat.core.base_repository import BaseRepository
from marketplace_chat.infrastructure.database.models.session_model import SessionModel


class SessionRepository(BaseRepository[SessionModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def get_active_by_token_hash(self, *, token_hash: str, now: datetime) -> SessionModel | None:
        stmt = select(SessionModel).where(
            SessionModel.token_hash == token_hash,
            SessionModel.expires_at > now,
        )
        return self._session.execute(stmt).scalar_one_or_none()

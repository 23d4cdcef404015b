# marketplace_chat/repositories/message_repository.py
from datetime import datetime

from sqlalchemy import and_, or_, select, update
from sqlalchemy.orm import Session

from marketplace_chat.core.base_repository import BaseRepository
from marketplace_chat.core.pagination import MessageCursor
from marketplace_chat.core.roles import Side
from marketplace_chat.infrastructure.database.models.message_model import MessageModel


class MessageRepository(BaseRepository[MessageModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def add(self, model: MessageModel) -> MessageModel:
        self._session.add(model)
        self._session.flush()
        return model

    def list_page(
        self,
        *,
        conversation_id: str,
        limit: int,
        after: MessageCursor | None = None,
    ) -> list[MessageModel]:
        """Chronological (created_at, seq) order, `limit` rows past `after`."""
        stmt = select(MessageModel).where(MessageModel.conversation_id == conversation_id)

        if after is not None:
            stmt = stmt.where(
                or_(
                    MessageModel.created_at > after.created_at,
                    and_(
                        MessageModel.created_at == after.created_at,
                        MessageModel.seq > after.seq,
                    ),
                )
            )

        stmt = stmt.order_by(MessageModel.created_at.asc(), MessageModel.seq.asc()).limit(limit)
        return list(self._session.execute(stmt).scalars().all())

    def mark_read_for_recipient(self, *, conversation_id: str, reader_side: Side, at: datetime) -> int:
        """Marks every unread message sent by the other side as read."""
        stmt = (
            update(MessageModel)
            .where(
                MessageModel.conversation_id == conversation_id,
                MessageModel.sender_role == reader_side.other.value,
                MessageModel.is_read.is_(False),
            )
            .values(is_read=True, read_at=at, updated_at=at)
            .execution_options(synchronize_session="fetch")
        )
        res = self._session.execute(stmt)
        return res.rowcount or 0

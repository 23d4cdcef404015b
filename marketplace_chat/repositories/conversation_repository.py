# marketplace_chat/repositories/conversation_repository.py
from datetime import datetime
from typing import Iterable, assert_never

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from marketplace_chat.core.base_repository import BaseRepository
from marketplace_chat.core.messaging_types import ConversationStatus
from marketplace_chat.core.pagination import ConversationCursor
from marketplace_chat.core.roles import Side
from marketplace_chat.infrastructure.database.models.conversation_model import ConversationModel


def _participant_column(side: Side):
    match side:
        case Side.BUYER:
            return ConversationModel.buyer_id
        case Side.VENDOR:
            return ConversationModel.vendor_id
        case _:
            assert_never(side)


def _unread_column(side: Side):
    match side:
        case Side.BUYER:
            return ConversationModel.unread_count_buyer
        case Side.VENDOR:
            return ConversationModel.unread_count_vendor
        case _:
            assert_never(side)


class ConversationRepository(BaseRepository[ConversationModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def add(self, model: ConversationModel) -> ConversationModel:
        self._session.add(model)
        self._session.flush()
        return model

    def _by_id_stmt(self, conversation_id: str, *, for_update: bool):
        stmt = select(ConversationModel).where(ConversationModel.id == conversation_id)
        if for_update:
            # row lock serializes senders and readers of the same conversation
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        return stmt

    def get_by_id(self, conversation_id: str, *, for_update: bool = False) -> ConversationModel | None:
        stmt = self._by_id_stmt(conversation_id, for_update=for_update)
        return self._session.execute(stmt).scalar_one_or_none()

    def get_for_participant(
        self,
        conversation_id: str,
        *,
        side: Side,
        user_id: str,
        for_update: bool = False,
    ) -> ConversationModel | None:
        stmt = self._by_id_stmt(conversation_id, for_update=for_update)
        stmt = stmt.where(_participant_column(side) == user_id)
        return self._session.execute(stmt).scalar_one_or_none()

    def list_page(
        self,
        *,
        limit: int,
        side: Side | None = None,
        user_id: str | None = None,
        status: ConversationStatus | None = None,
        hide_closed: bool = False,
        after: ConversationCursor | None = None,
    ) -> list[ConversationModel]:
        """Most recently active first; `limit` rows past `after`."""
        stmt = select(ConversationModel)

        if side is not None:
            stmt = stmt.where(_participant_column(side) == user_id)

        if status is not None:
            stmt = stmt.where(ConversationModel.status == status.value)
        elif hide_closed:
            stmt = stmt.where(ConversationModel.status != ConversationStatus.CLOSED.value)

        if after is not None:
            stmt = stmt.where(
                or_(
                    ConversationModel.last_message_at < after.last_message_at,
                    and_(
                        ConversationModel.last_message_at == after.last_message_at,
                        ConversationModel.id < after.conversation_id,
                    ),
                )
            )

        stmt = stmt.order_by(
            ConversationModel.last_message_at.desc(),
            ConversationModel.id.desc(),
        ).limit(limit)
        return list(self._session.execute(stmt).scalars().all())

    def set_side_flags(
        self,
        conv: ConversationModel,
        *,
        side: Side,
        is_pinned: bool | None,
        is_muted: bool | None,
        at: datetime,
    ) -> bool:
        """Writes only the columns that belong to `side`. Returns True if anything changed."""
        changed = False
        match side:
            case Side.BUYER:
                if is_pinned is not None and conv.is_pinned_buyer != is_pinned:
                    conv.is_pinned_buyer = is_pinned
                    changed = True
                if is_muted is not None and conv.is_muted_buyer != is_muted:
                    conv.is_muted_buyer = is_muted
                    changed = True
            case Side.VENDOR:
                if is_pinned is not None and conv.is_pinned_vendor != is_pinned:
                    conv.is_pinned_vendor = is_pinned
                    changed = True
                if is_muted is not None and conv.is_muted_vendor != is_muted:
                    conv.is_muted_vendor = is_muted
                    changed = True
            case _:
                assert_never(side)

        if changed:
            conv.updated_at = at
            self._session.flush()
        return changed

    def transition(
        self,
        conv: ConversationModel,
        *,
        status: ConversationStatus,
        at: datetime,
        **fields,
    ) -> None:
        conv.status = status.value
        conv.updated_at = at
        for name, value in fields.items():
            setattr(conv, name, value)
        self._session.flush()

    def record_message(
        self,
        conv: ConversationModel,
        *,
        message_id: str,
        sender_id: str,
        recipient_side: Side,
        preview: str,
        at: datetime,
    ) -> int:
        """
        Bumps the conversation for a new message and returns the message's seq.

        Counters are incremented in SQL (col = col + 1); the caller holds the
        row lock taken by get_for_participant(for_update=True).
        """
        conv.last_message_seq = ConversationModel.last_message_seq + 1
        match recipient_side:
            case Side.BUYER:
                conv.unread_count_buyer = ConversationModel.unread_count_buyer + 1
            case Side.VENDOR:
                conv.unread_count_vendor = ConversationModel.unread_count_vendor + 1
            case _:
                assert_never(recipient_side)

        conv.last_message_id = message_id
        conv.last_message_content = preview
        conv.last_message_sender_id = sender_id
        conv.last_message_at = at
        conv.updated_at = at
        self._session.flush()

        # expression attributes are expired by the flush, this reloads them
        return int(conv.last_message_seq)

    def reset_unread(self, conv: ConversationModel, *, side: Side) -> None:
        match side:
            case Side.BUYER:
                conv.unread_count_buyer = 0
            case Side.VENDOR:
                conv.unread_count_vendor = 0
            case _:
                assert_never(side)
        self._session.flush()

    def sum_unread(self, *, side: Side, user_id: str, statuses: Iterable[ConversationStatus]) -> int:
        stmt = (
            select(func.coalesce(func.sum(_unread_column(side)), 0))
            .where(
                _participant_column(side) == user_id,
                ConversationModel.status.in_([s.value for s in statuses]),
            )
        )
        return int(self._session.execute(stmt).scalar_one())

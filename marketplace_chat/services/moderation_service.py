# marketplace_chat/services/moderation_service.py
"""Admin-side transitions of the conversation state machine (flag, unflag, close)."""
from __future__ import annotations

import logging

from marketplace_chat.core.audit.audit_actions import AuditAction
from marketplace_chat.core.audit.audit_entities import AuditEntity
from marketplace_chat.core.clock import utcnow
from marketplace_chat.core.exceptions import ConflictError, ForbiddenError, InvalidInputError, NotFoundError
from marketplace_chat.core.interfaces.conversation_notifier import (
    ConversationNotifier,
    ConversationUpdatedEvent,
)
from marketplace_chat.core.messaging_types import ConversationStatus
from marketplace_chat.core.pagination import ConversationCursor, Page, clamp_limit
from marketplace_chat.core.roles import Role
from marketplace_chat.infrastructure.database.models.audit_log_model import AuditLogModel
from marketplace_chat.infrastructure.database.models.conversation_model import ConversationModel
from marketplace_chat.repositories.conversation_repository import ConversationRepository
from marketplace_chat.services.audit_service import AuditService
from marketplace_chat.services.conversation_service import conversation_page

logger = logging.getLogger(__name__)


class ModerationService:
    def __init__(
        self,
        conversation_repository: ConversationRepository,
        *,
        audit: AuditService,
        notifier: ConversationNotifier,
        page_size: int = 20,
        max_page_size: int = 100,
    ) -> None:
        self._repo = conversation_repository
        self._audit = audit
        self._notifier = notifier
        self._page_size = page_size
        self._max_page_size = max_page_size

    def _ensure_admin(self, role: Role) -> None:
        if role is not Role.ADMIN:
            raise ForbiddenError("Admin access required")

    def _get_locked(self, conversation_id: str) -> ConversationModel:
        conv = self._repo.get_by_id(conversation_id, for_update=True)
        if conv is None:
            raise NotFoundError("Conversation not found")
        return conv

    def _after_transition(self, conv: ConversationModel, *, admin_id: str, action: str, details: str) -> None:
        self._audit.log(
            entity_name=AuditEntity.CONVERSATION,
            entity_id=conv.id,
            action_name=action,
            user_id=admin_id,
            user_role=Role.ADMIN.value,
            details=details,
        )
        logger.info("Conversation %s -> %s by admin_id=%s", conv.id, conv.status, admin_id)
        self._notifier.notify_conversation_updated(
            ConversationUpdatedEvent(
                conversation_id=conv.id,
                buyer_id=conv.buyer_id,
                vendor_id=conv.vendor_id,
                status=conv.status,
                changed_by=admin_id,
                updated_at_iso=utcnow().isoformat(),
            )
        )

    def list_flagged(
        self,
        *,
        role: Role,
        limit: int | None = None,
        cursor: str | None = None,
    ) -> Page[ConversationModel]:
        self._ensure_admin(role)
        limit = clamp_limit(limit, default=self._page_size, maximum=self._max_page_size)
        after = ConversationCursor.decode(cursor) if cursor else None

        rows = self._repo.list_page(limit=limit + 1, status=ConversationStatus.FLAGGED, after=after)
        return conversation_page(rows, limit)

    def flag(self, *, conversation_id: str, admin_id: str, role: Role, reason: str) -> ConversationModel:
        self._ensure_admin(role)
        if not reason or not reason.strip():
            raise InvalidInputError("A reason is required to flag a conversation")
        conv = self._get_locked(conversation_id)
        if conv.status != ConversationStatus.ACTIVE.value:
            raise ConflictError("Only active conversations can be flagged")

        now = utcnow()
        self._repo.transition(
            conv,
            status=ConversationStatus.FLAGGED,
            at=now,
            flagged_at=now,
            flagged_by=admin_id,
            flag_reason=reason.strip(),
        )
        self._after_transition(
            conv, admin_id=admin_id, action=AuditAction.CONVERSATION_FLAGGED, details=f"Flagged: {reason.strip()}"
        )
        return conv

    def unflag(self, *, conversation_id: str, admin_id: str, role: Role, notes: str) -> ConversationModel:
        self._ensure_admin(role)
        if not notes or not notes.strip():
            raise InvalidInputError("Review notes are required")
        conv = self._get_locked(conversation_id)
        if conv.status != ConversationStatus.FLAGGED.value:
            raise ConflictError("Conversation is not flagged")

        now = utcnow()
        self._repo.transition(
            conv,
            status=ConversationStatus.ACTIVE,
            at=now,
            reviewed_at=now,
            reviewed_by=admin_id,
            moderator_notes=notes.strip(),
        )
        self._after_transition(
            conv,
            admin_id=admin_id,
            action=AuditAction.CONVERSATION_UNFLAGGED,
            details=f"Unflagged with notes: {notes.strip()}",
        )
        return conv

    def close(
        self,
        *,
        conversation_id: str,
        admin_id: str,
        role: Role,
        notes: str | None = None,
    ) -> ConversationModel:
        self._ensure_admin(role)
        conv = self._get_locked(conversation_id)
        if conv.status not in (ConversationStatus.ACTIVE.value, ConversationStatus.FLAGGED.value):
            raise ConflictError(f"A {conv.status} conversation cannot be closed")

        now = utcnow()
        fields = {"closed_at": now, "closed_by": admin_id}
        if notes and notes.strip():
            fields["moderator_notes"] = notes.strip()
        self._repo.transition(conv, status=ConversationStatus.CLOSED, at=now, **fields)

        self._after_transition(
            conv, admin_id=admin_id, action=AuditAction.CONVERSATION_CLOSED, details="Conversation closed"
        )
        return conv

    def audit_trail(self, *, conversation_id: str, role: Role, limit: int = 100) -> list[AuditLogModel]:
        self._ensure_admin(role)
        if self._repo.get_by_id(conversation_id) is None:
            raise NotFoundError("Conversation not found")
        return self._audit.list_for_entity(
            entity_name=AuditEntity.CONVERSATION, entity_id=conversation_id, limit=limit
        )

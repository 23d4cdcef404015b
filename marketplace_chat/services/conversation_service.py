# marketplace_chat/services/conversation_service.py
from __future__ import annotations

import logging
from typing import Any

from marketplace_chat.core.audit.audit_actions import AuditAction
from marketplace_chat.core.audit.audit_entities import AuditEntity
from marketplace_chat.core.clock import as_utc, new_id, utcnow
from marketplace_chat.core.exceptions import ForbiddenError, NotFoundError
from marketplace_chat.core.interfaces.conversation_notifier import (
    ConversationCreatedEvent,
    ConversationNotifier,
    ConversationUpdatedEvent,
)
from marketplace_chat.core.messaging_types import ConversationContext, ConversationStatus
from marketplace_chat.core.pagination import ConversationCursor, Page, clamp_limit
from marketplace_chat.core.roles import Role, participant_side
from marketplace_chat.infrastructure.database.models.conversation_model import ConversationModel
from marketplace_chat.repositories.conversation_repository import ConversationRepository
from marketplace_chat.repositories.directory_repository import DirectoryRepository
from marketplace_chat.services.audit_service import AuditService

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class ConversationService:
    def __init__(
        self,
        conversation_repository: ConversationRepository,
        directory_repository: DirectoryRepository,
        *,
        audit: AuditService,
        notifier: ConversationNotifier,
        page_size: int = DEFAULT_PAGE_SIZE,
        max_page_size: int = MAX_PAGE_SIZE,
    ) -> None:
        self._repo = conversation_repository
        self._directory = directory_repository
        self._audit = audit
        self._notifier = notifier
        self._page_size = page_size
        self._max_page_size = max_page_size

    def _iso(self, dt) -> str | None:
        if not dt:
            return None
        return as_utc(dt).isoformat()

    def _pack_conversation(self, conv: ConversationModel) -> dict[str, Any]:
        # payload 100% JSON-safe for the realtime layer
        return {
            "id": conv.id,
            "buyer_id": conv.buyer_id,
            "buyer_name": conv.buyer_name,
            "vendor_id": conv.vendor_id,
            "vendor_name": conv.vendor_name,
            "vendor_business_name": conv.vendor_business_name,
            "context": conv.context,
            "product_id": conv.product_id,
            "product_name": conv.product_name,
            "order_id": conv.order_id,
            "order_number": conv.order_number,
            "status": conv.status,
            "created_at": self._iso(conv.created_at),
        }

    def create_conversation(
        self,
        *,
        buyer_id: str,
        role: Role,
        vendor_id: str,
        context: ConversationContext = ConversationContext.GENERAL,
        product_id: str | None = None,
        order_id: str | None = None,
    ) -> ConversationModel:
        if role is not Role.BUYER:
            raise ForbiddenError("Only buyers can initiate conversations")

        vendor = self._directory.get_vendor(vendor_id)
        if vendor is None:
            raise NotFoundError("Vendor not found")

        buyer = self._directory.get_user(buyer_id)
        now = utcnow()

        model = ConversationModel(
            id=new_id("conv"),
            buyer_id=buyer_id,
            buyer_name=buyer.name if buyer else "Buyer",
            buyer_avatar=buyer.avatar if buyer else None,
            vendor_id=vendor.id,
            vendor_name=vendor.name,
            vendor_avatar=vendor.avatar,
            vendor_business_name=vendor.business_name,
            context=context.value,
            status=ConversationStatus.ACTIVE.value,
            unread_count_buyer=0,
            unread_count_vendor=0,
            last_message_seq=0,
            last_message_at=now,
            created_at=now,
            updated_at=now,
        )

        if product_id:
            product = self._directory.get_product(product_id)
            if product is not None:
                model.product_id = product.id
                model.product_name = product.name
                model.product_image = product.main_image
                model.context = ConversationContext.PRODUCT_INQUIRY.value

        # applied after the product so a resolvable order wins
        if order_id:
            order = self._directory.get_order_for_buyer(order_id=order_id, buyer_id=buyer_id)
            if order is not None:
                model.order_id = order.id
                model.order_number = order.order_number
                model.context = ConversationContext.ORDER_SUPPORT.value

        conv = self._repo.add(model)

        self._audit.log(
            entity_name=AuditEntity.CONVERSATION,
            entity_id=conv.id,
            action_name=AuditAction.CONVERSATION_CREATED,
            user_id=buyer_id,
            user_role=role.value,
            details=f"Conversation created between {conv.buyer_name} and {conv.vendor_name}",
        )
        logger.info(
            "Conversation %s created buyer_id=%s vendor_id=%s context=%s",
            conv.id, conv.buyer_id, conv.vendor_id, conv.context,
        )

        self._notifier.notify_conversation_created(
            ConversationCreatedEvent(
                conversation_id=conv.id,
                buyer_id=conv.buyer_id,
                vendor_id=conv.vendor_id,
                context=conv.context,
                created_at_iso=self._iso(conv.created_at),
                conversation=self._pack_conversation(conv),
            )
        )
        return conv

    def get_for_user(
        self,
        *,
        conversation_id: str,
        user_id: str,
        role: Role,
        for_update: bool = False,
    ) -> ConversationModel:
        """Absent and not-a-participant are the same answer on purpose."""
        side = participant_side(role)
        conv = None
        if side is not None:
            conv = self._repo.get_for_participant(
                conversation_id, side=side, user_id=user_id, for_update=for_update
            )
        if conv is None:
            raise NotFoundError("Conversation not found")
        return conv

    def list_conversations(
        self,
        *,
        user_id: str,
        role: Role,
        limit: int | None = None,
        cursor: str | None = None,
        status: ConversationStatus | None = None,
    ) -> Page[ConversationModel]:
        side = participant_side(role)
        if side is None:
            raise ForbiddenError("Admins should use the admin messaging endpoints")

        limit = clamp_limit(limit, default=self._page_size, maximum=self._max_page_size)
        after = ConversationCursor.decode(cursor) if cursor else None

        rows = self._repo.list_page(
            limit=limit + 1,
            side=side,
            user_id=user_id,
            status=status,
            hide_closed=True,
            after=after,
        )
        return conversation_page(rows, limit)

    def update_flags(
        self,
        *,
        conversation_id: str,
        user_id: str,
        role: Role,
        is_pinned: bool | None = None,
        is_muted: bool | None = None,
    ) -> ConversationModel:
        conv = self.get_for_user(conversation_id=conversation_id, user_id=user_id, role=role)
        # get_for_user only succeeds for buyers and vendors
        side = participant_side(role)
        self._repo.set_side_flags(conv, side=side, is_pinned=is_pinned, is_muted=is_muted, at=utcnow())
        return conv

    def archive(self, *, conversation_id: str, user_id: str, role: Role) -> ConversationModel:
        conv = self.get_for_user(
            conversation_id=conversation_id, user_id=user_id, role=role, for_update=True
        )

        if conv.status == ConversationStatus.ARCHIVED.value:
            return conv
        if conv.status != ConversationStatus.ACTIVE.value:
            raise ForbiddenError(f"A {conv.status} conversation cannot be archived")

        now = utcnow()
        self._repo.transition(
            conv,
            status=ConversationStatus.ARCHIVED,
            at=now,
            archived_at=now,
            archived_by=user_id,
        )

        self._audit.log(
            entity_name=AuditEntity.CONVERSATION,
            entity_id=conv.id,
            action_name=AuditAction.CONVERSATION_ARCHIVED,
            user_id=user_id,
            user_role=role.value,
            details="Conversation archived",
        )
        logger.info("Conversation %s archived by user_id=%s", conv.id, user_id)

        self._notifier.notify_conversation_updated(
            ConversationUpdatedEvent(
                conversation_id=conv.id,
                buyer_id=conv.buyer_id,
                vendor_id=conv.vendor_id,
                status=conv.status,
                changed_by=user_id,
                updated_at_iso=self._iso(now),
            )
        )
        return conv


def conversation_page(rows: list[ConversationModel], limit: int) -> Page[ConversationModel]:
    items = rows[:limit]
    next_cursor = None
    if len(rows) > limit:
        last = items[-1]
        next_cursor = ConversationCursor(
            last_message_at=last.last_message_at, conversation_id=last.id
        ).encode()
    return Page(items=items, next_cursor=next_cursor)

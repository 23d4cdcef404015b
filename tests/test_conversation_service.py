# tests/test_conversation_service.py
import pytest

from marketplace_chat.core.audit.audit_actions import AuditAction
from marketplace_chat.core.audit.audit_entities import AuditEntity
from marketplace_chat.core.exceptions import ForbiddenError, InvalidInputError, NotFoundError
from marketplace_chat.core.messaging_types import ConversationContext, ConversationStatus
from marketplace_chat.core.roles import Role


def _create(services, buyer_id="b1", vendor_id="v1", **kwargs):
    with services() as svc:
        return svc.conversations.create_conversation(
            buyer_id=buyer_id, role=Role.BUYER, vendor_id=vendor_id, **kwargs
        )


class TestCreate:
    def test_starts_active_with_snapshot(self, services, notifier):
        conv = _create(services)

        assert conv.id.startswith("conv_") and len(conv.id) == len("conv_") + 16
        assert conv.status == ConversationStatus.ACTIVE
        assert conv.context == ConversationContext.GENERAL
        assert (conv.unread_count_buyer, conv.unread_count_vendor) == (0, 0)
        assert conv.buyer_name == "Bella Buyer"
        assert conv.buyer_avatar == "https://cdn.example.com/u/b1.png"
        assert conv.vendor_name == "Victor Vendor"
        assert conv.vendor_business_name == "Victor's Goods"

        [event] = notifier.created_conversations
        assert event.conversation_id == conv.id
        assert event.vendor_id == "v1"

    @pytest.mark.parametrize("role", [Role.VENDOR, Role.ADMIN])
    def test_only_buyers_initiate(self, services, role):
        with services() as svc:
            with pytest.raises(ForbiddenError):
                svc.conversations.create_conversation(buyer_id="v1", role=role, vendor_id="v2")

    @pytest.mark.parametrize("vendor_id", ["nobody", "b2", "vgone"])
    def test_vendor_must_exist_and_be_a_vendor(self, services, vendor_id):
        with services() as svc:
            with pytest.raises(NotFoundError, match="Vendor not found"):
                svc.conversations.create_conversation(buyer_id="b1", role=Role.BUYER, vendor_id=vendor_id)

    def test_product_forces_product_inquiry(self, services):
        conv = _create(services, product_id="p1")

        assert conv.context == ConversationContext.PRODUCT_INQUIRY
        assert conv.product_name == "Walnut Desk"
        assert conv.product_image == "https://cdn.example.com/p/p1.jpg"

    def test_own_order_forces_order_support(self, services):
        conv = _create(services, product_id="p1", order_id="o1")

        assert conv.context == ConversationContext.ORDER_SUPPORT
        assert conv.order_number == "ORD-1001"
        assert conv.product_name == "Walnut Desk"

    def test_someone_elses_order_is_ignored(self, services):
        conv = _create(services, order_id="o2", context=ConversationContext.DISPUTE)

        assert conv.order_id is None
        assert conv.context == ConversationContext.DISPUTE

    def test_pairs_are_not_deduplicated(self, services):
        assert _create(services).id != _create(services).id

    def test_creation_is_audited(self, services):
        conv = _create(services)
        with services() as svc:
            [entry] = svc.audit.list_for_entity(entity_name=AuditEntity.CONVERSATION, entity_id=conv.id)

        assert entry.action_name == AuditAction.CONVERSATION_CREATED
        assert entry.user_id == "b1"


class TestGetForUser:
    def test_participants_see_it(self, services):
        conv = _create(services)
        with services() as svc:
            assert svc.conversations.get_for_user(conversation_id=conv.id, user_id="b1", role=Role.BUYER).id == conv.id
            assert svc.conversations.get_for_user(conversation_id=conv.id, user_id="v1", role=Role.VENDOR).id == conv.id

    @pytest.mark.parametrize(
        "user_id, role",
        [
            ("b2", Role.BUYER),
            ("v2", Role.VENDOR),
            # right id, wrong side
            ("b1", Role.VENDOR),
            ("a1", Role.ADMIN),
        ],
    )
    def test_outsiders_get_not_found(self, services, user_id, role):
        conv = _create(services)
        with services() as svc:
            with pytest.raises(NotFoundError, match="Conversation not found"):
                svc.conversations.get_for_user(conversation_id=conv.id, user_id=user_id, role=role)

    def test_missing_is_not_found(self, services):
        with services() as svc:
            with pytest.raises(NotFoundError):
                svc.conversations.get_for_user(conversation_id="conv_missing", user_id="b1", role=Role.BUYER)


class TestList:
    def test_most_recent_activity_first(self, services):
        first = _create(services)
        second = _create(services, vendor_id="v2")

        with services() as svc:
            svc.messages.create_message(
                conversation_id=first.id, sender_id="b1", sender_role=Role.BUYER,
                sender_name="Bella Buyer", sender_avatar=None, content="bump",
            )

        with services() as svc:
            page = svc.conversations.list_conversations(user_id="b1", role=Role.BUYER)

        assert [c.id for c in page.items] == [first.id, second.id]
        assert page.next_cursor is None

    def test_scoped_to_caller(self, services):
        mine = _create(services)
        _create(services, buyer_id="b2")

        with services() as svc:
            page = svc.conversations.list_conversations(user_id="b1", role=Role.BUYER)
            vendor_page = svc.conversations.list_conversations(user_id="v1", role=Role.VENDOR)

        assert [c.id for c in page.items] == [mine.id]
        assert len(vendor_page.items) == 2

    def test_cursor_round_trip(self, services):
        created = {_create(services, buyer_id="b1", vendor_id=("v1" if i % 2 else "v2")).id for i in range(7)}

        with services() as svc:
            everything = svc.conversations.list_conversations(user_id="b1", role=Role.BUYER, limit=100).items

        collected, cursor = [], None
        while True:
            with services() as svc:
                page = svc.conversations.list_conversations(user_id="b1", role=Role.BUYER, limit=3, cursor=cursor)
            collected.extend(c.id for c in page.items)
            cursor = page.next_cursor
            if cursor is None:
                break

        assert collected == [c.id for c in everything]
        assert set(collected) == created

    def test_closed_hidden_unless_filtered(self, services):
        conv = _create(services)
        with services() as svc:
            svc.moderation.close(conversation_id=conv.id, admin_id="a1", role=Role.ADMIN)

        with services() as svc:
            default = svc.conversations.list_conversations(user_id="b1", role=Role.BUYER)
            closed = svc.conversations.list_conversations(
                user_id="b1", role=Role.BUYER, status=ConversationStatus.CLOSED
            )

        assert default.items == []
        assert [c.id for c in closed.items] == [conv.id]

    def test_admins_are_refused(self, services):
        with services() as svc:
            with pytest.raises(ForbiddenError):
                svc.conversations.list_conversations(user_id="a1", role=Role.ADMIN)

    def test_bad_cursor(self, services):
        with services() as svc:
            with pytest.raises(InvalidInputError):
                svc.conversations.list_conversations(user_id="b1", role=Role.BUYER, cursor="nope")


class TestFlags:
    def test_each_side_writes_only_its_own_columns(self, services):
        conv = _create(services)

        with services() as svc:
            svc.conversations.update_flags(conversation_id=conv.id, user_id="b1", role=Role.BUYER, is_pinned=True)
        with services() as svc:
            updated = svc.conversations.update_flags(
                conversation_id=conv.id, user_id="v1", role=Role.VENDOR, is_muted=True
            )

        assert updated.is_pinned_buyer is True
        assert updated.is_muted_buyer is False
        assert updated.is_pinned_vendor is False
        assert updated.is_muted_vendor is True

    def test_outsider_cannot_touch_flags(self, services):
        conv = _create(services)
        with services() as svc:
            with pytest.raises(NotFoundError):
                svc.conversations.update_flags(conversation_id=conv.id, user_id="b2", role=Role.BUYER, is_pinned=True)

        with services() as svc:
            fresh = svc.conversations.get_for_user(conversation_id=conv.id, user_id="b1", role=Role.BUYER)
        assert fresh.is_pinned_buyer is False


class TestArchive:
    def test_archive_is_idempotent(self, services, notifier):
        conv = _create(services)

        with services() as svc:
            archived = svc.conversations.archive(conversation_id=conv.id, user_id="v1", role=Role.VENDOR)
        with services() as svc:
            again = svc.conversations.archive(conversation_id=conv.id, user_id="b1", role=Role.BUYER)

        assert archived.status == ConversationStatus.ARCHIVED
        assert archived.archived_by == "v1"
        assert again.status == ConversationStatus.ARCHIVED
        assert again.archived_by == "v1"
        assert len(notifier.updated_conversations) == 1

    @pytest.mark.parametrize("transition", ["flag", "close"])
    def test_flagged_or_closed_cannot_be_archived(self, services, transition):
        conv = _create(services)
        with services() as svc:
            if transition == "flag":
                svc.moderation.flag(conversation_id=conv.id, admin_id="a1", role=Role.ADMIN, reason="spam")
            else:
                svc.moderation.close(conversation_id=conv.id, admin_id="a1", role=Role.ADMIN)

        with services() as svc:
            with pytest.raises(ForbiddenError):
                svc.conversations.archive(conversation_id=conv.id, user_id="b1", role=Role.BUYER)

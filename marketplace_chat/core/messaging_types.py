# marketplace_chat/core/messaging_types.py
from enum import StrEnum


class ConversationContext(StrEnum):
    PRODUCT_INQUIRY = "product_inquiry"
    ORDER_SUPPORT = "order_support"
    GENERAL = "general"
    DISPUTE = "dispute"


class ConversationStatus(StrEnum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    FLAGGED = "flagged"
    CLOSED = "closed"


class MessageType(StrEnum):
    TEXT = "text"
    IMAGE = "image"
    FILE = "file"
    SYSTEM = "system"

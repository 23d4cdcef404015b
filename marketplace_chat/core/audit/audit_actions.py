# marketplace_chat/core/audit/audit_actions.py

class AuditAction:
    CONVERSATION_CREATED = "CONVERSATION_CREATED"
    CONVERSATION_ARCHIVED = "CONVERSATION_ARCHIVED"
    CONVERSATION_FLAGGED = "CONVERSATION_FLAGGED"
    CONVERSATION_UNFLAGGED = "CONVERSATION_UNFLAGGED"
    CONVERSATION_CLOSED = "CONVERSATION_CLOSED"

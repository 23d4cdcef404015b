# marketplace_chat/core/audit/audit_entities.py

class AuditEntity:
    CONVERSATION = "conversation"

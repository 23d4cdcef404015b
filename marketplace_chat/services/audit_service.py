# marketplace_chat/services/audit_service.py

from marketplace_chat.core.clock import utcnow
from marketplace_chat.infrastructure.database.models.audit_log_model import AuditLogModel
from marketplace_chat.repositories.audit_log_repository import AuditLogRepository


class AuditService:
    def __init__(self, repo: AuditLogRepository) -> None:
        self._repo = repo

    def log(
        self,
        *,
        entity_name: str,
        action_name: str,
        user_id: str | None,
        user_role: str | None = None,
        entity_id: str | None = None,
        details: str | None = None,
    ) -> None:
        model = AuditLogModel(
            entity_name=entity_name,
            entity_id=entity_id,
            action_name=action_name,
            details=details,
            user_id=user_id,
            user_role=user_role,
            occurred_at=utcnow(),
        )
        self._repo.add(model)

    def list_for_entity(self, *, entity_name: str, entity_id: str, limit: int = 100) -> list[AuditLogModel]:
        return self._repo.list_for_entity(entity_name=entity_name, entity_id=entity_id, limit=limit)

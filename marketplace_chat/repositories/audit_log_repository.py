# marketplace_chat/repositories/audit_log_repository.py

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from marketplace_chat.core.base_repository import BaseRepository
from marketplace_chat.infrastructure.database.models.audit_log_model import AuditLogModel


class AuditLogRepository(BaseRepository[AuditLogModel]):
    def __init__(self, session: Session) -> None:
        super().__init__(session)

    def add(self, model: AuditLogModel) -> AuditLogModel:
        self._session.add(model)
        self._session.flush()
        return model

    def list_for_entity(self, *, entity_name: str, entity_id: str, limit: int = 100) -> list[AuditLogModel]:
        stmt = (
            select(AuditLogModel)
            .where(
                AuditLogModel.entity_name == entity_name,
                AuditLogModel.entity_id == entity_id,
            )
            .order_by(AuditLogModel.occurred_at.desc(), AuditLogModel.id.desc())
            .limit(limit)
        )
        return list(self._session.execute(stmt).scalars().all())

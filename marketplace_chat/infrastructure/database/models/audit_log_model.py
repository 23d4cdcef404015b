# marketplace_chat/infrastructure/database/models/audit_log_model.py

from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from marketplace_chat.infrastructure.database.base_model import BaseModel


class AuditLogModel(BaseModel):
    __tablename__ = "messaging_audit_logs"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )

    entity_name: Mapped[str] = mapped_column(String(50), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(64), nullable=True)

    action_name: Mapped[str] = mapped_column(String(40), nullable=False)
    details: Mapped[str] = mapped_column(Text, nullable=True)

    occurred_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=True)
    user_role: Mapped[str] = mapped_column(String(20), nullable=True)

# marketplace_chat/infrastructure/database/models/user_model.py

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from marketplace_chat.infrastructure.database.base_model import BaseModel


class UserModel(BaseModel):
    """Read-only view of the marketplace users table."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    email: Mapped[str] = mapped_column(String(150), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(150), nullable=False)

    # buyer | vendor | admin | master_admin
    role: Mapped[str] = mapped_column(String(20), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")

    avatar: Mapped[str] = mapped_column(Text, nullable=True)
    business_name: Mapped[str] = mapped_column(String(200), nullable=True)

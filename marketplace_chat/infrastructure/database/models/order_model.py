# marketplace_chat/infrastructure/database/models/order_model.py

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from marketplace_chat.infrastructure.database.base_model import BaseModel


class OrderModel(BaseModel):
    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    buyer_id: Mapped[str] = mapped_column(String(64), nullable=False)
    order_number: Mapped[str] = mapped_column(String(64), nullable=True)

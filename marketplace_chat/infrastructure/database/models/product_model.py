# marketplace_chat/infrastructure/database/models/product_model.py

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from marketplace_chat.infrastructure.database.base_model import BaseModel


class ProductModel(BaseModel):
    __tablename__ = "products"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    vendor_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    main_image: Mapped[str] = mapped_column(Text, nullable=True)

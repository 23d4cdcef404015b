# marketplace_chat/repositories/directory_repository.py
"""Read-only lookups into the marketplace's users, products and orders tables."""

from sqlalchemy import select
from sqlalchemy.orm import Session

from marketplace_chat.infrastructure.database.models.order_model import OrderModel
from marketplace_chat.infrastructure.database.models.product_model import ProductModel
from marketplace_chat.infrastructure.database.models.user_model import UserModel


class DirectoryRepository:
    def __init__(self, session: Session) -> None:
        self._session = session

    def get_user(self, user_id: str) -> UserModel | None:
        stmt = select(UserModel).where(UserModel.id == user_id, UserModel.status != "deleted")
        return self._session.execute(stmt).scalar_one_or_none()

    def get_vendor(self, vendor_id: str) -> UserModel | None:
        stmt = select(UserModel).where(
            UserModel.id == vendor_id,
            UserModel.role == "vendor",
            UserModel.status != "deleted",
        )
        return self._session.execute(stmt).scalar_one_or_none()

    def get_product(self, product_id: str) -> ProductModel | None:
        stmt = select(ProductModel).where(ProductModel.id == product_id)
        return self._session.execute(stmt).scalar_one_or_none()

    def get_order_for_buyer(self, *, order_id: str, buyer_id: str) -> OrderModel | None:
        stmt = select(OrderModel).where(OrderModel.id == order_id, OrderModel.buyer_id == buyer_id)
        return self._session.execute(stmt).scalar_one_or_none()

# storefront/repositories.py
# Each repository wraps one AsyncSession and commits its own writes.
import uuid
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .models import CartItem, Product, User


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: uuid.UUID) -> Optional[User]:
        return await self.session.get(User, user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def add(self, user: User) -> User:
        self.session.add(user)
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def rollback(self) -> None:
        await self.session.rollback()


class ProductRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, product_id: uuid.UUID, active_only: bool = False) -> Optional[Product]:
        stmt = select(Product).where(Product.id == product_id)
        if active_only:
            stmt = stmt.where(Product.is_active.is_(True))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_active(self) -> List[Product]:
        result = await self.session.execute(
            select(Product).where(Product.is_active.is_(True)).order_by(Product.name)
        )
        return list(result.scalars().all())

    async def add(self, product: Product) -> Product:
        self.session.add(product)
        await self.session.commit()
        await self.session.refresh(product)
        return product

    async def save(self, product: Product) -> Product:
        await self.session.commit()
        await self.session.refresh(product)
        return product

    async def delete(self, product: Product) -> None:
        await self.session.delete(product)
        await self.session.commit()


class CartItemRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def find(self, user_id: uuid.UUID, product_id: uuid.UUID) -> Optional[CartItem]:
        result = await self.session.execute(
            select(CartItem)
            .options(selectinload(CartItem.product))
            .where(CartItem.user_id == user_id, CartItem.product_id == product_id)
        )
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: uuid.UUID) -> List[CartItem]:
        result = await self.session.execute(
            select(CartItem)
            .options(selectinload(CartItem.product))
            .where(CartItem.user_id == user_id)
        )
        return list(result.scalars().all())

    async def add(self, item: CartItem) -> CartItem:
        self.session.add(item)
        await self.session.commit()
        # load product so serialisation does not trigger a lazy load
        await self.session.refresh(item, attribute_names=["product"])
        return item

    async def save(self, item: CartItem) -> CartItem:
        await self.session.commit()
        # quantity may have been assigned a SQL expression; reload the stored value
        await self.session.refresh(item, attribute_names=["quantity", "product"])
        return item

    async def delete(self, item: CartItem) -> None:
        await self.session.delete(item)
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()

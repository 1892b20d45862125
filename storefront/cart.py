# storefront/cart.py
# one line item per (user, product), merged on repeat adds
import uuid
from typing import List, Union

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import get_current_user
from .catalog import ProductService
from .database import get_session
from .errors import NotFound, ValidationError
from .models import CartItem, User
from .repositories import CartItemRepository, ProductRepository
from .schemas import CartAddRequest, CartItemOut, CartQuantityUpdate, Message
from .validation import MAX_INT, parse_uuid, require_quantity

logger = structlog.get_logger(__name__)


class CartService:
    def __init__(self, items: CartItemRepository, catalog: ProductService):
        self.items = items
        self.catalog = catalog

    async def add_to_cart(self, user: User, product_id: Union[str, uuid.UUID], quantity: int) -> CartItem:
        """Add quantity of a product to the user's cart.

        An existing line for the same product is incremented; otherwise the
        product must exist and a new line is created. Raises NotFound for an
        unknown product and ValidationError for a bad id or quantity.
        """
        quantity = require_quantity(quantity)
        product_id = parse_uuid(product_id, "product_id")
        # read before any rollback below expires the ORM instance
        user_id = user.id

        existing = await self.items.find(user_id, product_id)
        if existing is not None:
            return await self._increment(existing, quantity)

        product = await self.catalog.get_any(product_id)
        try:
            item = await self.items.add(CartItem(user_id=user_id, product_id=product.id, quantity=quantity))
        except IntegrityError:
            # a concurrent add inserted the same (user, product) line first
            await self.items.rollback()
            existing = await self.items.find(user_id, product_id)
            if existing is None:
                # the product was erased between the lookup and the insert
                raise NotFound(f'Product with ID "{product_id}" not found')
            logger.warning("Concurrent cart insert merged", user_id=str(user_id), product_id=str(product_id))
            return await self._increment(existing, quantity)

        logger.info("Cart line created", user_id=str(user_id), product_id=str(product_id), quantity=quantity)
        return item

    async def _increment(self, item: CartItem, quantity: int) -> CartItem:
        if item.quantity + quantity > MAX_INT:
            raise ValidationError(f"quantity must not exceed {MAX_INT} in total", field="quantity")
        # increment in SQL so concurrent merges do not lose updates
        item.quantity = CartItem.quantity + quantity
        item = await self.items.save(item)
        logger.info(
            "Cart line merged",
            user_id=str(item.user_id),
            product_id=str(item.product_id),
            quantity=item.quantity,
        )
        return item

    async def remove_from_cart(self, user: User, product_id: Union[str, uuid.UUID]) -> None:
        item = await self._get_line(user, product_id)
        await self.items.delete(item)

    async def get_cart(self, user: User) -> List[CartItem]:
        return await self.items.list_for_user(user.id)

    async def update_quantity(self, user: User, product_id: Union[str, uuid.UUID], quantity: int) -> CartItem:
        quantity = require_quantity(quantity)
        item = await self._get_line(user, product_id)
        item.quantity = quantity
        return await self.items.save(item)

    async def _get_line(self, user: User, product_id: Union[str, uuid.UUID]) -> CartItem:
        item = await self.items.find(user.id, parse_uuid(product_id, "product_id"))
        if item is None:
            raise NotFound("Cart item not found")
        return item


def get_cart_service(session: AsyncSession = Depends(get_session)) -> CartService:
    return CartService(CartItemRepository(session), ProductService(ProductRepository(session)))


router = APIRouter(prefix="/cart", tags=["cart"])


@router.get("", response_model=List[CartItemOut])
async def get_cart(
    current_user: User = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    return await service.get_cart(current_user)


@router.post("/add", response_model=CartItemOut)
async def add_to_cart(
    payload: CartAddRequest,
    current_user: User = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    return await service.add_to_cart(current_user, payload.product_id, payload.quantity)


@router.delete("/remove/{product_id}", response_model=Message)
async def remove_from_cart(
    product_id: str,
    current_user: User = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    await service.remove_from_cart(current_user, product_id)
    return Message(message="Item removed from cart")


@router.patch("/update/{product_id}", response_model=CartItemOut)
async def update_quantity(
    product_id: str,
    payload: CartQuantityUpdate,
    current_user: User = Depends(get_current_user),
    service: CartService = Depends(get_cart_service),
):
    return await service.update_quantity(current_user, product_id, payload.quantity)

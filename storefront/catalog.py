# storefront/catalog.py
import uuid
from typing import List, Optional, Union

import structlog
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from .auth import get_current_user
from .database import get_session
from .errors import NotFound
from .models import Product
from .repositories import ProductRepository
from .schemas import Message, ProductCreate, ProductOut, ProductUpdate
from .validation import parse_uuid, require_non_negative_int, require_price, require_text

logger = structlog.get_logger(__name__)


class ProductService:
    def __init__(self, products: ProductRepository):
        self.products = products

    async def list_active(self) -> List[Product]:
        return await self.products.list_active()

    async def get_active(self, product_id: Union[str, uuid.UUID]) -> Product:
        """Lookup used by the catalog surface: inactive products count as missing."""
        product = await self.products.get(parse_uuid(product_id, "product_id"), active_only=True)
        if product is None:
            raise NotFound(f'Product with ID "{product_id}" not found')
        return product

    async def get_any(self, product_id: Union[str, uuid.UUID]) -> Product:
        """Lookup by id regardless of the active flag."""
        product = await self.products.get(parse_uuid(product_id, "product_id"))
        if product is None:
            raise NotFound(f'Product with ID "{product_id}" not found')
        return product

    async def create(self, name: str, price, description: str, stock: int) -> Product:
        product = Product(
            name=require_text(name, "name"),
            price=require_price(price),
            description=require_text(description, "description"),
            stock=require_non_negative_int(stock, "stock"),
            is_active=True,
        )
        return await self.products.add(product)

    async def update(
        self,
        product_id: Union[str, uuid.UUID],
        name: Optional[str] = None,
        price=None,
        description: Optional[str] = None,
        stock: Optional[int] = None,
    ) -> Product:
        product = await self.get_active(product_id)
        if name is not None:
            product.name = require_text(name, "name")
        if price is not None:
            product.price = require_price(price)
        if description is not None:
            product.description = require_text(description, "description")
        if stock is not None:
            product.stock = require_non_negative_int(stock, "stock")
        return await self.products.save(product)

    async def soft_delete(self, product_id: Union[str, uuid.UUID]) -> None:
        product = await self.get_active(product_id)
        product.is_active = False
        await self.products.save(product)
        logger.info("Product deactivated", product_id=str(product.id))

    async def hard_delete(self, product_id: Union[str, uuid.UUID]) -> None:
        product = await self.get_any(product_id)
        await self.products.delete(product)
        logger.info("Product erased", product_id=str(product.id))


def get_product_service(session: AsyncSession = Depends(get_session)) -> ProductService:
    return ProductService(ProductRepository(session))


router = APIRouter(prefix="/products", tags=["products"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[ProductOut])
async def list_products(service: ProductService = Depends(get_product_service)):
    return await service.list_active()


@router.get("/{product_id}", response_model=ProductOut)
async def get_product(product_id: str, service: ProductService = Depends(get_product_service)):
    return await service.get_active(product_id)


@router.post("", response_model=ProductOut, status_code=status.HTTP_201_CREATED)
async def create_product(payload: ProductCreate, service: ProductService = Depends(get_product_service)):
    return await service.create(
        name=payload.name,
        price=payload.price,
        description=payload.description,
        stock=payload.stock,
    )


@router.put("/{product_id}", response_model=ProductOut)
async def update_product(
    product_id: str,
    payload: ProductUpdate,
    service: ProductService = Depends(get_product_service),
):
    return await service.update(product_id, **payload.model_dump(exclude_unset=True))


@router.delete("/{product_id}", response_model=Message)
async def delete_product(product_id: str, service: ProductService = Depends(get_product_service)):
    await service.soft_delete(product_id)
    return Message(message="Product deactivated")


@router.delete("/{product_id}/hard", response_model=Message)
async def hard_delete_product(product_id: str, service: ProductService = Depends(get_product_service)):
    await service.hard_delete(product_id)
    return Message(message="Product deleted")

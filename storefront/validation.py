# storefront/validation.py
import uuid
from decimal import Decimal, InvalidOperation
from typing import Any, Union

from .errors import ValidationError

MAX_PRICE = Decimal("100000000")
# quantity and stock are 32-bit Integer columns
MAX_INT = 2147483647


def parse_uuid(value: Union[str, uuid.UUID], field: str = "id") -> uuid.UUID:
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except (TypeError, ValueError, AttributeError):
        raise ValidationError(f"{field} must be a valid UUID", field=field)


def require_quantity(value: Any, field: str = "quantity") -> int:
    # bool is an int subclass; True must not pass as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field)
    if value < 1:
        raise ValidationError(f"{field} must be at least 1", field=field)
    if value > MAX_INT:
        raise ValidationError(f"{field} must not exceed {MAX_INT}", field=field)
    return value


def require_non_negative_int(value: Any, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", field=field)
    if value < 0:
        raise ValidationError(f"{field} must not be negative", field=field)
    if value > MAX_INT:
        raise ValidationError(f"{field} must not exceed {MAX_INT}", field=field)
    return value


def require_price(value: Any, field: str = "price") -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"{field} must be a number", field=field)
    if not price.is_finite():
        raise ValidationError(f"{field} must be a number", field=field)
    if price < 0:
        raise ValidationError(f"{field} must not be negative", field=field)
    # column is Numeric(10, 2); compare after rounding so 99999999.995 cannot slip through
    if price >= MAX_PRICE or price.quantize(Decimal("0.01")) >= MAX_PRICE:
        raise ValidationError(f"{field} must be below {MAX_PRICE}", field=field)
    return price.quantize(Decimal("0.01"))


def require_text(value: Any, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be a non-empty string", field=field)
    return value.strip()

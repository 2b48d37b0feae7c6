from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import ValidationError
from .models import Category, CheckoutItem, Product

# Signed 64-bit, the widest integer the SQL columns hold
MAX_INTEGER = 2**63 - 1
MAX_PRICE = 999_999_999
MAX_STOCK = 999_999_999
MAX_QUANTITY = 999_999_999


@dataclass(frozen=True)
class PayloadPolicy:
    """
    Central policy layer:
    - integer_fields / string_fields: what clients are allowed to send, by type
    - required: fields that must be present
    - nullable: fields that may be sent as null
    - maximums: per-field upper bounds, checked after coercion
    """
    integer_fields: frozenset = frozenset()
    string_fields: frozenset = frozenset()
    required: frozenset = frozenset()
    nullable: frozenset = frozenset()
    maximums: dict = field(default_factory=dict)

    @property
    def writable_fields(self) -> frozenset:
        return self.integer_fields | self.string_fields


CATEGORY_POLICY = PayloadPolicy(
    string_fields=frozenset({"name", "description"}),
    required=frozenset({"name"}),
    nullable=frozenset({"description"}),
)

PRODUCT_POLICY = PayloadPolicy(
    integer_fields=frozenset({"price", "stock", "category_id"}),
    string_fields=frozenset({"name"}),
    required=frozenset({"name"}),
    nullable=frozenset({"category_id"}),
    maximums={"price": MAX_PRICE, "stock": MAX_STOCK},
)

CHECKOUT_ITEM_POLICY = PayloadPolicy(
    integer_fields=frozenset({"product_id", "quantity"}),
    required=frozenset({"product_id", "quantity"}),
    maximums={"quantity": MAX_QUANTITY},
)


def coerce_int(key: str, value: Any) -> int:
    result = _parse_int(key, value)
    if not -MAX_INTEGER <= result <= MAX_INTEGER:
        raise ValidationError(f"{key} is out of range")
    return result


def _parse_int(key: str, value: Any) -> int:
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # String input - must be plain digits (with optional leading minus)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{key} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if 'e' in stripped.lower():
            raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if '.' in stripped:
            raise ValidationError(f"{key} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be an integer") from None
    # Reject floats explicitly
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    raise ValidationError(f"{key} must be an integer")


def validate_payload(*, payload: Any, policy: PayloadPolicy) -> dict:
    """
    Validates + normalizes a decoded JSON object against a policy.

    Unknown fields are rejected, integers are coerced strictly, strings are
    stripped. Returns a cleaned dict with only the provided writable fields.
    Business rules (positive price, existing category, ...) are left to the
    services.
    """
    if payload is None:
        raise ValidationError("Invalid JSON payload")
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")

    missing = sorted(f for f in policy.required if f not in payload)
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    for k in payload.keys():
        if k not in policy.writable_fields:
            raise ValidationError(f"Field not allowed: {k}")

    cleaned: dict = {}
    for k, raw in payload.items():
        if raw is None:
            if k not in policy.nullable:
                raise ValidationError(f"{k} cannot be null")
            cleaned[k] = None
            continue

        if k in policy.integer_fields:
            value = coerce_int(k, raw)
            maximum = policy.maximums.get(k)
            if maximum is not None and value > maximum:
                raise ValidationError(f"{k} cannot exceed {maximum}")
            cleaned[k] = value
        else:
            if not isinstance(raw, str):
                raise ValidationError(f"{k} must be a string")
            cleaned[k] = raw.strip()

    return cleaned


def parse_category(payload: Any) -> Category:
    data = validate_payload(payload=payload, policy=CATEGORY_POLICY)
    return Category(name=data["name"], description=data.get("description") or "")


def parse_product(payload: Any) -> Product:
    data = validate_payload(payload=payload, policy=PRODUCT_POLICY)
    return Product(
        name=data["name"],
        price=data.get("price", 0),
        stock=data.get("stock", 0),
        category_id=data.get("category_id"),
    )


def parse_checkout(payload: Any) -> list[CheckoutItem]:
    """
    Decode {"items": [{"product_id": int, "quantity": int}, ...]}.

    An empty list is passed through; rejecting it is the checkout's job.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Invalid JSON payload")
    unknown = sorted(set(payload) - {"items"})
    if unknown:
        raise ValidationError(f"Field not allowed: {unknown[0]}")
    items = payload.get("items")
    if items is None:
        raise ValidationError("items is required")
    if not isinstance(items, list):
        raise ValidationError("items must be a list")

    parsed = []
    for index, raw in enumerate(items):
        try:
            data = validate_payload(payload=raw, policy=CHECKOUT_ITEM_POLICY)
        except ValidationError as e:
            raise ValidationError(f"items[{index}]: {e}") from None
        if data["product_id"] <= 0:
            raise ValidationError(f"items[{index}]: product_id must be greater than 0")
        parsed.append(CheckoutItem(product_id=data["product_id"], quantity=data["quantity"]))
    return parsed


def parse_pagination(args, *, default_limit: int, max_limit: int) -> tuple[Optional[int], int]:
    """
    Read ?page=&limit= from query args.

    page is None when not requested (caller returns the full list).
    Invalid or non-positive values fall back to page 1 / default_limit;
    limit is capped at max_limit.
    """
    raw_page = args.get("page")
    raw_limit = args.get("limit")
    if raw_page is None and raw_limit is None:
        return None, default_limit

    page = args.get("page", type=int)
    limit = args.get("limit", type=int)
    if page is None or page < 1:
        page = 1
    if limit is None or limit < 1:
        limit = default_limit
    return page, min(limit, max_limit)


def paginate(items: list, *, page: int, limit: int) -> dict:
    total = len(items)
    total_pages = (total + limit - 1) // limit if total > 0 else 0
    start = (page - 1) * limit
    return {
        "items": items[start:start + limit],
        "page": page,
        "limit": limit,
        "total_items": total,
        "total_pages": total_pages,
    }

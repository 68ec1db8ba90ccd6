"""Pydantic request/response schemas for the storefront API.

These are external contracts (anti-corruption layer), separate from the
internal Protean commands. Bodies use camelCase field names; snake_case is
accepted too.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(CamelModel):
    product_id: str = Field(min_length=1)
    variant_id: str | None = None
    color_key: str | None = None
    qty: int = Field(default=1, ge=1)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "productId": "prod-tee-001",
                    "variantId": "var-tee-m",
                    "colorKey": "Navy",
                    "qty": 1,
                }
            ]
        },
    )


class SetQuantityRequest(CamelModel):
    item_id: str = Field(min_length=1)
    qty: int = Field(ge=1)


class ChangeOptionsRequest(CamelModel):
    item_id: str = Field(min_length=1)
    variant_id: str | None = None
    color_key: str | None = None


class SelectItemRequest(CamelModel):
    item_id: str = Field(min_length=1)
    selected: bool


class SelectAllRequest(CamelModel):
    selected: bool


# ---------------------------------------------------------------------------
# Checkout Request Schemas
# ---------------------------------------------------------------------------
class ContactSchema(CamelModel):
    name: str | None = None
    phone: str | None = None
    email: str | None = None


class PlaceCodOrderRequest(CamelModel):
    address_id: str | None = None
    contact: ContactSchema = Field(default_factory=ContactSchema)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "addressId": "addr-001",
                    "contact": {"name": "Asha Rao", "phone": "9876543210", "email": "asha@example.com"},
                }
            ]
        },
    )


# ---------------------------------------------------------------------------
# Address Request Schemas
# ---------------------------------------------------------------------------
class AddressRequest(CamelModel):
    full_name: str | None = None
    phone: str | None = None
    pincode: str | None = None
    state: str | None = None
    city: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    landmark: str | None = None
    make_default: bool = False


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class TotalsResponse(CamelModel):
    subtotal: float
    mrp_total: float
    savings: float


class PlacedOrderResponse(CamelModel):
    order_id: str
    status: str
    totals: TotalsResponse

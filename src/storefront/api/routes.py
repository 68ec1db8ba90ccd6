"""FastAPI routes for the storefront: cart, checkout, orders and addresses.

Routes are plain functions so FastAPI runs them in its threadpool; ``dispatch``
sleeps between retries of a stale cart write.
"""

from fastapi import APIRouter, Depends, Request, Response

from storefront.api.schemas import (
    AddressRequest,
    AddToCartRequest,
    ChangeOptionsRequest,
    PlaceCodOrderRequest,
    PlacedOrderResponse,
    SelectAllRequest,
    SelectItemRequest,
    SetQuantityRequest,
)
from storefront.cart.items import AddToCart, ChangeLineOptions, RemoveCartLine, SetLineQuantity
from storefront.cart.management import ClearCart, MergeGuestCart
from storefront.cart.selection import SelectAllCartLines, SelectCartLine
from storefront.cart.view import fetch_cart
from storefront.checkout.placement import PlaceCodOrder
from storefront.checkout.summary import checkout_summary
from storefront.customer.addresses import (
    AddAddress,
    RemoveAddress,
    SetDefaultAddress,
    UpdateAddress,
    list_addresses,
)
from storefront.identity.owner import Owner, forget_guest_cookie, guest_token, require_user, resolve_owner
from storefront.order.lifecycle import get_order
from storefront.utils.retry import dispatch

# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("")
def get_cart(owner: Owner = Depends(resolve_owner)):
    return fetch_cart(owner.owner_key)


@cart_router.post("/add")
def add_to_cart(body: AddToCartRequest, owner: Owner = Depends(resolve_owner)):
    dispatch(
        AddToCart(
            owner_key=owner.owner_key,
            user_id=owner.user_id,
            guest_id=owner.guest_id,
            product_id=body.product_id,
            variant_id=body.variant_id,
            color_key=body.color_key,
            quantity=body.qty,
        )
    )
    return fetch_cart(owner.owner_key)


@cart_router.patch("/qty")
def set_quantity(body: SetQuantityRequest, owner: Owner = Depends(resolve_owner)):
    dispatch(SetLineQuantity(owner_key=owner.owner_key, line_id=body.item_id, quantity=body.qty))
    return fetch_cart(owner.owner_key)


@cart_router.patch("/item/options")
def change_options(body: ChangeOptionsRequest, owner: Owner = Depends(resolve_owner)):
    dispatch(
        ChangeLineOptions(
            owner_key=owner.owner_key,
            line_id=body.item_id,
            variant_id=body.variant_id,
            color_key=body.color_key,
        )
    )
    return fetch_cart(owner.owner_key)


@cart_router.patch("/item/select")
def select_item(body: SelectItemRequest, owner: Owner = Depends(resolve_owner)):
    dispatch(SelectCartLine(owner_key=owner.owner_key, line_id=body.item_id, selected=body.selected))
    return fetch_cart(owner.owner_key)


@cart_router.patch("/select-all")
def select_all(body: SelectAllRequest, owner: Owner = Depends(resolve_owner)):
    dispatch(SelectAllCartLines(owner_key=owner.owner_key, selected=body.selected))
    return fetch_cart(owner.owner_key)


@cart_router.delete("/item/{item_id}")
def remove_item(item_id: str, owner: Owner = Depends(resolve_owner)):
    dispatch(RemoveCartLine(owner_key=owner.owner_key, line_id=item_id))
    return fetch_cart(owner.owner_key)


@cart_router.delete("/clear")
def clear_cart(owner: Owner = Depends(resolve_owner)):
    dispatch(ClearCart(owner_key=owner.owner_key))
    return fetch_cart(owner.owner_key)


@cart_router.post("/merge")
def merge_guest_cart(request: Request, response: Response, owner: Owner = Depends(require_user)):
    guest_id = guest_token(request)
    if guest_id is not None:
        dispatch(MergeGuestCart(user_id=owner.user_id, guest_id=guest_id))
        forget_guest_cookie(response)
    return fetch_cart(owner.owner_key)


# ---------------------------------------------------------------------------
# Checkout Router
# ---------------------------------------------------------------------------
checkout_router = APIRouter(prefix="/checkout", tags=["checkout"])


@checkout_router.get("/summary")
def get_checkout_summary(owner: Owner = Depends(resolve_owner)):
    return checkout_summary(owner.owner_key)


@checkout_router.post("/cod", status_code=201, response_model=PlacedOrderResponse)
def place_cod_order(body: PlaceCodOrderRequest, owner: Owner = Depends(require_user)) -> PlacedOrderResponse:
    result = dispatch(
        PlaceCodOrder(
            owner_key=owner.owner_key,
            user_id=owner.user_id,
            address_id=body.address_id,
            contact_name=body.contact.name,
            contact_phone=body.contact.phone,
            contact_email=body.contact.email,
        )
    )
    return PlacedOrderResponse(**result)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("/{order_id}")
def read_order(order_id: str, owner: Owner = Depends(require_user)):
    return get_order(owner.user_id, order_id).to_dict()


# ---------------------------------------------------------------------------
# Address Router
# ---------------------------------------------------------------------------
address_router = APIRouter(prefix="/addresses", tags=["addresses"])


def _address_fields(body: AddressRequest) -> dict:
    return body.model_dump(exclude={"make_default"})


@address_router.get("")
def get_addresses(owner: Owner = Depends(require_user)):
    return {"items": list_addresses(owner.user_id)}


@address_router.post("", status_code=201)
def add_address(body: AddressRequest, owner: Owner = Depends(require_user)):
    dispatch(AddAddress(user_id=owner.user_id, make_default=body.make_default, **_address_fields(body)))
    return {"items": list_addresses(owner.user_id)}


@address_router.put("/{address_id}")
def update_address(address_id: str, body: AddressRequest, owner: Owner = Depends(require_user)):
    fields = {key: value for key, value in _address_fields(body).items() if value is not None}
    dispatch(UpdateAddress(user_id=owner.user_id, address_id=address_id, make_default=body.make_default, **fields))
    return {"items": list_addresses(owner.user_id)}


@address_router.patch("/{address_id}/default")
def make_default_address(address_id: str, owner: Owner = Depends(require_user)):
    dispatch(SetDefaultAddress(user_id=owner.user_id, address_id=address_id))
    return {"items": list_addresses(owner.user_id)}


@address_router.delete("/{address_id}")
def delete_address(address_id: str, owner: Owner = Depends(require_user)):
    dispatch(RemoveAddress(user_id=owner.user_id, address_id=address_id))
    return {"items": list_addresses(owner.user_id)}

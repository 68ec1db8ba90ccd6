"""Cash-on-delivery order placement: command and handler.

Placement runs as one unit of work: the order is created, the shipping
address becomes the default, exactly the converted lines leave the cart and
stock is debited. Any failure rolls all of it back.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.cart.cart import Cart
from storefront.catalog import get_catalog
from storefront.checkout.validation import compute_totals, validate_selected_lines
from storefront.customer.addresses import load_customer
from storefront.customer.customer import Customer
from storefront.domain import storefront
from storefront.errors import InvalidInput, NotFound, Unauthorized
from storefront.order.order import ContactDetails, DeliveryAddress, Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceCodOrder:
    owner_key = String(required=True, max_length=100)
    user_id = Identifier()
    address_id = Identifier()
    contact_name = String(max_length=100)
    contact_phone = String(max_length=20)
    contact_email = String(max_length=254)


def _contact(command):
    name = (command.contact_name or "").strip()
    phone = (command.contact_phone or "").strip()
    if not name:
        raise InvalidInput("Contact name is required", field="contact.name")
    if not phone:
        raise InvalidInput("Contact phone is required", field="contact.phone")
    return ContactDetails(name=name, phone=phone, email=(command.contact_email or "").strip() or None)


def _delivery_address(address):
    return DeliveryAddress(
        full_name=address.full_name,
        phone=address.phone,
        pincode=address.pincode,
        state=address.state,
        city=address.city,
        address_line1=address.address_line1,
        address_line2=address.address_line2,
        landmark=address.landmark,
    )


@storefront.command_handler(part_of=Order)
class PlaceCodOrderHandler:
    @handle(PlaceCodOrder)
    def place_cod_order(self, command):
        if not command.user_id:
            raise Unauthorized("Please sign in to place an order")

        contact = _contact(command)
        if not command.address_id:
            raise InvalidInput("Address is required", field="addressId")

        customer_repo = current_domain.repository_for(Customer)
        customer = load_customer(customer_repo, command.user_id)
        address = customer.find_address(command.address_id)
        if address is None:
            raise NotFound("Address not found")

        cart_repo = current_domain.repository_for(Cart)
        cart = cart_repo.for_owner(command.owner_key)
        catalog = get_catalog()
        lines = validate_selected_lines(cart, catalog)
        totals = compute_totals(lines)

        order = Order.place_cod(
            user_id=command.user_id,
            checkout_lines=lines,
            totals=totals,
            contact=contact,
            shipping_address=_delivery_address(address),
        )
        current_domain.repository_for(Order).add(order)

        customer.set_default_address(address.id)
        customer_repo.add(customer)

        cart.check_out_lines([line.line_id for line in lines], order_id=order.id)
        cart_repo.save(cart)

        for line in lines:
            catalog.debit_stock(line.product_id, line.variant_id, line.quantity)

        logger.info(
            "cod_order_placed",
            order_id=str(order.id),
            user_id=command.user_id,
            owner_key=command.owner_key,
            lines=len(lines),
            subtotal=totals.subtotal,
        )
        return {"order_id": str(order.id), "status": order.status, "totals": totals.to_dict()}

"""Application tests for post-placement order transitions and order reads."""

import pytest
from protean import current_domain
from storefront.checkout.validation import CheckoutLine, compute_totals
from storefront.errors import InvalidState, NotFound
from storefront.order.lifecycle import CancelOrder, ConfirmOrder, DeliverOrder, ShipOrder, get_order
from storefront.order.order import ContactDetails, DeliveryAddress, Order, OrderStatus


def _placed_order(user_id="user-001"):
    lines = [
        CheckoutLine(
            line_id="line-001",
            product_id="prod-honey",
            product_code="HNY-250",
            variant_id=None,
            color_key=None,
            quantity=1,
            title="Wildflower Honey",
            image=None,
            mrp=500.0,
            sale_price=400.0,
        )
    ]
    order = Order.place_cod(
        user_id=user_id,
        checkout_lines=lines,
        totals=compute_totals(lines),
        contact=ContactDetails(name="Asha Rao", phone="9876543210"),
        shipping_address=DeliveryAddress(
            full_name="Asha Rao",
            phone="9876543210",
            pincode="560001",
            state="Karnataka",
            city="Bengaluru",
            address_line1="12 MG Road",
        ),
    )
    current_domain.repository_for(Order).add(order)
    return str(order.id)


class TestOrderLifecycleCommands:
    def test_full_lifecycle(self):
        order_id = _placed_order()
        for command in (ConfirmOrder, ShipOrder, DeliverOrder):
            current_domain.process(command(order_id=order_id), asynchronous=False)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.DELIVERED.value

    def test_cancel_placed_order(self):
        order_id = _placed_order()
        current_domain.process(CancelOrder(order_id=order_id, reason="Ordered twice"), asynchronous=False)

        order = current_domain.repository_for(Order).get(order_id)
        assert order.status == OrderStatus.CANCELLED.value
        assert order.cancellation_reason == "Ordered twice"

    def test_illegal_transition(self):
        order_id = _placed_order()
        with pytest.raises(InvalidState):
            current_domain.process(DeliverOrder(order_id=order_id), asynchronous=False)

    def test_unknown_order(self):
        with pytest.raises(NotFound):
            current_domain.process(ConfirmOrder(order_id="missing"), asynchronous=False)


class TestGetOrder:
    def test_owner_can_read_order(self):
        order_id = _placed_order()
        assert get_order("user-001", order_id).to_dict()["status"] == "PLACED"

    def test_other_users_get_not_found(self):
        order_id = _placed_order()
        with pytest.raises(NotFound):
            get_order("user-002", order_id)

"""Order aggregate: an immutable record of the lines converted at checkout.

State Machine:
    PLACED → CONFIRMED → SHIPPED → DELIVERED
    CANCELLED (from PLACED, CONFIRMED, SHIPPED)

Lines, totals, contact and delivery address are snapshots copied at
placement; nothing on the order references live cart, catalog or address
book records.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, ValueObject

from storefront.domain import storefront
from storefront.errors import InvalidState
from storefront.order.events import OrderCancelled, OrderConfirmed, OrderDelivered, OrderPlaced, OrderShipped


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PLACED = "PLACED"
    CONFIRMED = "CONFIRMED"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


class PaymentMethod(Enum):
    COD = "COD"


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"


_VALID_TRANSITIONS = {
    OrderStatus.PLACED: {OrderStatus.CONFIRMED, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: set(),  # Terminal
    OrderStatus.CANCELLED: set(),  # Terminal
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class ContactDetails:
    name = String(required=True, max_length=100)
    phone = String(required=True, max_length=20)
    email = String(max_length=254)


@storefront.value_object(part_of="Order")
class DeliveryAddress:
    """Copy of the address book entry the order ships to."""

    full_name = String(required=True, max_length=100)
    phone = String(required=True, max_length=20)
    pincode = String(required=True, max_length=12)
    state = String(required=True, max_length=100)
    city = String(required=True, max_length=100)
    address_line1 = String(required=True, max_length=255)
    address_line2 = String(max_length=255)
    landmark = String(max_length=255)


@storefront.value_object(part_of="Order")
class OrderTotals:
    subtotal = Float(min_value=0.0, default=0.0)
    mrp_total = Float(min_value=0.0, default=0.0)
    savings = Float(min_value=0.0, default=0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderLine:
    product_id = Identifier(required=True)
    product_code = String(max_length=50)
    variant_id = Identifier()
    color_key = String(max_length=50)
    quantity = Integer(required=True, min_value=1)
    title = String(max_length=255)
    image = String(max_length=500)
    mrp = Float(min_value=0.0, default=0.0)
    sale_price = Float(min_value=0.0, default=0.0)
    line_total = Float(min_value=0.0, default=0.0)


# ---------------------------------------------------------------------------
# Aggregate
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    lines = HasMany(OrderLine)
    totals = ValueObject(OrderTotals)
    contact = ValueObject(ContactDetails)
    shipping_address = ValueObject(DeliveryAddress)
    payment_method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    status = String(choices=OrderStatus, default=OrderStatus.PLACED.value)
    cancellation_reason = String(max_length=500)
    placed_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def place_cod(cls, user_id, checkout_lines, totals, contact, shipping_address):
        """Create a PLACED cash-on-delivery order from validated checkout lines."""
        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            lines=[
                OrderLine(
                    product_id=line.product_id,
                    product_code=line.product_code,
                    variant_id=line.variant_id,
                    color_key=line.color_key,
                    quantity=line.quantity,
                    title=line.title,
                    image=line.image,
                    mrp=line.mrp,
                    sale_price=line.sale_price,
                    line_total=line.line_total,
                )
                for line in checkout_lines
            ],
            totals=OrderTotals(subtotal=totals.subtotal, mrp_total=totals.mrp_total, savings=totals.savings),
            contact=contact,
            shipping_address=shipping_address,
            payment_method=PaymentMethod.COD.value,
            payment_status=PaymentStatus.PENDING.value,
            status=OrderStatus.PLACED.value,
            placed_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                line_count=len(order.lines),
                subtotal=totals.subtotal,
                payment_method=PaymentMethod.COD.value,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State machine
    # -------------------------------------------------------------------
    def _transition_to(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise InvalidState(f"Cannot move an order from {current.value} to {target_status.value}")
        self.status = target_status.value
        now = datetime.now(UTC)
        self.updated_at = now
        return current, now

    def confirm(self):
        _, now = self._transition_to(OrderStatus.CONFIRMED)
        self.raise_(OrderConfirmed(order_id=str(self.id), confirmed_at=now))

    def ship(self):
        _, now = self._transition_to(OrderStatus.SHIPPED)
        self.raise_(OrderShipped(order_id=str(self.id), shipped_at=now))

    def deliver(self):
        _, now = self._transition_to(OrderStatus.DELIVERED)
        # Cash is collected on the doorstep
        self.payment_status = PaymentStatus.PAID.value
        self.raise_(OrderDelivered(order_id=str(self.id), delivered_at=now))

    def cancel(self, reason=None):
        previous, now = self._transition_to(OrderStatus.CANCELLED)
        self.cancellation_reason = reason
        self.raise_(
            OrderCancelled(
                order_id=str(self.id),
                previous_status=previous.value,
                reason=reason,
                cancelled_at=now,
            )
        )

    def to_dict(self):
        return {
            "id": str(self.id),
            "userId": str(self.user_id),
            "status": self.status,
            "paymentMethod": self.payment_method,
            "paymentStatus": self.payment_status,
            "items": [
                {
                    "productId": str(line.product_id),
                    "productCode": line.product_code,
                    "variantId": str(line.variant_id) if line.variant_id else None,
                    "colorKey": line.color_key,
                    "qty": line.quantity,
                    "title": line.title,
                    "image": line.image,
                    "mrp": line.mrp,
                    "salePrice": line.sale_price,
                    "lineTotal": line.line_total,
                }
                for line in self.lines
            ],
            "totals": {
                "subtotal": self.totals.subtotal,
                "mrpTotal": self.totals.mrp_total,
                "savings": self.totals.savings,
            },
            "contact": {"name": self.contact.name, "phone": self.contact.phone, "email": self.contact.email},
            "shippingAddress": {
                "fullName": self.shipping_address.full_name,
                "phone": self.shipping_address.phone,
                "pincode": self.shipping_address.pincode,
                "state": self.shipping_address.state,
                "city": self.shipping_address.city,
                "addressLine1": self.shipping_address.address_line1,
                "addressLine2": self.shipping_address.address_line2,
                "landmark": self.shipping_address.landmark,
            },
            "cancellationReason": self.cancellation_reason,
            "placedAt": self.placed_at.isoformat() if self.placed_at else None,
        }

"""Post-placement order transitions: commands and handler.

Placement only ever produces PLACED orders; these commands are driven by
fulfillment tooling outside the storefront.
"""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.errors import NotFound
from storefront.order.order import Order

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class ConfirmOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class ShipOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class DeliverOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    reason = String(max_length=500)


def _load(repo, order_id):
    try:
        return repo.get(order_id)
    except ObjectNotFoundError:
        raise NotFound("Order not found") from None


@storefront.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(ConfirmOrder)
    def confirm_order(self, command):
        repo = current_domain.repository_for(Order)
        order = _load(repo, command.order_id)
        order.confirm()
        repo.add(order)
        logger.info("order_confirmed", order_id=command.order_id)

    @handle(ShipOrder)
    def ship_order(self, command):
        repo = current_domain.repository_for(Order)
        order = _load(repo, command.order_id)
        order.ship()
        repo.add(order)
        logger.info("order_shipped", order_id=command.order_id)

    @handle(DeliverOrder)
    def deliver_order(self, command):
        repo = current_domain.repository_for(Order)
        order = _load(repo, command.order_id)
        order.deliver()
        repo.add(order)
        logger.info("order_delivered", order_id=command.order_id)

    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = _load(repo, command.order_id)
        order.cancel(reason=command.reason)
        repo.add(order)
        logger.info("order_cancelled", order_id=command.order_id, reason=command.reason)


def get_order(user_id: str, order_id: str) -> Order:
    """Return the order if it belongs to ``user_id``; other users see NotFound."""
    order = _load(current_domain.repository_for(Order), order_id)
    if str(order.user_id) != str(user_id):
        raise NotFound("Order not found")
    return order

"""Address book management: commands, handler and listing."""

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.customer.customer import OPTIONAL_ADDRESS_FIELDS, REQUIRED_ADDRESS_FIELDS, Customer
from storefront.domain import storefront
from storefront.errors import NotFound

logger = structlog.get_logger(__name__)

ADDRESS_FIELDS = REQUIRED_ADDRESS_FIELDS + OPTIONAL_ADDRESS_FIELDS


@storefront.command(part_of="Customer")
class AddAddress:
    user_id: Identifier(required=True)
    full_name: String(max_length=100)
    phone: String(max_length=20)
    pincode: String(max_length=12)
    state: String(max_length=100)
    city: String(max_length=100)
    address_line1: String(max_length=255)
    address_line2: String(max_length=255)
    landmark: String(max_length=255)
    make_default: Boolean(default=False)


@storefront.command(part_of="Customer")
class UpdateAddress:
    """Modify fields of an existing address; omitted fields are left unchanged."""

    user_id: Identifier(required=True)
    address_id: Identifier(required=True)
    full_name: String(max_length=100)
    phone: String(max_length=20)
    pincode: String(max_length=12)
    state: String(max_length=100)
    city: String(max_length=100)
    address_line1: String(max_length=255)
    address_line2: String(max_length=255)
    landmark: String(max_length=255)
    make_default: Boolean(default=False)


@storefront.command(part_of="Customer")
class SetDefaultAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


@storefront.command(part_of="Customer")
class RemoveAddress:
    user_id: Identifier(required=True)
    address_id: Identifier(required=True)


def load_customer(repo, user_id, create=False):
    try:
        return repo.get(user_id)
    except ObjectNotFoundError:
        if create:
            return Customer.create(user_id=user_id)
        raise NotFound("Address not found") from None


@storefront.command_handler(part_of=Customer)
class ManageAddressesHandler:
    @handle(AddAddress)
    def add_address(self, command):
        repo = current_domain.repository_for(Customer)
        customer = load_customer(repo, command.user_id, create=True)
        address = customer.add_address(
            make_default=bool(command.make_default),
            **{field: getattr(command, field) for field in ADDRESS_FIELDS},
        )
        repo.add(customer)
        logger.info("address_added", user_id=command.user_id, address_id=str(address.id))
        return str(address.id)

    @handle(UpdateAddress)
    def update_address(self, command):
        repo = current_domain.repository_for(Customer)
        customer = load_customer(repo, command.user_id)
        changes = {field: getattr(command, field) for field in ADDRESS_FIELDS if getattr(command, field) is not None}
        customer.update_address(command.address_id, make_default=bool(command.make_default), **changes)
        repo.add(customer)
        return command.address_id

    @handle(SetDefaultAddress)
    def set_default_address(self, command):
        repo = current_domain.repository_for(Customer)
        customer = load_customer(repo, command.user_id)
        customer.set_default_address(command.address_id)
        repo.add(customer)

    @handle(RemoveAddress)
    def remove_address(self, command):
        repo = current_domain.repository_for(Customer)
        customer = load_customer(repo, command.user_id)
        customer.remove_address(command.address_id)
        repo.add(customer)
        logger.info("address_removed", user_id=command.user_id, address_id=command.address_id)


def list_addresses(user_id: str) -> list[dict]:
    """Return the user's addresses, healing a book that has lost its default."""
    repo = current_domain.repository_for(Customer)
    try:
        customer = repo.get(user_id)
    except ObjectNotFoundError:
        return []

    if customer.ensure_default_address():
        repo.add(customer)
        logger.info("default_address_healed", user_id=user_id, address_id=str(customer.default_address().id))

    return [address.to_dict() for address in customer.addresses]

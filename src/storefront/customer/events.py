"""Domain events for the Customer address book."""

from protean.fields import Identifier

from storefront.domain import storefront


@storefront.event(part_of="Customer")
class AddressAdded:
    __version__ = 1

    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.event(part_of="Customer")
class AddressUpdated:
    __version__ = 1

    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.event(part_of="Customer")
class AddressRemoved:
    __version__ = 1

    user_id = Identifier(required=True)
    address_id = Identifier(required=True)


@storefront.event(part_of="Customer")
class DefaultAddressChanged:
    """A different address became the default, by choice, checkout or self-heal."""

    __version__ = 1

    user_id = Identifier(required=True)
    address_id = Identifier(required=True)
    previous_default_address_id = Identifier()

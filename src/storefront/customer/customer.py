"""Customer aggregate holding a signed-in user's address book.

The user id comes from the external auth layer and doubles as the aggregate
identity. At most one address is the default; whenever addresses exist the
book converges to exactly one default.
"""

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, HasMany, Identifier, String

from storefront.customer.events import AddressAdded, AddressRemoved, AddressUpdated, DefaultAddressChanged
from storefront.domain import storefront
from storefront.errors import InvalidInput, NotFound

REQUIRED_ADDRESS_FIELDS = ("full_name", "phone", "pincode", "state", "city", "address_line1")
OPTIONAL_ADDRESS_FIELDS = ("address_line2", "landmark")


def _clean(fields: dict, partial=False) -> dict:
    cleaned = {}
    for name in REQUIRED_ADDRESS_FIELDS + OPTIONAL_ADDRESS_FIELDS:
        if partial and name not in fields:
            continue
        value = fields.get(name)
        value = value.strip() if isinstance(value, str) else value
        if name in REQUIRED_ADDRESS_FIELDS and not value:
            raise InvalidInput(f"{name.replace('_', ' ').capitalize()} is required", field=name)
        cleaned[name] = value or None
    return cleaned


@storefront.entity(part_of="Customer")
class Address:
    """A delivery address in the user's address book."""

    full_name: String(required=True, max_length=100)
    phone: String(required=True, max_length=20)
    pincode: String(required=True, max_length=12)
    state: String(required=True, max_length=100)
    city: String(required=True, max_length=100)
    address_line1: String(required=True, max_length=255)
    address_line2: String(max_length=255)
    landmark: String(max_length=255)
    is_default: Boolean(default=False)

    def to_dict(self):
        return {
            "id": str(self.id),
            "fullName": self.full_name,
            "phone": self.phone,
            "pincode": self.pincode,
            "state": self.state,
            "city": self.city,
            "addressLine1": self.address_line1,
            "addressLine2": self.address_line2,
            "landmark": self.landmark,
            "isDefault": bool(self.is_default),
        }


@storefront.aggregate
class Customer:
    user_id: Identifier(identifier=True)
    addresses: HasMany(Address)

    @invariant.post
    def at_most_one_default_address(self):
        defaults = [a for a in self.addresses if a.is_default]
        if len(defaults) > 1:
            raise ValidationError({"addresses": ["Only one address can be marked as default"]})

    @classmethod
    def create(cls, user_id):
        return cls(user_id=user_id)

    def find_address(self, address_id):
        return next((a for a in self.addresses if str(a.id) == str(address_id)), None)

    def default_address(self):
        return next((a for a in self.addresses if a.is_default), None)

    def _address_or_not_found(self, address_id):
        address = self.find_address(address_id)
        if address is None:
            raise NotFound("Address not found")
        return address

    def add_address(self, make_default=False, **fields):
        fields = _clean(fields)

        # First address is always default
        if not self.addresses:
            make_default = True

        with atomic_change(self):
            if make_default:
                for addr in self.addresses:
                    if addr.is_default:
                        addr.is_default = False

            address = Address(is_default=make_default, **fields)
            self.add_addresses(address)

        self.raise_(AddressAdded(user_id=self.user_id, address_id=str(address.id)))
        return address

    def update_address(self, address_id, make_default=False, **fields):
        address = self._address_or_not_found(address_id)
        for field, value in _clean(fields, partial=True).items():
            setattr(address, field, value)
        self.raise_(AddressUpdated(user_id=self.user_id, address_id=str(address.id)))

        if make_default:
            self.set_default_address(address.id)
        return address

    def remove_address(self, address_id):
        address = self._address_or_not_found(address_id)
        was_default = address.is_default

        with atomic_change(self):
            self.remove_addresses(address)

            # If removed address was default, promote the first remaining
            if was_default and self.addresses:
                self.addresses[0].is_default = True

        self.raise_(AddressRemoved(user_id=self.user_id, address_id=str(address_id)))

    def set_default_address(self, address_id):
        address = self._address_or_not_found(address_id)
        previous = self.default_address()
        if previous is not None and str(previous.id) == str(address.id):
            return address

        with atomic_change(self):
            for addr in self.addresses:
                if addr.is_default:
                    addr.is_default = False
            address.is_default = True

        self.raise_(
            DefaultAddressChanged(
                user_id=self.user_id,
                address_id=str(address.id),
                previous_default_address_id=str(previous.id) if previous else None,
            )
        )
        return address

    def ensure_default_address(self):
        """Promote the first address when none is default. Returns True if it changed."""
        if not self.addresses or self.default_address() is not None:
            return False
        self.set_default_address(self.addresses[0].id)
        return True

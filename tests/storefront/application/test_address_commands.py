"""Application tests for address book commands and listing."""

import pytest
from protean import current_domain
from storefront.customer.addresses import (
    AddAddress,
    RemoveAddress,
    SetDefaultAddress,
    UpdateAddress,
    list_addresses,
)
from storefront.customer.customer import Address, Customer
from storefront.errors import InvalidInput, NotFound

USER = "user-001"


def _add_address(**overrides):
    fields = {
        "user_id": USER,
        "full_name": "Asha Rao",
        "phone": "9876543210",
        "pincode": "560001",
        "state": "Karnataka",
        "city": "Bengaluru",
        "address_line1": "12 MG Road",
    }
    fields.update(overrides)
    return current_domain.process(AddAddress(**fields), asynchronous=False)


class TestAddressCommands:
    def test_first_address_is_default(self):
        _add_address()
        addresses = list_addresses(USER)
        assert len(addresses) == 1
        assert addresses[0]["isDefault"] is True

    def test_missing_required_field(self):
        with pytest.raises(InvalidInput):
            _add_address(city=None)

    def test_set_default(self):
        _add_address()
        second = _add_address(city="Mysuru")

        current_domain.process(SetDefaultAddress(user_id=USER, address_id=second), asynchronous=False)

        defaults = [a["id"] for a in list_addresses(USER) if a["isDefault"]]
        assert defaults == [second]

    def test_update_with_make_default(self):
        _add_address()
        second = _add_address(city="Mysuru")

        current_domain.process(
            UpdateAddress(user_id=USER, address_id=second, landmark="Palace gate", make_default=True),
            asynchronous=False,
        )

        updated = next(a for a in list_addresses(USER) if a["id"] == second)
        assert updated["landmark"] == "Palace gate"
        assert updated["city"] == "Mysuru"
        assert updated["isDefault"] is True

    def test_remove_default_promotes_remaining(self):
        first = _add_address()
        _add_address(city="Mysuru")

        current_domain.process(RemoveAddress(user_id=USER, address_id=first), asynchronous=False)

        addresses = list_addresses(USER)
        assert len(addresses) == 1
        assert addresses[0]["isDefault"] is True

    def test_remove_unknown_address(self):
        _add_address()
        with pytest.raises(NotFound):
            current_domain.process(RemoveAddress(user_id=USER, address_id="missing"), asynchronous=False)

    def test_user_without_address_book(self):
        assert list_addresses("nobody") == []
        with pytest.raises(NotFound):
            current_domain.process(SetDefaultAddress(user_id="nobody", address_id="missing"), asynchronous=False)


class TestListAddressesSelfHeal:
    def test_book_without_default_is_healed_and_persisted(self):
        customer = Customer(
            user_id=USER,
            addresses=[
                Address(
                    full_name="Asha Rao",
                    phone="9876543210",
                    pincode="560001",
                    state="Karnataka",
                    city=city,
                    address_line1="12 MG Road",
                )
                for city in ("Bengaluru", "Mysuru")
            ],
        )
        current_domain.repository_for(Customer).add(customer)

        addresses = list_addresses(USER)

        assert [a["isDefault"] for a in addresses].count(True) == 1
        stored = current_domain.repository_for(Customer).get(USER)
        assert len([a for a in stored.addresses if a.is_default]) == 1

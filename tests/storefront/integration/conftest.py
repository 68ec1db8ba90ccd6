import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from storefront.api.handlers import register_error_handlers
from storefront.api.routes import address_router, cart_router, checkout_router, order_router
from storefront.identity.owner import USER_HEADER

ADDRESS = {
    "fullName": "Asha Rao",
    "phone": "9876543210",
    "pincode": "560001",
    "state": "Karnataka",
    "city": "Bengaluru",
    "addressLine1": "12 MG Road",
}


@pytest.fixture()
def app():
    app = FastAPI()
    app.include_router(cart_router)
    app.include_router(checkout_router)
    app.include_router(order_router)
    app.include_router(address_router)
    register_error_handlers(app)
    return app


@pytest.fixture()
def client(app):
    """An anonymous shopper; the guest cookie sticks to the client."""
    return TestClient(app)


@pytest.fixture()
def user_client(app):
    """A signed-in shopper as seen behind the auth layer."""
    return TestClient(app, headers={USER_HEADER: "user-001"})


@pytest.fixture()
def address_id(user_client):
    response = user_client.post("/addresses", json=ADDRESS)
    assert response.status_code == 201
    return response.json()["items"][0]["id"]

"""Storefront load test journeys.

Two stateful SequentialTaskSet journeys: a guest who browses into a cart
and leaves, and a signed-in shopper who checks out part of the cart. A
third user hammers a single cart to exercise concurrent write retries.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import address_data, contact_data, honey_line, tee_line, user_id
from loadtests.helpers.response import extract_error_detail
from loadtests.helpers.state import ShopperState


def _line_ids(resp):
    return [item["id"] for item in resp.json()["items"]]


class GuestBrowseJourney(SequentialTaskSet):
    """View Cart -> Add Tee -> Add Honey -> Change Quantity -> Remove Item.

    The guest cookie issued on the first request identifies the cart for
    the rest of the journey.
    """

    def on_start(self):
        self.client.cookies.clear()
        self.state = ShopperState()

    @task
    def view_cart(self):
        with self.client.get("/cart", catch_response=True, name="GET /cart") as resp:
            if resp.status_code != 200:
                resp.failure(f"View cart failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def add_tee(self):
        with self.client.post("/cart/add", json=tee_line(), catch_response=True, name="POST /cart/add") as resp:
            if resp.status_code == 200:
                self.state.line_ids = _line_ids(resp)
            else:
                resp.failure(f"Add tee failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def add_honey(self):
        with self.client.post("/cart/add", json=honey_line(), catch_response=True, name="POST /cart/add") as resp:
            if resp.status_code == 200:
                self.state.line_ids = _line_ids(resp)
            else:
                resp.failure(f"Add honey failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def change_quantity(self):
        if not self.state.line_ids:
            return
        payload = {"itemId": self.state.line_ids[-1], "qty": random.randint(1, 4)}
        with self.client.patch("/cart/qty", json=payload, catch_response=True, name="PATCH /cart/qty") as resp:
            # Short stock is an expected business outcome
            if resp.status_code not in (200, 409):
                resp.failure(f"Set quantity failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def remove_item(self):
        if not self.state.line_ids:
            return
        line_id = self.state.line_ids.pop(0)
        with self.client.delete(
            f"/cart/item/{line_id}", catch_response=True, name="DELETE /cart/item/{id}"
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Remove item failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class SelectiveCheckoutJourney(SequentialTaskSet):
    """Add Address -> Add Two Lines -> Deselect One -> Summary -> Place COD Order -> Read Order."""

    def on_start(self):
        self.client.cookies.clear()
        self.state = ShopperState(user_id=user_id())

    @task
    def add_address(self):
        with self.client.post(
            "/addresses",
            json=address_data(),
            headers=self.state.headers,
            catch_response=True,
            name="POST /addresses",
        ) as resp:
            if resp.status_code == 201:
                self.state.address_id = resp.json()["items"][0]["id"]
            else:
                resp.failure(f"Add address failed: {resp.status_code}: {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def fill_cart(self):
        for line in (tee_line(), honey_line()):
            with self.client.post(
                "/cart/add",
                json=line,
                headers=self.state.headers,
                catch_response=True,
                name="POST /cart/add",
            ) as resp:
                if resp.status_code == 200:
                    self.state.line_ids = _line_ids(resp)
                else:
                    resp.failure(f"Add to cart failed: {resp.status_code}: {extract_error_detail(resp)}")
                    self.interrupt()

    @task
    def deselect_one(self):
        payload = {"itemId": self.state.line_ids[0], "selected": False}
        with self.client.patch(
            "/cart/item/select",
            json=payload,
            headers=self.state.headers,
            catch_response=True,
            name="PATCH /cart/item/select",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Deselect failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def summary(self):
        with self.client.get(
            "/checkout/summary", headers=self.state.headers, catch_response=True, name="GET /checkout/summary"
        ) as resp:
            if resp.status_code not in (200, 409):
                resp.failure(f"Summary failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def place_order(self):
        payload = {"addressId": self.state.address_id, "contact": contact_data()}
        with self.client.post(
            "/checkout/cod",
            json=payload,
            headers=self.state.headers,
            catch_response=True,
            name="POST /checkout/cod",
        ) as resp:
            if resp.status_code == 201:
                self.state.order_id = resp.json()["orderId"]
            elif resp.status_code != 409:
                resp.failure(f"Place order failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def read_order(self):
        if self.state.order_id is None:
            self.interrupt()
            return
        with self.client.get(
            f"/orders/{self.state.order_id}",
            headers=self.state.headers,
            catch_response=True,
            name="GET /orders/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Read order failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class ShopperUser(HttpUser):
    """Browsing guests outnumber shoppers who complete a checkout."""

    wait_time = between(0.5, 3.0)
    tasks = {
        GuestBrowseJourney: 3,
        SelectiveCheckoutJourney: 1,
    }


class HotCartUser(HttpUser):
    """Many users writing to one cart, as a shopper with several tabs open would."""

    wait_time = between(0.05, 0.2)
    shared_user_id = "lt-hot-cart"

    @task
    def add_honey(self):
        with self.client.post(
            "/cart/add",
            json={"productId": "demo-honey", "qty": 1},
            headers={"X-User-Id": self.shared_user_id},
            catch_response=True,
            name="POST /cart/add (hot)",
        ) as resp:
            if resp.status_code not in (200, 409):
                resp.failure(f"Hot add failed: {resp.status_code}: {extract_error_detail(resp)}")

    @task
    def clear(self):
        with self.client.delete(
            "/cart/clear",
            headers={"X-User-Id": self.shared_user_id},
            catch_response=True,
            name="DELETE /cart/clear (hot)",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Hot clear failed: {resp.status_code}: {extract_error_detail(resp)}")

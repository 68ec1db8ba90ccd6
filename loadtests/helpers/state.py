"""Per-user state tracking for Locust journeys.

Each Locust user keeps its own state; nothing is shared across users.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """Tracks one simulated shopper from browsing to a placed order."""

    user_id: str | None = None
    line_ids: list[str] = field(default_factory=list)
    address_id: str | None = None
    order_id: str | None = None

    @property
    def headers(self) -> dict:
        return {"X-User-Id": self.user_id} if self.user_id else {}

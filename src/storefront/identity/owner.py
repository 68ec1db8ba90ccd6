"""Owner resolution: maps a request to the key of exactly one cart.

Authenticated requests arrive with the user id in a trusted header set by the
upstream auth layer. Anonymous visitors get a long-lived opaque guest token in
a cookie. Resolution never fails; at worst it issues a fresh guest identity.
"""

import os
from dataclasses import dataclass
from uuid import uuid4

import structlog
from fastapi import Request, Response

from storefront.errors import Unauthorized
from storefront.utils.logging import add_context

logger = structlog.get_logger(__name__)

USER_HEADER = os.environ.get("STOREFRONT_USER_HEADER", "X-User-Id")
GUEST_COOKIE = os.environ.get("STOREFRONT_GUEST_COOKIE", "guestId")
GUEST_COOKIE_MAX_AGE = int(os.environ.get("STOREFRONT_GUEST_COOKIE_MAX_AGE", str(30 * 24 * 60 * 60)))
SECURE_COOKIES = os.environ.get("STOREFRONT_SECURE_COOKIES", "").lower() in ("1", "true", "yes")


def user_owner_key(user_id: str) -> str:
    return f"u:{user_id}"


def guest_owner_key(guest_id: str) -> str:
    return f"g:{guest_id}"


@dataclass(frozen=True)
class Owner:
    owner_key: str
    user_id: str | None = None
    guest_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @classmethod
    def for_user(cls, user_id: str) -> "Owner":
        return cls(owner_key=user_owner_key(user_id), user_id=user_id)

    @classmethod
    def for_guest(cls, guest_id: str) -> "Owner":
        return cls(owner_key=guest_owner_key(guest_id), guest_id=guest_id)


def guest_token(request: Request) -> str | None:
    token = (request.cookies.get(GUEST_COOKIE) or "").strip()
    return token or None


def issue_guest_cookie(response: Response, guest_id: str) -> None:
    response.set_cookie(
        GUEST_COOKIE,
        guest_id,
        max_age=GUEST_COOKIE_MAX_AGE,
        httponly=True,
        samesite="lax",
        secure=SECURE_COOKIES,
    )


def forget_guest_cookie(response: Response) -> None:
    response.delete_cookie(GUEST_COOKIE, httponly=True, samesite="lax", secure=SECURE_COOKIES)


def resolve_owner(request: Request, response: Response) -> Owner:
    """FastAPI dependency returning the request's owner.

    The result is cached on ``request.state`` so every use within one request
    sees the same owner, including a guest token issued moments earlier.
    """
    cached = getattr(request.state, "owner", None)
    if cached is not None:
        return cached

    user_id = (request.headers.get(USER_HEADER) or "").strip()
    if user_id:
        owner = Owner.for_user(user_id)
    else:
        guest_id = guest_token(request)
        if guest_id is None:
            guest_id = uuid4().hex
            issue_guest_cookie(response, guest_id)
            logger.info("guest_identity_issued", guest_id=guest_id)
        owner = Owner.for_guest(guest_id)

    request.state.owner = owner
    add_context(owner_key=owner.owner_key)
    return owner


def require_user(request: Request, response: Response) -> Owner:
    """FastAPI dependency for endpoints that need an authenticated owner."""
    owner = resolve_owner(request, response)
    if not owner.is_authenticated:
        raise Unauthorized("Please sign in to continue")
    return owner

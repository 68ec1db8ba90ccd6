"""Response error extraction for load test logging.

Storefront errors share one body shape: ``{"message": "...", ...details}``,
where details may carry ``field``, ``available`` or ``lineId``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a compact, human-readable error message from an API response."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    if not isinstance(body, dict) or "message" not in body:
        return str(body)[:300]

    details = [f"{key}={value}" for key, value in body.items() if key not in ("message", "errors")]
    return " | ".join([body["message"], *details])

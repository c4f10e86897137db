"""Response error extraction for load test observability.

Parses Storefront API error responses into human-readable messages.
Handles two response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Storefront errors (400/401/404/409/503): {"code": "...", "message": "..."}
  or FastAPI's {"detail": "msg"}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response.

    Returns a compact string suitable for Locust failure messages and log lines.
    Gracefully handles unparseable bodies and missing fields.
    """
    try:
        body = response.json()
    except ValueError:
        # Not JSON — return raw text, truncated
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    # Pydantic validation errors: {"detail": [{"loc": [...], "msg": "..."}]}
    if "detail" in body and isinstance(body["detail"], list):
        parts = []
        for err in body["detail"]:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)

    # Storefront errors: {"code": "insufficient_stock", "message": "..."}
    if "code" in body:
        return f"{body['code']}: {body.get('message', '')}"

    if "detail" in body:
        return str(body["detail"])

    # Unknown shape — stringify and truncate
    return str(body)[:300]


def is_expected_conflict(response: Response) -> bool:
    """True for the stock and cart outcomes a busy storefront produces normally."""
    if response.status_code not in (400, 404, 409):
        return False
    try:
        code = response.json().get("code")
    except ValueError:
        return False
    return code in {"insufficient_stock", "empty_cart", "product_not_found", "item_not_in_cart"}

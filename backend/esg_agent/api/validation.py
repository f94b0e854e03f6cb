"""API request validation utilities."""
import re
from fastapi import HTTPException


def validate_company_id(company_id: str) -> str:
    """Validate an opaque company id from the request path.

    Args:
        company_id: Raw id string from request

    Returns:
        Stripped id

    Raises:
        HTTPException: If the id is empty or malformed
    """
    if not company_id or not company_id.strip():
        raise HTTPException(status_code=400, detail="Company id cannot be empty")

    company_id = company_id.strip()

    # Ids are opaque keys: 1-64 chars of letters, digits, dashes, underscores
    # Examples: 65f1c2a9e4b0d3a1f2c3d4e5, ongc, reliance-industries
    if not re.match(r'^[A-Za-z0-9_\-]{1,64}$', company_id):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid company id: '{company_id}'. Use 1-64 letters, digits, '-' or '_'."
        )

    return company_id


def parse_peer_ids(raw: str | None) -> list[str] | None:
    """Split a comma-separated peer id list, validating each id. Empty -> None."""
    if not raw:
        return None
    ids = [validate_company_id(part) for part in raw.split(",") if part.strip()]
    return ids or None

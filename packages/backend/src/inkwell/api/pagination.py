"""Query-string pagination shared by the list routes."""

from inkwell.schemas.common import PageParams
from inkwell.validation import validate_payload


def page_params(page: int = 1, limit: int = 10) -> PageParams:
    """FastAPI dependency — ?page=&limit= checked against PageParams' rules."""
    return validate_payload(PageParams, {"page": page, "limit": limit})

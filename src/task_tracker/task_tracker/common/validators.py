from __future__ import annotations

from typing import Any

from ..core.constants import MISSING_TENANT_MESSAGE, RESERVED_SUBDOMAIN
from ..core.exceptions import ValidationError


def require_non_empty(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    return value.strip()


def require_tenant(subdomain: Any) -> str:
    """Return a usable tenant key; the reserved landing subdomain is not one."""
    if not isinstance(subdomain, str) or not subdomain.strip() or subdomain.strip() == RESERVED_SUBDOMAIN:
        raise ValidationError(MISSING_TENANT_MESSAGE)
    return subdomain.strip()


def require_int_list(values: Any, message: str) -> list[int]:
    if not isinstance(values, (list, tuple)) or not values:
        raise ValidationError(message)
    try:
        return [int(v) for v in values]
    except (TypeError, ValueError):
        raise ValidationError(message)

"""Reusable attribute validators.

Plain predicates for code paths, plus Annotated types so state models can
declare constraints next to the field they apply to.
"""

from __future__ import annotations

import re
from typing import Annotated

from pydantic import AfterValidator

UUID_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_uuid(value: str) -> bool:
    """Check if a string is a hyphenated UUID."""
    return bool(UUID_PATTERN.match(value))


def validate_uuid(value: str) -> str:
    """Accept only UUID strings.

    Raises:
        ValueError: If the value is not a UUID.
    """
    if not is_uuid(value):
        raise ValueError(f"string must be a uuid: {value!r}")
    return value


def validate_oci_scope(value: str) -> str:
    """Accept only OCI registry image scopes (``oci-registry-*``).

    Raises:
        ValueError: If the scope does not name a registry image.
    """
    if not value.startswith("oci-registry-"):
        raise ValueError(f"not an OCI registry scope: {value!r}")
    return value


UUIDStr = Annotated[str, AfterValidator(validate_uuid)]
OCIScope = Annotated[str, AfterValidator(validate_oci_scope)]

"""
app/mappers/customer_hasher.py

Normalization and SHA-256 hashing of customer identifiers.
"""

from __future__ import annotations

import hashlib
from typing import Any

from app.domain.custom_audience import (
    CANONICAL_FIELD_ORDER,
    CustomerRecord,
    HashedRow,
    IdentifierField,
)


def coerce_text(value: Any) -> str:
    """
    Render a scalar as text: booleans as `true`/`false`, whole-number floats
    without a trailing `.0`.
    """

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_identifier(value: Any) -> str:
    """
    Coerce to string, lowercase and trim surrounding whitespace.
    """

    return coerce_text(value).lower().strip()


def hash_identifier(value: Any) -> str | None:
    """
    Return the lowercase hex SHA-256 digest of a normalized identifier.

    Falsy values (None, empty string) are treated as not provided and return None.
    """

    if not value:
        return None
    return hashlib.sha256(normalize_identifier(value).encode("utf-8")).hexdigest()


def hash_customer_record(record: CustomerRecord) -> tuple[tuple[IdentifierField, ...], HashedRow]:
    """
    Hash every present identifier of a record in canonical field order.

    Returns the identifier set and the matching row; both are empty when the
    record carries no identifiers.
    """

    present: list[IdentifierField] = []
    row: list[str] = []
    for identifier in CANONICAL_FIELD_ORDER:
        digest = hash_identifier(record.value_for(identifier))
        if digest is None:
            continue
        present.append(identifier)
        row.append(digest)
    return tuple(present), tuple(row)

"""
app/mappers package marker.
"""

from app.mappers.customer_hasher import hash_customer_record, hash_identifier, normalize_identifier

__all__ = [
    "hash_customer_record",
    "hash_identifier",
    "normalize_identifier",
]

"""
app/domain/custom_audience.py

Domain models for custom-audience population.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class IdentifierField(str, Enum):
    """
    Customer identifier columns accepted by the platform, in canonical order.
    """

    EMAIL = "EMAIL"
    PHONE = "PHONE"
    FN = "FN"
    LN = "LN"


CANONICAL_FIELD_ORDER: tuple[IdentifierField, ...] = (
    IdentifierField.EMAIL,
    IdentifierField.PHONE,
    IdentifierField.FN,
    IdentifierField.LN,
)

GROUP_KEY_SEPARATOR = "|"

HashedRow = tuple[str, ...]


@dataclass(frozen=True)
class CustomerRecord:
    """
    One raw customer supplied by the caller. Any field may be absent.
    """

    email: Any = None
    phone: Any = None
    first_name: Any = None
    last_name: Any = None

    def value_for(self, identifier: IdentifierField) -> Any:
        return {
            IdentifierField.EMAIL: self.email,
            IdentifierField.PHONE: self.phone,
            IdentifierField.FN: self.first_name,
            IdentifierField.LN: self.last_name,
        }[identifier]


@dataclass
class SchemaGroup:
    """
    Hashed rows sharing one field-presence signature.
    """

    key: str
    schema: tuple[str, ...]
    rows: list[HashedRow] = field(default_factory=list)


@dataclass(frozen=True)
class UploadSession:
    """
    Per-batch session metadata used by the platform to assemble multi-batch uploads.
    """

    session_id: int
    batch_seq: int
    last_batch_flag: bool
    estimated_num_total: int

    def to_payload(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "batch_seq": self.batch_seq,
            "last_batch_flag": self.last_batch_flag,
            "estimated_num_total": self.estimated_num_total,
        }


@dataclass(frozen=True)
class AudienceBatch:
    """
    A bounded slice of one schema group, sent in a single upload call.
    """

    group_key: str
    schema: tuple[str, ...]
    rows: tuple[HashedRow, ...]
    session: UploadSession


@dataclass(frozen=True)
class BatchUploadOutcome:
    """
    Result of uploading one batch.
    """

    group_key: str
    batch_seq: int
    rows_sent: int
    num_received: int
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class AudienceUploadResult:
    """
    Aggregate result for one custom-audience creation and population.
    """

    audience_id: str
    uploaded: int
    success: bool
    batches: tuple[BatchUploadOutcome, ...] = ()

    @property
    def failed_batches(self) -> int:
        return sum(1 for outcome in self.batches if not outcome.succeeded)

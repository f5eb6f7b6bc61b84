"""
app/services/audience_batching.py

Grouping of hashed customer rows by field-presence signature and splitting
of each group into bounded upload batches.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Iterable, Mapping

from app.domain.custom_audience import (
    GROUP_KEY_SEPARATOR,
    AudienceBatch,
    CustomerRecord,
    SchemaGroup,
    UploadSession,
)
from app.mappers.customer_hasher import hash_customer_record

logger = logging.getLogger(__name__)

BATCH_SIZE = 10_000


class SessionIdAllocator:
    """
    Hands out session ids that are unique across every batch of one request.

    Ids are `epoch_ms * 1000 + n` where `n` counts allocations, so batches
    produced within the same millisecond never collide.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._base = int(clock() * 1000) * 1000
        self._counter = 0

    def next_id(self) -> int:
        session_id = self._base + self._counter
        self._counter += 1
        return session_id


def group_key_for(schema: Iterable[str]) -> str:
    return GROUP_KEY_SEPARATOR.join(schema)


def group_records(records: Iterable[CustomerRecord]) -> dict[str, SchemaGroup]:
    """
    Partition records into schema groups keyed by which identifiers they carry.

    Records without any identifier are dropped. Groups keep the order in which
    their signature was first seen.
    """

    groups: dict[str, SchemaGroup] = {}
    dropped = 0
    for record in records:
        identifiers, row = hash_customer_record(record)
        if not row:
            dropped += 1
            continue

        schema = tuple(identifier.value for identifier in identifiers)
        key = group_key_for(schema)
        group = groups.get(key)
        if group is None:
            group = SchemaGroup(key=key, schema=schema)
            groups[key] = group
        group.rows.append(row)

    if dropped:
        logger.info("Dropped customer records without identifiers count=%s", dropped)
    return groups


def split_group(
    group: SchemaGroup,
    *,
    session_ids: SessionIdAllocator,
    batch_size: int = BATCH_SIZE,
) -> list[AudienceBatch]:
    """
    Split one group into contiguous batches of at most `batch_size` rows.
    """

    if batch_size < 1:
        raise ValueError("batch_size must be at least 1.")

    total = len(group.rows)
    batches: list[AudienceBatch] = []
    for index, start in enumerate(range(0, total, batch_size)):
        end = start + batch_size
        batches.append(
            AudienceBatch(
                group_key=group.key,
                schema=group.schema,
                rows=tuple(group.rows[start:end]),
                session=UploadSession(
                    session_id=session_ids.next_id(),
                    batch_seq=index + 1,
                    last_batch_flag=end >= total,
                    # per group, not across the whole request
                    estimated_num_total=total,
                ),
            )
        )
    return batches


def build_batches(
    groups: Mapping[str, SchemaGroup],
    *,
    batch_size: int = BATCH_SIZE,
    session_ids: SessionIdAllocator | None = None,
) -> list[AudienceBatch]:
    """
    Flatten all groups into one ordered batch list: group order first, then row order.
    """

    allocator = session_ids or SessionIdAllocator()
    batches: list[AudienceBatch] = []
    for group in groups.values():
        batches.extend(split_group(group, session_ids=allocator, batch_size=batch_size))
    return batches

"""
Key-value store over the ``kv_store`` table.

Every entity is a JSON value under a prefixed string key. Rows carry a
``version`` that is bumped on each write so callers can do optimistic
compare-and-set around read-modify-write sequences. Nothing here commits;
the caller owns the transaction.
"""

import logging
from typing import Any, Dict, List, NamedTuple, Optional

from sqlalchemy import delete, insert, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from samudra.core.errors import StateConflictError
from samudra.models.kv import KVEntry
from samudra.utils.time import utc_now

logger = logging.getLogger(__name__)

COUNTER_MAX_ATTEMPTS = 5


class StoredValue(NamedTuple):
    key: str
    value: Any
    version: int


async def get_entry(session: AsyncSession, key: str) -> Optional[StoredValue]:
    """Read a key together with its current version."""
    result = await session.execute(
        select(KVEntry.key, KVEntry.value, KVEntry.version).where(KVEntry.key == key)
    )
    row = result.first()
    if row is None:
        return None
    return StoredValue(row.key, row.value, row.version)


async def get_value(session: AsyncSession, key: str, default: Any = None) -> Any:
    entry = await get_entry(session, key)
    return entry.value if entry is not None else default


async def set_value(session: AsyncSession, key: str, value: Any) -> None:
    """Insert or overwrite a key."""
    result = await session.execute(
        update(KVEntry)
        .where(KVEntry.key == key)
        .values(value=value, version=KVEntry.version + 1, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        await session.execute(
            insert(KVEntry).values(key=key, value=value, version=1, updated_at=utc_now())
        )


async def compare_and_set(
    session: AsyncSession,
    key: str,
    expected_version: int,
    value: Any
) -> bool:
    """
    Overwrite ``key`` only if its version is still ``expected_version``.

    Returns:
        True when the write happened, False when another writer got there first
    """
    result = await session.execute(
        update(KVEntry)
        .where(KVEntry.key == key, KVEntry.version == expected_version)
        .values(value=value, version=expected_version + 1, updated_at=utc_now())
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


async def delete_key(session: AsyncSession, key: str) -> bool:
    result = await session.execute(
        delete(KVEntry)
        .where(KVEntry.key == key)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount > 0


async def get_by_prefix(session: AsyncSession, prefix: str) -> List[StoredValue]:
    """All entries whose key starts with ``prefix``, in key order."""
    result = await session.execute(
        select(KVEntry.key, KVEntry.value, KVEntry.version)
        .where(KVEntry.key.startswith(prefix, autoescape=True))
        .order_by(KVEntry.key)
    )
    return [StoredValue(row.key, row.value, row.version) for row in result.all()]


async def ensure_keys(session: AsyncSession, defaults: Dict[str, Any]) -> None:
    """Insert each key that does not exist yet with its default value."""
    for key, value in defaults.items():
        if await get_entry(session, key) is None:
            await session.execute(
                insert(KVEntry).values(key=key, value=value, version=1, updated_at=utc_now())
            )
            logger.info("Initialised %s", key)


async def increment_counter(session: AsyncSession, key: str, amount: float) -> float:
    """
    Add ``amount`` to a numeric counter inside the caller's transaction.

    Uses compare-and-set so a concurrent increment is never lost. Counters
    should exist beforehand (see ``ensure_keys``); creating one here is
    only safe with a single writer.
    """
    for _ in range(COUNTER_MAX_ATTEMPTS):
        entry = await get_entry(session, key)
        if entry is None:
            await session.execute(
                insert(KVEntry).values(key=key, value=amount, version=1, updated_at=utc_now())
            )
            return amount

        new_total = (entry.value or 0) + amount
        if await compare_and_set(session, key, entry.version, new_total):
            return new_total
        logger.debug("Counter %s changed concurrently, re-reading", key)

    raise StateConflictError(f"Could not update counter {key}")

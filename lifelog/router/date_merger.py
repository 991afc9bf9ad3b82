"""
Dual-Date Query Merger

A record's creation time may be stored as an ISO-8601 string or as a native
store timestamp, and one range query can only match one of the two. The
merger runs both representation-specific queries concurrently and merges the
results by record ID, so every direct executor sees each record exactly once
regardless of how it was written.

Both halves must succeed. An error or timeout on either half cancels the
other and fails the whole merge; a partial merge is never returned.
"""

import asyncio
import logging
from typing import Dict, Optional

from ..common.errors import StoreQueryError
from ..common.firestore_store import StoreRecord, StructuredStore
from ..common.schemas.query import DataType, DateRange, TimestampRepresentation

logger = logging.getLogger("lifelog.router.date_merger")


class DualDateQueryMerger:
    """Concurrent string + native range queries, merged by record ID"""

    def __init__(self, store: StructuredStore, timeout_seconds: float = 10.0):
        self._store = store
        self._timeout = timeout_seconds

    async def merge(
        self,
        user_id: str,
        data_type: DataType,
        date_range: Optional[DateRange] = None,
        activity: Optional[str] = None,
        timeout: Optional[float] = None,
        executor: str = "merge",
    ) -> Dict[str, StoreRecord]:
        """
        Fetch every record of a type in a range, across both timestamp encodings.

        Args:
            user_id: Owner of the records
            data_type: Selects the collection
            date_range: Closed UTC range; None means unbounded
            activity: Restrict to one activity tag
            timeout: Seconds for both halves together (default from construction)
            executor: Name of the calling executor, for error context

        Returns:
            Records keyed by ID

        Raises:
            StoreQueryError: either half failed or the timeout elapsed
        """
        timeout = self._timeout if timeout is None else timeout
        start = date_range.start if date_range else None
        end = date_range.end if date_range else None
        range_text = date_range.describe() if date_range else "unbounded"

        tasks = [
            asyncio.ensure_future(
                self._store.query_range(user_id, data_type, representation, start=start, end=end, activity=activity)
            )
            for representation in (TimestampRepresentation.STRING, TimestampRepresentation.NATIVE)
        ]

        try:
            string_records, native_records = await asyncio.wait_for(asyncio.gather(*tasks), timeout=timeout)
        except asyncio.TimeoutError:
            await self._cancel(tasks)
            logger.error(
                "%s timed out after %.1fs (type=%s, range=%s)", executor, timeout, data_type.value, range_text
            )
            raise StoreQueryError(
                f"Store query timed out after {timeout}s",
                executor=executor,
                data_type=data_type.value,
                date_range=range_text,
            )
        except asyncio.CancelledError:
            await self._cancel(tasks)
            raise
        except Exception as e:
            await self._cancel(tasks)
            logger.error(
                "%s failed (type=%s, range=%s): %s", executor, data_type.value, range_text, e, exc_info=True
            )
            raise StoreQueryError(
                f"Store query failed: {e}",
                executor=executor,
                data_type=data_type.value,
                date_range=range_text,
            ) from e

        merged: Dict[str, StoreRecord] = {}
        for record in list(string_records) + list(native_records):
            merged.setdefault(record.id, record)

        logger.debug(
            "%s merged %d string + %d native records into %d (type=%s, range=%s)",
            executor, len(string_records), len(native_records), len(merged), data_type.value, range_text,
        )
        return merged

    @staticmethod
    async def _cancel(tasks) -> None:
        """Cancel unfinished halves and wait for them to unwind"""
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

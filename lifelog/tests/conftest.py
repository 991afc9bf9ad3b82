"""Shared fixtures: a fixed reference instant and an in-memory structured store."""

import asyncio
from datetime import datetime, timezone

import pytest

from lifelog.common.firestore_store import StoreRecord, parse_timestamp, range_bounds
from lifelog.common.schemas.query import TimestampRepresentation

# Wednesday; the week started on Sunday 2026-10-11
NOW = datetime(2026, 10, 14, 15, 30, tzinfo=timezone.utc)


class FakeStore:
    """
    StructuredStore over a list of records.

    Like Firestore, a range query only matches creation times stored in the
    queried representation: strings for STRING, datetimes for NATIVE. String
    bounds are encoded the way FirestoreStore encodes them.
    """

    def __init__(self):
        self.records = []
        self.calls = []
        self.cancelled = []
        self.failures = {}  # representation -> exception to raise
        self.delays = {}  # representation -> seconds to wait before answering

    def add(self, record_id, data_type, created_at, user_id="user-1", **data):
        data["userId"] = user_id
        data["createdAt"] = created_at
        self.records.append(StoreRecord(id=record_id, data_type=data_type, data=data))

    async def query_range(
        self,
        user_id,
        data_type,
        representation,
        start=None,
        end=None,
        activity=None,
    ):
        self.calls.append((data_type, representation, start, end, activity))
        try:
            if self.delays.get(representation):
                await asyncio.sleep(self.delays[representation])
        except asyncio.CancelledError:
            self.cancelled.append(representation)
            raise

        if representation in self.failures:
            raise self.failures[representation]

        wanted = str if representation == TimestampRepresentation.STRING else datetime
        low, high = range_bounds(representation, start, end)
        matches = []
        for record in self.records:
            if record.data_type != data_type or record.data.get("userId") != user_id:
                continue
            if activity and record.data.get("activityTag") != activity:
                continue
            raw = record.data.get("createdAt")
            if not isinstance(raw, wanted):
                continue
            # strings compare lexicographically, as Firestore orders them
            key = raw if wanted is str else parse_timestamp(raw)
            if key < low or key > high:
                continue
            matches.append(record)
        return matches


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def fake_store():
    return FakeStore()

"""
Firestore Structured Store

Range queries over a user's records in the per-type Firestore collections.

Records were written over several generations of ingestion code, so the
creation time is stored either as an ISO-8601 string ("...Z") or as a native
Firestore timestamp. Firestore range filters only ever match values of the
same type, so each representation needs its own query; callers combine the
two halves (see lifelog.router.date_merger).
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Protocol

from google.cloud.firestore_v1.async_client import AsyncClient
from google.cloud.firestore_v1.base_query import FieldFilter

from .config import StoreConfig
from .schemas.query import DataType, TimestampRepresentation

logger = logging.getLogger("lifelog.common.firestore_store")

# Bounds that select every value of one representation and nothing else
_STRING_MIN = ""
_STRING_MAX = ""
_NATIVE_MIN = datetime(1970, 1, 1, tzinfo=timezone.utc)
_NATIVE_MAX = datetime(9999, 12, 31, 23, 59, 59, tzinfo=timezone.utc)


@dataclass
class StoreRecord:
    """One document from a per-type collection"""
    id: str
    data_type: DataType
    data: Dict[str, Any] = field(default_factory=dict)


class StructuredStore(Protocol):
    """Range-query interface the direct executors depend on"""

    async def query_range(
        self,
        user_id: str,
        data_type: DataType,
        representation: TimestampRepresentation,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        activity: Optional[str] = None,
    ) -> List[StoreRecord]:
        ...


def to_iso_z(moment: datetime) -> str:
    """Format a datetime the way ingestion writes string timestamps.

    >>> to_iso_z(datetime(2026, 10, 13, 12, 0, tzinfo=timezone.utc))
    '2026-10-13T12:00:00.000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Read a creation time in any stored representation as an aware UTC datetime.

    Accepts ISO-8601 strings, datetimes (including Firestore's
    DatetimeWithNanoseconds), and epoch seconds or milliseconds.
    Returns None for anything unreadable.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        seconds = value / 1000.0 if value > 1e11 else float(value)
        try:
            return datetime.fromtimestamp(seconds, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed.astimezone(timezone.utc)
    return None


def range_bounds(
    representation: TimestampRepresentation,
    start: Optional[datetime],
    end: Optional[datetime],
):
    """Lower/upper filter values for one representation; open ends widen to the type's extremes"""
    if representation == TimestampRepresentation.STRING:
        low = to_iso_z(start) if start else _STRING_MIN
        high = to_iso_z(end) if end else _STRING_MAX
    else:
        low = start.astimezone(timezone.utc) if start else _NATIVE_MIN
        high = end.astimezone(timezone.utc) if end else _NATIVE_MAX
    return low, high


def required_indexes(config: StoreConfig) -> List[Dict[str, Any]]:
    """Composite indexes the range queries need, in firestore.indexes.json form"""

    def _index(collection: str, fields: List[str]) -> Dict[str, Any]:
        return {
            "collectionGroup": collection,
            "queryScope": "COLLECTION",
            "fields": [{"fieldPath": f, "order": "ASCENDING"} for f in fields],
        }

    indexes = []
    for type_name, collection in sorted(config.collections.items()):
        indexes.append(_index(collection, [config.user_field, config.date_field]))
        if type_name == DataType.LOCATION.value:
            indexes.append(
                _index(collection, [config.user_field, config.activity_field, config.date_field])
            )
    return indexes


class FirestoreStore:
    """
    StructuredStore backed by Google Cloud Firestore.

    One collection per data type; every document carries the owning user ID,
    a creation time, and (for location visits) an activity tag.
    """

    def __init__(self, config: StoreConfig, client: Optional[AsyncClient] = None):
        """
        Initialize the store.

        Args:
            config: Collection and field names
            client: Existing AsyncClient; created lazily from config when omitted
        """
        self._config = config
        self._client = client

    def _ensure_client(self) -> AsyncClient:
        if self._client is None:
            self._client = AsyncClient(
                project=self._config.project or None,
                database=self._config.database,
            )
            logger.info(
                "Created Firestore client for project=%s database=%s",
                self._config.project or "<default>",
                self._config.database,
            )
        return self._client

    def collection_for(self, data_type: DataType) -> str:
        try:
            return self._config.collections[data_type.value]
        except KeyError:
            raise ValueError(f"No collection configured for data type {data_type.value}")

    async def query_range(
        self,
        user_id: str,
        data_type: DataType,
        representation: TimestampRepresentation,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        activity: Optional[str] = None,
    ) -> List[StoreRecord]:
        """
        Fetch a user's records of one type whose creation time, stored in the
        given representation, falls within [start, end].

        Args:
            user_id: Owner of the records
            data_type: Selects the collection
            representation: Which creation-time encoding to match
            start: Inclusive lower bound (open when None)
            end: Inclusive upper bound (open when None)
            activity: Restrict to one activity tag (location visits)

        Returns:
            Matching records; Firestore errors propagate to the caller
        """
        client = self._ensure_client()
        collection = self.collection_for(data_type)
        low, high = range_bounds(representation, start, end)

        query = client.collection(collection).where(
            filter=FieldFilter(self._config.user_field, "==", user_id)
        )
        if activity:
            query = query.where(filter=FieldFilter(self._config.activity_field, "==", activity))
        query = query.where(filter=FieldFilter(self._config.date_field, ">=", low))
        query = query.where(filter=FieldFilter(self._config.date_field, "<=", high))

        records = [
            StoreRecord(id=doc.id, data_type=data_type, data=doc.to_dict() or {})
            async for doc in query.stream()
        ]
        logger.debug(
            "%s %s query for user %s returned %d records",
            collection, representation.value, user_id, len(records),
        )
        return records

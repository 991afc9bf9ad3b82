"""
Error Types

I/O failures raised by the direct and vector paths. Each carries enough
context (executor, data type, date range) to debug from a single log line.
Pure analytical steps never raise; they degrade to "no intent" / "no range".
"""

from typing import Optional


class LifelogError(Exception):
    """Base class for query-core errors."""
    pass


class StoreQueryError(LifelogError):
    """A structured-store query on the direct path failed or timed out.

    Never converted into a vector search: an exact answer that could not be
    computed is reported as such.
    """

    def __init__(
        self,
        message: str,
        executor: Optional[str] = None,
        data_type: Optional[str] = None,
        date_range: Optional[str] = None,
    ):
        self.executor = executor
        self.data_type = data_type
        self.date_range = date_range
        details = ", ".join(
            f"{k}={v}"
            for k, v in (("executor", executor), ("data_type", data_type), ("date_range", date_range))
            if v
        )
        super().__init__(f"{message} [{details}]" if details else message)


class EmbeddingError(LifelogError):
    """The embedding provider failed or timed out."""
    pass


class VectorIndexError(LifelogError):
    """The vector index query failed or timed out."""
    pass

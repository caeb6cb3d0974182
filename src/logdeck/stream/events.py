"""Typed log events received from the push channel."""

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class LogEvent(BaseModel):
    """One log line emitted by a service.

    Attributes:
        seq: Monotonic sequence number assigned by the server.
        service: Name of the emitting service (exact, case-sensitive).
        timestamp: Container timestamp, if the server attached one.
            Named ``container_ts`` on the wire.
        line: The log text.

    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    seq: int
    service: str
    timestamp: str | None = Field(default=None, alias="container_ts")
    line: str

    def without_timestamp(self) -> "LogEvent":
        """Return a copy with the timestamp dropped."""
        if self.timestamp is None:
            return self
        return self.model_copy(update={"timestamp": None})


LOG_EVENT_LIST: TypeAdapter[list[LogEvent]] = TypeAdapter(list[LogEvent])

from cardtracker.models.card import (
    UNKNOWN_SET,
    CardAggregate,
    Owner,
    ParsedReference,
    Printing,
    RawCardEntry,
    SourceKind,
)
from cardtracker.models.failure import (
    ConfigError,
    FailureKind,
    FetchError,
    HttpStatusError,
    MalformedResponseError,
    RetryExhaustedError,
    TransportError,
)
from cardtracker.models.snapshot import Snapshot
from cardtracker.models.source import SourceConfig, TrackerConfig

__all__ = [
    "UNKNOWN_SET",
    "CardAggregate",
    "ConfigError",
    "FailureKind",
    "FetchError",
    "HttpStatusError",
    "MalformedResponseError",
    "Owner",
    "ParsedReference",
    "Printing",
    "RawCardEntry",
    "RetryExhaustedError",
    "Snapshot",
    "SourceConfig",
    "SourceKind",
    "TrackerConfig",
    "TransportError",
]

"""Data models and error types for race processing."""
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Optional, Tuple


SOURCE_TAG = "roadrun"


@dataclass(frozen=True)
class RaceRecord:
    """Normalized race extracted from a single detail page."""
    source_id: str
    source_url: str
    name: str
    start_at: Optional[str]
    categories: Tuple[str, ...]
    location_full: str
    entry_period_raw: str
    entry_start: Optional[str]
    entry_end: Optional[str]
    homepage: Optional[str]
    source: str = SOURCE_TAG

    def to_dict(self) -> dict:
        """Return a JSON-serializable representation."""
        data = asdict(self)
        data['categories'] = list(self.categories)
        return data


class UpsertAction(str, Enum):
    """Outcome of a single upsert."""
    CREATED = 'created'
    UPDATED = 'updated'
    SKIPPED = 'skipped'


@dataclass
class SyncResult:
    """Result of a full sync run."""
    fetched: int = 0
    created: int = 0
    updated: int = 0
    skipped: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    def record(self, action: UpsertAction) -> None:
        if action is UpsertAction.CREATED:
            self.created += 1
        elif action is UpsertAction.UPDATED:
            self.updated += 1
        else:
            self.skipped += 1


class RoadrunSyncError(Exception):
    """Base class for all sync pipeline errors."""


class ParseError(RoadrunSyncError):
    """A detail document could not be parsed."""


class ExtractionError(ParseError):
    """A detail document had no usable table rows."""


class TransportError(RoadrunSyncError):
    """A page could not be fetched."""


class StoreConfigurationError(RoadrunSyncError):
    """Notion credentials or database id are missing."""


class StoreRequestError(RoadrunSyncError):
    """Notion answered with a non-2xx status or could not be reached.

    status_code is None when no response was received.
    """

    def __init__(self, status_code: Optional[int], body: str = ''):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Notion request failed ({status_code}): {body}")

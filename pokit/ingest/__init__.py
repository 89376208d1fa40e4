"""Purchase-order ingestion pipeline and record storage."""

from .coordinator import IngestCoordinator, IngestOutcome, IngestStatus
from .conflicts import ConflictChecker
from .repository import PurchaseOrderRepository

# NOTE: PostgresRepository is not re-exported here.
# Import it from pokit.ingest.postgres_client instead.

__all__ = [
    "IngestCoordinator",
    "IngestOutcome",
    "IngestStatus",
    "ConflictChecker",
    "PurchaseOrderRepository",
]

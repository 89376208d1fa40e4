"""Conflict detection against previously stored purchase orders."""

import logging
from typing import List, Sequence

from ..records import PurchaseOrderRecord, distinct_identities
from .repository import PurchaseOrderRepository

logger = logging.getLogger(__name__)


class ConflictChecker:
    """
    Finds stored records that share a (vendor_name, model_number) pair with
    the incoming batch.

    Conflict is identity-level: a resubmission with a different price or
    quantity for the same vendor and model still conflicts, so stored records
    are never silently overwritten.
    """

    def __init__(self, repository: PurchaseOrderRepository):
        self.repository = repository

    def find_conflicts(
        self,
        records: Sequence[PurchaseOrderRecord]
    ) -> List[PurchaseOrderRecord]:
        """Return the stored records that collide with ``records`` (possibly empty)."""
        pairs = distinct_identities(records)
        if not pairs:
            return []

        existing = self.repository.find_matching(pairs)

        if existing:
            logger.info(
                f"Conflict check: {len(existing)} stored record(s) match "
                f"{len(pairs)} incoming (vendor, model) pair(s)"
            )
        return existing

"""Record repository interface consumed by the ingestion pipeline."""

from typing import List, Sequence, Tuple

from ..records import PurchaseOrderRecord


class PurchaseOrderRepository:
    """
    Abstract purchase-order store.

    Implement this interface with your actual database client (see
    PostgresRepository). Records are identified for conflict purposes by
    (vendor_name, model_number).
    """

    def find_matching(
        self,
        pairs: Sequence[Tuple[str, str]]
    ) -> List[PurchaseOrderRecord]:
        """
        Find stored records whose (vendor_name, model_number) equals any of ``pairs``.

        Must issue a single disjunctive lookup, not one query per pair.

        Args:
            pairs: (vendor_name, model_number) tuples

        Returns:
            Matching stored records (empty list if none)

        Raises:
            StorageError: If the store cannot be queried
        """
        raise NotImplementedError

    def insert_batch(
        self,
        records: Sequence[PurchaseOrderRecord]
    ) -> List[PurchaseOrderRecord]:
        """
        Insert all records, or none of them.

        Args:
            records: Complete, validated records

        Returns:
            The persisted records, in input order, with ``id`` set

        Raises:
            DuplicateRecordError: If a (vendor_name, model_number) pair already exists
            StorageError: On any other store failure
        """
        raise NotImplementedError

    def close(self) -> None:
        """Release connections held by the repository."""

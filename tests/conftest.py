"""Shared fixtures: an in-memory repository and purchase-order file writers."""

import csv
import datetime
from dataclasses import replace
from decimal import Decimal
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import pytest

from pokit.checksum import ChecksumGate, ChecksumState
from pokit.errors import DuplicateRecordError, StorageError
from pokit.ingest import IngestCoordinator, PurchaseOrderRepository
from pokit.records import PurchaseOrderRecord


CANONICAL_HEADERS = ["Date", "Vendor Name", "Model Number", "Unit Price", "Quantity"]


class InMemoryRepository(PurchaseOrderRepository):
    """Repository double that counts calls and enforces (vendor, model) uniqueness."""

    def __init__(self, records: Optional[List[PurchaseOrderRecord]] = None):
        self.records: List[PurchaseOrderRecord] = []
        self.find_calls: List[List[Tuple[str, str]]] = []
        self.insert_calls: List[List[PurchaseOrderRecord]] = []
        self.insert_error: Optional[Exception] = None
        self.find_error: Optional[Exception] = None
        self.closed = False
        for record in records or []:
            self._store(record)

    def _store(self, record: PurchaseOrderRecord) -> PurchaseOrderRecord:
        stored = replace(record, id=len(self.records) + 1)
        self.records.append(stored)
        return stored

    def find_matching(self, pairs: Sequence[Tuple[str, str]]) -> List[PurchaseOrderRecord]:
        self.find_calls.append(list(pairs))
        if self.find_error:
            raise self.find_error
        wanted = set(pairs)
        return [r for r in self.records if r.identity in wanted]

    def insert_batch(self, records: Sequence[PurchaseOrderRecord]) -> List[PurchaseOrderRecord]:
        self.insert_calls.append(list(records))
        if self.insert_error:
            raise self.insert_error
        # Uniqueness holds across stored records and within the batch itself
        seen = {r.identity for r in self.records}
        for record in records:
            if record.identity in seen:
                raise DuplicateRecordError("duplicate key value violates unique constraint")
            seen.add(record.identity)
        return [self._store(r) for r in records]

    def close(self) -> None:
        self.closed = True


def make_record(
    vendor_name: str = "Acme",
    model_number: str = "X1",
    unit_price: str = "9.99",
    quantity: int = 1,
    order_date: str = "2024-03-01",
) -> PurchaseOrderRecord:
    """Helper to create complete PurchaseOrderRecord objects for testing."""
    return PurchaseOrderRecord(
        date=datetime.date.fromisoformat(order_date),
        vendor_name=vendor_name,
        model_number=model_number,
        unit_price=Decimal(unit_price),
        quantity=quantity,
    )


def write_csv(path: Path, rows: List[List[str]], headers: Optional[List[str]] = None) -> Path:
    """Write a CSV file with the given header row and data rows."""
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(headers if headers is not None else CANONICAL_HEADERS)
        writer.writerows(rows)
    return path


@pytest.fixture
def repository():
    return InMemoryRepository()


@pytest.fixture
def checksum_state():
    return ChecksumState()


@pytest.fixture
def coordinator(repository, checksum_state):
    return IngestCoordinator(
        repository=repository,
        checksum_gate=ChecksumGate(checksum_state),
    )


@pytest.fixture
def csv_file(tmp_path):
    """Factory fixture: csv_file(rows, headers=None, name="po.csv") -> Path."""
    def _make(rows, headers=None, name="po.csv"):
        return write_csv(tmp_path / name, rows, headers)
    return _make


@pytest.fixture
def failing_repository():
    repo = InMemoryRepository()
    repo.insert_error = StorageError("connection reset by peer")
    return repo

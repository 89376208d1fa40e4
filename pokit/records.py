"""Typed purchase-order records produced by validation and returned by the repository."""

import math
from dataclasses import dataclass, field
import datetime
from decimal import Decimal
from typing import Optional, Dict, Any, Iterable, List, Tuple


@dataclass
class PurchaseOrderRecord:
    """
    A single purchase-order line item.

    Fields that failed to parse are left as ``None``; such a record is never
    eligible for persistence. ``id`` is assigned by the repository on insert.
    """
    date: Optional[datetime.date]
    vendor_name: Optional[str]
    model_number: Optional[str]
    unit_price: Optional[Decimal]
    quantity: Optional[int]
    row_number: int = 0
    id: Optional[int] = None

    @property
    def identity(self) -> Tuple[Optional[str], Optional[str]]:
        """The (vendor_name, model_number) pair used for conflict detection."""
        return (self.vendor_name, self.model_number)

    def is_complete(self) -> bool:
        return all(
            value is not None
            for value in (self.date, self.vendor_name, self.model_number,
                          self.unit_price, self.quantity)
        )

    def to_dict(self) -> Dict[str, Any]:
        """Render the record in its JSON wire form."""
        data = {
            "date": self.date.isoformat() if self.date else None,
            "vendorName": self.vendor_name,
            "modelNumber": self.model_number,
            "unitPrice": _price_to_json(self.unit_price),
            "quantity": self.quantity,
        }
        if self.id is not None:
            data["id"] = self.id
        return data


@dataclass
class InvalidRow:
    """Diagnostics for a row that failed validation."""
    row_number: int
    values: Dict[str, Any]
    errors: List[str]


@dataclass
class UploadBatch:
    """
    All records parsed from one uploaded file plus the submission-level fields.

    Lives for the duration of one request only.
    """
    submission_date: Optional[str]
    vendor_name: Optional[str]
    fingerprint: Optional[str] = None
    records: List[PurchaseOrderRecord] = field(default_factory=list)


def distinct_identities(records: Iterable[PurchaseOrderRecord]) -> List[Tuple[str, str]]:
    """Distinct (vendor_name, model_number) pairs in first-seen order."""
    seen = set()
    pairs = []
    for record in records:
        if record.identity not in seen:
            seen.add(record.identity)
            pairs.append(record.identity)
    return pairs


def _price_to_json(value: Optional[Decimal]) -> Optional[float]:
    """JSON number for a price; None when it has no finite float form."""
    if value is None or not value.is_finite():
        return None
    number = float(value)
    return number if math.isfinite(number) else None

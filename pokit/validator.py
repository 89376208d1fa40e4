"""
Row validation for purchase-order uploads.

Validation never stops at the first problem: every rule runs on every row and
all messages are collected, so the uploader sees the complete list in one
response. Parse failures are recorded as messages, never raised.
"""

import datetime
import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Optional, Tuple

from .records import InvalidRow, PurchaseOrderRecord
from .schema import (
    DEFAULT_DATE_FORMATS,
    INVALID_DATE,
    INVALID_MODEL_NUMBER,
    INVALID_QUANTITY,
    INVALID_UNIT_PRICE,
    MAX_QUANTITY,
    MAX_UNIT_PRICE,
    NEGATIVE_QUANTITY,
    NEGATIVE_UNIT_PRICE,
    REPEATED_VENDOR_MODEL,
    ROW_DATE_VENDOR_REQUIRED,
    SUBMISSION_DATE_REQUIRED,
    SUBMISSION_VENDOR_REQUIRED,
    UNIT_PRICE_SCALE,
)

logger = logging.getLogger(__name__)

_MAX_INTEGER_DIGITS = 18


@dataclass
class ValidationResult:
    """
    Outcome of validating one upload.

    ``records`` holds every row in file order, including rows with errors
    (their unparseable fields are None). ``invalid_rows`` repeats the failing
    rows with their messages for diagnostics. A non-empty ``errors`` list means
    the whole batch is rejected.
    """
    records: List[PurchaseOrderRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    invalid_rows: List[InvalidRow] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _is_blank(value: Any) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def _as_text(value: Any) -> Optional[str]:
    if _is_blank(value):
        return None
    return str(value).strip()


class RowValidator:
    """Turns field-keyed rows into typed records and collects validation errors."""

    def __init__(self, date_formats: Optional[List[str]] = None):
        self.date_formats = list(date_formats) if date_formats else list(DEFAULT_DATE_FORMATS)

    def parse_and_validate(
        self,
        raw_rows: Iterable[Dict[str, Any]],
        submission_date: Optional[str],
        submission_vendor: Optional[str],
    ) -> ValidationResult:
        """
        Validate the submission fields and every row.

        Args:
            raw_rows: Rows keyed by record field (see PurchaseOrderParser.iter_rows).
                Consumed exactly once.
            submission_date: ``date`` form field sent with the file
            submission_vendor: ``vendorName`` form field sent with the file

        Returns:
            ValidationResult with all records and all error messages. Row
            messages are prefixed with their 1-based data row number.
        """
        result = ValidationResult()

        if _is_blank(submission_date):
            result.errors.append(SUBMISSION_DATE_REQUIRED)
        if _is_blank(submission_vendor):
            result.errors.append(SUBMISSION_VENDOR_REQUIRED)

        # (vendor_name, model_number) -> first row it appeared in
        first_seen = {}

        for row_number, row in enumerate(raw_rows, start=1):
            record, row_errors = self.validate_row(row, row_number)
            if record.vendor_name is not None and record.model_number is not None:
                if record.identity in first_seen:
                    row_errors.append(REPEATED_VENDOR_MODEL.format(first_row=first_seen[record.identity]))
                else:
                    first_seen[record.identity] = row_number
            result.records.append(record)
            if row_errors:
                result.invalid_rows.append(InvalidRow(
                    row_number=row_number,
                    values=dict(row),
                    errors=row_errors,
                ))
                result.errors.extend(f"Row {row_number}: {message}" for message in row_errors)

        if result.errors:
            logger.info(
                f"Validation failed: {len(result.errors)} error(s) across "
                f"{len(result.invalid_rows)} of {len(result.records)} row(s)"
            )
        else:
            logger.debug(f"Validation passed for {len(result.records)} row(s)")

        return result

    def validate_row(
        self,
        row: Dict[str, Any],
        row_number: int = 0,
    ) -> Tuple[PurchaseOrderRecord, List[str]]:
        """Parse one row. Every rule runs even after an earlier one fails."""
        errors = []

        raw_date = row.get("date")
        vendor_name = _as_text(row.get("vendor_name"))
        order_date = None

        if _is_blank(raw_date) or vendor_name is None:
            errors.append(ROW_DATE_VENDOR_REQUIRED)
        if not _is_blank(raw_date):
            order_date = self.parse_date(raw_date)
            if order_date is None:
                errors.append(INVALID_DATE)

        raw_model = row.get("model_number")
        model_number = None
        if isinstance(raw_model, str) and raw_model.strip():
            model_number = raw_model.strip()
        else:
            errors.append(INVALID_MODEL_NUMBER)

        unit_price = parse_decimal(row.get("unit_price"))
        if unit_price is None or unit_price > MAX_UNIT_PRICE:
            errors.append(INVALID_UNIT_PRICE)
            unit_price = None
        elif unit_price < 0:
            errors.append(NEGATIVE_UNIT_PRICE)
            unit_price = None
        else:
            unit_price = unit_price.quantize(UNIT_PRICE_SCALE, rounding=ROUND_HALF_UP)

        quantity = parse_integer(row.get("quantity"))
        if quantity is None or quantity > MAX_QUANTITY:
            errors.append(INVALID_QUANTITY)
            quantity = None
        elif quantity < 0:
            errors.append(NEGATIVE_QUANTITY)
            quantity = None

        record = PurchaseOrderRecord(
            date=order_date,
            vendor_name=vendor_name,
            model_number=model_number,
            unit_price=unit_price,
            quantity=quantity,
            row_number=row_number,
        )
        return record, errors

    def parse_date(self, value: Any) -> Optional[datetime.date]:
        """Parse a date cell. Excel gives datetime/date objects, CSV gives text."""
        if isinstance(value, datetime.datetime):
            return value.date()
        if isinstance(value, datetime.date):
            return value
        if not isinstance(value, str):
            return None

        text = value.strip()
        for date_format in self.date_formats:
            try:
                return datetime.datetime.strptime(text, date_format).date()
            except ValueError:
                continue

        # ISO timestamps such as 2024-03-01T09:30:00
        try:
            return datetime.datetime.fromisoformat(text).date()
        except ValueError:
            return None


def parse_decimal(value: Any) -> Optional[Decimal]:
    """Parse a finite decimal number; None if the value is not one."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, float)):
        number = Decimal(str(value))
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    if not number.is_finite():
        return None
    return number


def parse_integer(value: Any) -> Optional[int]:
    """Parse an integer; integral decimals such as "3.0" are accepted, "3.5" is not.

    Values with more than ``_MAX_INTEGER_DIGITS`` digits are rejected before
    conversion, so an exponent such as "1e1000000" is never expanded.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    number = parse_decimal(value)
    if number is None or number.adjusted() >= _MAX_INTEGER_DIGITS:
        return None
    if number != number.to_integral_value():
        return None
    return int(number)

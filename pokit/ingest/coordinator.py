"""
Purchase-order upload ingestion.

One upload moves through a fixed sequence and stops at the first rejection:

    Received -> (size guard, ChecksumGate)  -> RejectedDuplicateFile
             -> (parse, RowValidator)       -> RejectedValidation
             -> (ConflictChecker)           -> RejectedConflict
             -> (insert_batch)              -> RejectedStorageError | Accepted

Nothing is retried. The uploaded file is deleted as soon as parsing is over,
whatever the outcome. A batch is all-or-nothing: if any row is invalid,
nothing is inserted.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..checksum import ChecksumGate, ChecksumState
from ..config import IngestConfig, DEFAULT_MAX_UPLOAD_BYTES
from ..errors import (
    ConflictError,
    DuplicateFileError,
    DuplicateRecordError,
    FileFormatError,
    IngestError,
    StorageError,
    UploadTooLargeError,
    ValidationError,
)
from ..parser import PurchaseOrderParser
from ..records import InvalidRow, PurchaseOrderRecord, UploadBatch
from ..validator import RowValidator
from .conflicts import ConflictChecker
from .repository import PurchaseOrderRepository

logger = logging.getLogger(__name__)


class IngestStatus(str, Enum):
    """Terminal states of one upload."""
    ACCEPTED = "accepted"
    REJECTED_DUPLICATE_FILE = "rejected_duplicate_file"
    REJECTED_VALIDATION = "rejected_validation"
    REJECTED_CONFLICT = "rejected_conflict"
    REJECTED_STORAGE_ERROR = "rejected_storage_error"


_STATUS_BY_ERROR = [
    (DuplicateFileError, IngestStatus.REJECTED_DUPLICATE_FILE),
    (ValidationError, IngestStatus.REJECTED_VALIDATION),
    (ConflictError, IngestStatus.REJECTED_CONFLICT),
    (StorageError, IngestStatus.REJECTED_STORAGE_ERROR),
]


@dataclass
class IngestOutcome:
    """
    Final result of one upload, with everything needed to answer the caller.

    Exactly one outcome is produced per upload.
    """
    status: IngestStatus
    http_status: int
    message: Optional[str] = None
    records: List[PurchaseOrderRecord] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    invalid_rows: List[InvalidRow] = field(default_factory=list)
    conflicts: List[PurchaseOrderRecord] = field(default_factory=list)
    fingerprint: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.status == IngestStatus.ACCEPTED

    @classmethod
    def success(cls, records: List[PurchaseOrderRecord], fingerprint: Optional[str]) -> "IngestOutcome":
        return cls(
            status=IngestStatus.ACCEPTED,
            http_status=200,
            records=list(records),
            fingerprint=fingerprint,
        )

    @classmethod
    def from_error(cls, error: IngestError, fingerprint: Optional[str] = None) -> "IngestOutcome":
        status = IngestStatus.REJECTED_STORAGE_ERROR
        for error_type, error_status in _STATUS_BY_ERROR:
            if isinstance(error, error_type):
                status = error_status
                break

        return cls(
            status=status,
            http_status=error.status_code,
            message=error.public_message,
            errors=list(getattr(error, "errors", [])),
            invalid_rows=list(getattr(error, "invalid_rows", [])),
            conflicts=list(getattr(error, "conflicts", [])),
            fingerprint=fingerprint,
        )

    def to_response(self) -> Dict[str, Any]:
        """JSON body for the HTTP response."""
        if self.accepted:
            return {"success": True, "data": [record.to_dict() for record in self.records]}
        return {"success": False, "error": self.message}


class IngestCoordinator:
    """
    Runs one purchase-order upload through checksum, validation, conflict
    check and insert.

    The ChecksumState is the only thing shared between uploads; pass the same
    state (or coordinator) to every request handler of a process.
    """

    def __init__(
        self,
        repository: PurchaseOrderRepository,
        checksum_gate: Optional[ChecksumGate] = None,
        parser: Optional[PurchaseOrderParser] = None,
        validator: Optional[RowValidator] = None,
        conflict_checker: Optional[ConflictChecker] = None,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ):
        self.repository = repository
        self.checksum_gate = checksum_gate or ChecksumGate()
        self.parser = parser or PurchaseOrderParser.with_default_adapters()
        self.validator = validator or RowValidator()
        self.conflict_checker = conflict_checker or ConflictChecker(repository)
        self.max_upload_bytes = max_upload_bytes

    @classmethod
    def from_config(
        cls,
        config: IngestConfig,
        repository: PurchaseOrderRepository,
        checksum_state: Optional[ChecksumState] = None,
    ) -> "IngestCoordinator":
        return cls(
            repository=repository,
            checksum_gate=ChecksumGate(checksum_state),
            validator=RowValidator(date_formats=config.date_formats),
            max_upload_bytes=config.max_upload_bytes,
        )

    def ingest(
        self,
        file_path: Union[str, Path],
        submission_date: Optional[str],
        vendor_name: Optional[str],
        remove_file: bool = True,
    ) -> IngestOutcome:
        """
        Ingest one uploaded purchase-order file.

        Args:
            file_path: Path of the uploaded file. Its suffix selects the adapter.
            submission_date: ``date`` form field sent with the file
            vendor_name: ``vendorName`` form field sent with the file
            remove_file: Delete the file once parsing is over (default True;
                pass False when ingesting a file you want to keep)

        Returns:
            IngestOutcome describing the terminal state
        """
        path = Path(file_path)
        batch = UploadBatch(submission_date=submission_date, vendor_name=vendor_name)

        try:
            try:
                batch.fingerprint = self._check_file(path)
                batch.records = self._parse(path, submission_date, vendor_name)
            finally:
                if remove_file:
                    path.unlink(missing_ok=True)

            persisted = self._persist(batch)

        except IngestError as e:
            return self._reject(e, batch.fingerprint)

        logger.info(f"Accepted upload {path.name}: {len(persisted)} purchase order(s) stored")
        return IngestOutcome.success(persisted, batch.fingerprint)

    def _check_file(self, path: Path) -> str:
        try:
            size = path.stat().st_size
        except OSError as e:
            raise FileFormatError(str(e))

        if size > self.max_upload_bytes:
            raise UploadTooLargeError(size, self.max_upload_bytes)

        try:
            result = self.checksum_gate.check_file(path)
        except OSError as e:
            raise FileFormatError(str(e))

        if result.is_duplicate:
            raise DuplicateFileError(result.fingerprint)
        return result.fingerprint

    def _parse(
        self,
        path: Path,
        submission_date: Optional[str],
        vendor_name: Optional[str],
    ) -> List[PurchaseOrderRecord]:
        try:
            rows = self.parser.iter_rows(str(path))
            result = self.validator.parse_and_validate(rows, submission_date, vendor_name)
        except OSError as e:
            raise FileFormatError(str(e))

        if not result.is_valid:
            raise ValidationError(result.errors, invalid_rows=result.invalid_rows)
        return result.records

    def _persist(self, batch: UploadBatch) -> List[PurchaseOrderRecord]:
        if not batch.records:
            logger.info("Upload contained no rows; nothing to store")
            return []

        try:
            conflicts = self.conflict_checker.find_conflicts(batch.records)
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Conflict lookup failed: {e}") from e

        if conflicts:
            raise ConflictError(conflicts)

        try:
            return self.repository.insert_batch(batch.records)
        except DuplicateRecordError as e:
            # Another upload stored the same pair after our conflict check
            raise ConflictError() from e
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Insert failed: {e}") from e

    def _reject(self, error: IngestError, fingerprint: Optional[str]) -> IngestOutcome:
        outcome = IngestOutcome.from_error(error, fingerprint)
        if outcome.status == IngestStatus.REJECTED_STORAGE_ERROR:
            logger.error(f"Error saving purchase orders: {error}", exc_info=True)
        else:
            logger.info(f"Upload rejected ({outcome.status.value}): {outcome.message}")
        return outcome

"""Exception taxonomy for purchase-order ingestion.

Every error carries the HTTP status and user-visible message of the outcome it
produces, so the coordinator can turn any of them into a single response.
"""

from typing import List, Optional

from .schema import CONFLICT_MESSAGE, DUPLICATE_FILE_MESSAGE, STORAGE_ERROR_MESSAGE


class IngestError(Exception):
    """Base class for all ingestion failures."""

    status_code = 500

    @property
    def public_message(self) -> str:
        return str(self)


class DuplicateFileError(IngestError):
    """The uploaded file is byte-identical to the previous upload."""

    status_code = 400

    def __init__(self, fingerprint: str):
        super().__init__(DUPLICATE_FILE_MESSAGE)
        self.fingerprint = fingerprint


class ValidationError(IngestError):
    """Aggregate validation failure. Holds every message collected for the batch."""

    status_code = 400

    def __init__(self, errors: List[str], invalid_rows: Optional[list] = None):
        self.errors = list(errors)
        self.invalid_rows = list(invalid_rows or [])
        super().__init__(" ".join(self.errors))


class MissingHeadersError(ValidationError):
    """The file lacks one or more required columns."""

    def __init__(self, missing_labels: List[str]):
        self.missing_labels = list(missing_labels)
        super().__init__([
            f"Missing required column(s) in CSV file: {', '.join(self.missing_labels)}."
        ])


class UnsupportedFileError(ValidationError):
    """No adapter is registered for the file type."""

    def __init__(self, suffix: str):
        self.suffix = suffix
        super().__init__([f"Unsupported file type '{suffix or '(none)'}'."])


class FileFormatError(ValidationError):
    """The file could not be decoded or parsed as a table."""

    def __init__(self, detail: str):
        super().__init__([f"Could not read purchase order file: {detail}"])


class UploadTooLargeError(ValidationError):
    """The file is larger than the configured upload limit."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__([f"File exceeds the maximum upload size of {limit} bytes."])


class ConflictError(IngestError):
    """Incoming records collide with stored records on (vendor_name, model_number)."""

    status_code = 402

    def __init__(self, conflicts: Optional[list] = None):
        super().__init__(CONFLICT_MESSAGE)
        self.conflicts = list(conflicts or [])


class StorageError(IngestError):
    """The repository failed to read or write records.

    The underlying driver message stays in ``str(error)`` for logs; callers only
    ever see the fixed public message.
    """

    status_code = 500

    @property
    def public_message(self) -> str:
        return STORAGE_ERROR_MESSAGE


class DuplicateRecordError(StorageError):
    """The store rejected an insert because a (vendor_name, model_number) pair already exists."""

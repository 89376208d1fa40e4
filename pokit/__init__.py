from .parser import PurchaseOrderParser
from .normalizer import HeaderNormalizer
from .validator import RowValidator, ValidationResult
from .checksum import ChecksumGate, ChecksumState
from .records import PurchaseOrderRecord
from .schema import STANDARD_FIELDS, COLUMN_MAPPINGS

__all__ = [
    "PurchaseOrderParser",
    "HeaderNormalizer",
    "RowValidator",
    "ValidationResult",
    "ChecksumGate",
    "ChecksumState",
    "PurchaseOrderRecord",
    "STANDARD_FIELDS",
    "COLUMN_MAPPINGS",
]

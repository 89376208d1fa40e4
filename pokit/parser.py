from .normalizer import HeaderNormalizer
from .schema import FIELD_LABELS
from .errors import FileFormatError, MissingHeadersError, UnsupportedFileError
from typing import Iterator, List, Dict, Any, Optional
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


class PurchaseOrderParser:
    """Parser for purchase-order files.

    Picks a registered adapter by file type, checks the header row against the
    column mapping, and yields field-keyed rows one at a time.
    """

    def __init__(self, normalizer: Optional[HeaderNormalizer] = None):
        """Initialize the parser.

        Args:
            normalizer: Header mapping to use (default: built-in column mappings)
        """
        self.adapters = []
        self.normalizer = normalizer or HeaderNormalizer()

    @classmethod
    def with_default_adapters(cls, normalizer: Optional[HeaderNormalizer] = None) -> "PurchaseOrderParser":
        """Parser with the CSV/TSV and Excel adapters registered."""
        from .adapters.csv_adapter import CsvAdapter
        from .adapters.excel_adapter import ExcelAdapter

        parser = cls(normalizer=normalizer)
        parser.register_adapter(CsvAdapter())
        parser.register_adapter(ExcelAdapter())
        return parser

    def register_adapter(self, adapter):
        """Register a file adapter for parsing.

        Args:
            adapter: Adapter instance with can_handle(), read_headers() and iter_rows() methods
        """
        self.adapters.append(adapter)

    def _find_adapter(self, file_path: str):
        for a in self.adapters:
            if a.can_handle(file_path):
                return a
        raise UnsupportedFileError(Path(file_path).suffix.lower())

    def iter_rows(self, file_path: str) -> Iterator[Dict[str, Any]]:
        """Open a purchase-order file and return a lazy sequence of its rows.

        The header row is checked before anything is yielded, so a file that
        lacks a required column fails here rather than producing empty fields.
        A file with no header row at all yields nothing.

        Args:
            file_path: Path to the purchase-order file

        Returns:
            Iterator of rows keyed by record field, in file order

        Raises:
            UnsupportedFileError: If no adapter handles the file type
            MissingHeadersError: If required columns are absent
            FileFormatError: If the file cannot be decoded or parsed
        """
        adapter = self._find_adapter(file_path)

        try:
            headers = adapter.read_headers(file_path)
        except ValueError as e:
            raise FileFormatError(str(e))

        if not any(headers):
            logger.info(f"No header row in {Path(file_path).name}; nothing to parse")
            return iter(())

        missing = self.normalizer.missing_fields(headers)
        if missing:
            raise MissingHeadersError([FIELD_LABELS[f] for f in missing])

        header_map = self.normalizer.resolve_headers(headers)
        return self._generate_rows(adapter, file_path, header_map)

    def _generate_rows(self, adapter, file_path: str, header_map: Dict[str, str]):
        try:
            for raw_row in adapter.iter_rows(file_path):
                yield self.normalizer.normalize_row(raw_row, header_map)
        except ValueError as e:
            raise FileFormatError(str(e))

    def parse(self, file_path: str) -> List[Dict[str, Any]]:
        """Parse a whole file into a list of field-keyed rows."""
        return list(self.iter_rows(file_path))

    def get_mapping_report(self, file_path: str) -> Dict[str, Any]:
        """Get a report of how columns from a file map to record fields.

        Args:
            file_path: Path to the purchase-order file

        Returns:
            Dictionary with mapped, unmapped and missing columns
        """
        adapter = self._find_adapter(file_path)
        try:
            headers = adapter.read_headers(file_path)
        except ValueError as e:
            raise FileFormatError(str(e))
        return self.normalizer.get_mapping_report(headers)

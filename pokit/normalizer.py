from typing import List, Dict, Any, Optional
import re
from .schema import STANDARD_FIELDS, REQUIRED_FIELDS, FIELD_LABELS, COLUMN_MAPPINGS


class HeaderNormalizer:
    """Maps purchase-order column headers onto record fields.

    The mapping is explicit configuration: each field lists the header
    variations it accepts. Unknown headers are ignored, never guessed.
    """

    def __init__(self, column_mappings: Optional[Dict[str, List[str]]] = None):
        """Initialize the normalizer with column mappings.

        Args:
            column_mappings: field -> accepted header variations.
                Defaults to ``COLUMN_MAPPINGS``.
        """
        mappings = column_mappings if column_mappings is not None else COLUMN_MAPPINGS

        unknown = set(mappings) - set(STANDARD_FIELDS)
        if unknown:
            raise ValueError(f"Unknown purchase order field(s) in column mappings: {sorted(unknown)}")

        # Forward lookup: normalized variation -> field
        self._variation_to_field = {}
        for field_name, variations in mappings.items():
            for variation in variations:
                self._variation_to_field[self._clean(variation)] = field_name
            # The canonical label always maps to its own field
            self._variation_to_field[self._clean(FIELD_LABELS[field_name])] = field_name

    @staticmethod
    def _clean(column_name: str) -> str:
        # lowercase, strip whitespace, collapse underscores/spaces/dashes
        return re.sub(r'[\s_\-]+', ' ', column_name.lower().strip())

    def normalize_column_name(self, column_name: Any) -> Optional[str]:
        """Resolve a header to its record field.

        Returns:
            Field name if the header is a known variation, None otherwise
        """
        if column_name is None:
            return None
        column_name = str(column_name)
        if not column_name.strip():
            return None
        return self._variation_to_field.get(self._clean(column_name))

    def resolve_headers(self, headers: List[Any]) -> Dict[str, str]:
        """Build a header -> field mapping for a file's header row.

        When two headers resolve to the same field the first one wins.
        """
        resolved = {}
        claimed = set()
        for header in headers:
            field_name = self.normalize_column_name(header)
            if field_name and field_name not in claimed:
                resolved[header] = field_name
                claimed.add(field_name)
        return resolved

    def missing_fields(self, headers: List[Any]) -> List[str]:
        """Required fields with no matching header, in schema order."""
        present = set(self.resolve_headers(headers).values())
        return [field_name for field_name in REQUIRED_FIELDS if field_name not in present]

    def normalize_row(self, row: Dict[str, Any], header_map: Dict[str, str]) -> Dict[str, Any]:
        """Re-key a raw row by record field.

        Fields without a column come back as None; values are passed through
        unchanged so typed cells (Excel dates, numbers) survive.
        """
        normalized_row = {field_name: None for field_name in STANDARD_FIELDS}
        for header, field_name in header_map.items():
            normalized_row[field_name] = row.get(header)
        return normalized_row

    def get_mapping_report(self, headers: List[Any]) -> Dict[str, Any]:
        """Generate a report of column mappings for debugging."""
        resolved = self.resolve_headers(headers)
        mapped = {field_name: header for header, field_name in resolved.items()}
        unmapped = [header for header in headers if header not in resolved]
        return {
            "mapped": mapped,
            "unmapped": unmapped,
            "missing": [FIELD_LABELS[f] for f in self.missing_fields(headers)],
            "standard_fields": STANDARD_FIELDS,
        }

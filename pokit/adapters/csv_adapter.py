import csv
import chardet
from pathlib import Path
from typing import Iterator, List, Dict, Any


class CsvAdapter:
    """CSV adapter for reading purchase-order CSV and TSV files.

    Handles:
    - Multiple encodings (UTF-8, UTF-8-BOM, Windows-1252, ISO-8859-1, etc.)
    - Different delimiters (comma, semicolon, tab)
    - Edge cases (empty files, header-only files, short rows)

    Rows are produced lazily; the file stays open only while the caller
    iterates.
    """

    def can_handle(self, file_path: str) -> bool:
        """Check if this adapter can handle the given file."""
        return Path(file_path).suffix.lower() in [".csv", ".tsv"]

    def _detect_encoding(self, file_path: str) -> str:
        """Detect file encoding using chardet with fallback."""
        with open(file_path, 'rb') as f:
            raw_data = f.read(10000)  # Read first 10KB for detection

        # Check for BOM first
        if raw_data.startswith(b'\xef\xbb\xbf'):
            return 'utf-8-sig'

        result = chardet.detect(raw_data)
        encoding = result.get('encoding') or 'utf-8'

        # ASCII is a subset of UTF-8; prefer the wider codec for the rest of the file
        encoding_lower = encoding.lower()
        if 'utf-8' in encoding_lower or 'utf8' in encoding_lower or encoding_lower == 'ascii':
            return 'utf-8'

        return encoding

    def _detect_delimiter(self, file_path: str, encoding: str) -> str:
        """Detect CSV delimiter by analyzing the header line."""
        if Path(file_path).suffix.lower() == '.tsv':
            return '\t'

        with open(file_path, 'r', encoding=encoding, newline='') as f:
            first_line = f.readline()

        try:
            dialect = csv.Sniffer().sniff(first_line, delimiters=',;\t')
            return dialect.delimiter
        except csv.Error:
            pass

        # Sniffer gives up on single-column samples; count instead
        comma_count = first_line.count(',')
        semicolon_count = first_line.count(';')
        tab_count = first_line.count('\t')

        if tab_count > comma_count and tab_count > semicolon_count:
            return '\t'
        elif semicolon_count > comma_count:
            return ';'
        return ','

    def read_headers(self, file_path: str) -> List[str]:
        """Return the header row, or an empty list for an empty file.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the header cannot be decoded or parsed
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        if path.stat().st_size == 0:
            return []

        try:
            encoding = self._detect_encoding(file_path)
            delimiter = self._detect_delimiter(file_path, encoding)
            with open(file_path, 'r', encoding=encoding, newline='') as f:
                header = next(csv.reader(f, delimiter=delimiter), [])
        except UnicodeDecodeError as e:
            raise ValueError(f"Could not decode file {path.name}: {e}")
        except csv.Error as e:
            raise ValueError(f"Error parsing CSV file {path.name}: {e}")

        return [column.strip() for column in header]

    def iter_rows(self, file_path: str) -> Iterator[Dict[str, Any]]:
        """Yield data rows as dictionaries keyed by header text.

        Values are strings; cells missing from short rows come back as ''.
        Blank lines are skipped.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the file cannot be decoded or parsed
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")
        if path.stat().st_size == 0:
            return

        try:
            encoding = self._detect_encoding(file_path)
            delimiter = self._detect_delimiter(file_path, encoding)
            with open(file_path, 'r', encoding=encoding, newline='') as f:
                reader = csv.DictReader(f, delimiter=delimiter)
                for row in reader:
                    yield {
                        key.strip(): str(value) if value is not None else ''
                        for key, value in row.items()
                        if key is not None
                    }
        except UnicodeDecodeError as e:
            raise ValueError(f"Could not decode file {path.name}: {e}")
        except csv.Error as e:
            raise ValueError(f"Error parsing CSV file {path.name}: {e}")

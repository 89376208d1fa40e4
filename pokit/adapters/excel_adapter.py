import zipfile

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException
from pathlib import Path


class ExcelAdapter:
    """Reads the first worksheet of an .xlsx workbook. Cell values keep their native types."""

    def can_handle(self, file_path):
        return Path(file_path).suffix.lower() in [".xlsx", ".xlsm"]

    def _load(self, file_path):
        try:
            return openpyxl.load_workbook(file_path, read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError) as e:
            raise ValueError(f"Could not open workbook {Path(file_path).name}: {e}")

    def read_headers(self, file_path):
        wb = self._load(file_path)
        try:
            first_row = next(wb.active.iter_rows(max_row=1, values_only=True), ())
        finally:
            wb.close()
        return [str(value).strip() if value is not None else "" for value in first_row]

    def iter_rows(self, file_path):
        wb = self._load(file_path)
        try:
            headers = None
            for row in wb.active.iter_rows(values_only=True):
                if headers is None:
                    headers = [str(value).strip() if value is not None else "" for value in row]
                    continue
                if all(value is None for value in row):
                    continue
                yield dict(zip(headers, row))
        finally:
            wb.close()

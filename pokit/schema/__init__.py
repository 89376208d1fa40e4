"""Purchase-order schema definitions: record fields, header labels and column mappings."""

from decimal import Decimal
from typing import Dict, List

# Record fields in file order
STANDARD_FIELDS = [
    "date",
    "vendor_name",
    "model_number",
    "unit_price",
    "quantity",
]

# Fields a file must provide a column for
REQUIRED_FIELDS = list(STANDARD_FIELDS)

# Canonical column headers as they appear in vendor templates
FIELD_LABELS = {
    "date": "Date",
    "vendor_name": "Vendor Name",
    "model_number": "Model Number",
    "unit_price": "Unit Price",
    "quantity": "Quantity",
}

# Mapping of accepted column header variations to record fields.
# Headers are compared after lowercasing and collapsing spaces, underscores and dashes.
COLUMN_MAPPINGS: Dict[str, List[str]] = {
    "date": [
        "date", "order date", "po date", "purchase date", "purchase order date"
    ],
    "vendor_name": [
        "vendor name", "vendorname", "vendor", "supplier", "supplier name",
        "suppliername"
    ],
    "model_number": [
        "model number", "modelnumber", "model no", "model no.", "model",
        "model #", "model#"
    ],
    "unit_price": [
        "unit price", "unitprice", "price", "unit cost", "price each"
    ],
    "quantity": [
        "quantity", "qty", "qty.", "qnty", "units"
    ],
}

# Response messages shared by the pipeline and the HTTP layer
DUPLICATE_FILE_MESSAGE = "Duplicate file. The same file has been uploaded before."
CONFLICT_MESSAGE = "Data already exists in the database."
STORAGE_ERROR_MESSAGE = "Error saving purchase orders."

# Validation messages, one per rule
SUBMISSION_DATE_REQUIRED = "Date field is required."
SUBMISSION_VENDOR_REQUIRED = "Vendor Name field is required."
ROW_DATE_VENDOR_REQUIRED = "Date and Vendor Name fields are required."
INVALID_DATE = "Invalid Date in CSV file."
INVALID_MODEL_NUMBER = "Invalid Model Number in CSV file."
INVALID_UNIT_PRICE = "Invalid Unit Price in CSV file."
NEGATIVE_UNIT_PRICE = "Unit Price must not be negative in CSV file."
INVALID_QUANTITY = "Invalid Quantity in CSV file."
NEGATIVE_QUANTITY = "Quantity must not be negative in CSV file."
REPEATED_VENDOR_MODEL = "Vendor Name and Model Number repeat row {first_row} in CSV file."

# Storable ranges: unit_price is NUMERIC(12, 2), quantity is INTEGER
UNIT_PRICE_SCALE = Decimal("0.01")
MAX_UNIT_PRICE = Decimal("9999999999.99")
MAX_QUANTITY = 2 ** 31 - 1

# Date formats tried in order for text date cells
DEFAULT_DATE_FORMATS = [
    "%Y-%m-%d",
    "%m/%d/%Y",
    "%m/%d/%y",
    "%Y/%m/%d",
    "%d.%m.%Y",
]


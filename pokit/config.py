"""
Configuration for purchase-order ingestion.

Values come from environment variables; a ``.env`` file in the working
directory is loaded first when present.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

from .schema import DEFAULT_DATE_FORMATS

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_STATEMENT_TIMEOUT_MS = 5000


def _build_connection_string(
    host: Optional[str],
    port: Optional[int],
    database: Optional[str],
    user: Optional[str],
    password: Optional[str]
) -> Optional[str]:
    """Build PostgreSQL connection string from components, or None if any are missing."""
    if not all([host, database, user, password]):
        return None
    port = port or 5432
    return f"postgresql://{user}:{password}@{host}:{port}/{database}"


@dataclass
class IngestConfig:
    """Runtime settings for the ingestion pipeline, its store and the HTTP endpoint."""

    db_url: Optional[str] = None
    db_statement_timeout_ms: int = DEFAULT_STATEMENT_TIMEOUT_MS
    db_minconn: int = 1
    db_maxconn: int = 10
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    date_formats: List[str] = field(default_factory=lambda: list(DEFAULT_DATE_FORMATS))
    api_host: str = "0.0.0.0"
    api_port: int = 3001
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, load_env_file: bool = True) -> "IngestConfig":
        """
        Build a config from environment variables.

        Database connection priority: 1) PO_DB_URL, 2) PO_DB_HOST, PO_DB_PORT,
        PO_DB_NAME, PO_DB_USER, PO_DB_PASSWORD. PO_DATE_FORMATS is a
        comma-separated list of strptime formats.
        """
        if load_env_file:
            load_dotenv()

        db_url = os.getenv("PO_DB_URL") or _build_connection_string(
            host=os.getenv("PO_DB_HOST"),
            port=int(os.getenv("PO_DB_PORT", "5432")),
            database=os.getenv("PO_DB_NAME"),
            user=os.getenv("PO_DB_USER"),
            password=os.getenv("PO_DB_PASSWORD"),
        )

        date_formats_env = os.getenv("PO_DATE_FORMATS")
        if date_formats_env:
            date_formats = [f.strip() for f in date_formats_env.split(",") if f.strip()]
        else:
            date_formats = list(DEFAULT_DATE_FORMATS)

        return cls(
            db_url=db_url,
            db_statement_timeout_ms=int(os.getenv("PO_DB_STATEMENT_TIMEOUT_MS", str(DEFAULT_STATEMENT_TIMEOUT_MS))),
            db_minconn=int(os.getenv("PO_DB_MINCONN", "1")),
            db_maxconn=int(os.getenv("PO_DB_MAXCONN", "10")),
            max_upload_bytes=int(os.getenv("PO_MAX_UPLOAD_BYTES", str(DEFAULT_MAX_UPLOAD_BYTES))),
            date_formats=date_formats,
            api_host=os.getenv("PO_API_HOST", "0.0.0.0"),
            api_port=int(os.getenv("PO_API_PORT", "3001")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

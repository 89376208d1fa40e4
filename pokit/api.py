"""
FastAPI endpoint for purchase-order uploads.

Run with: uvicorn pokit.api:create_app --factory
"""

import logging
import tempfile
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, File, Form, UploadFile
from fastapi.responses import JSONResponse

from .checksum import ChecksumState
from .config import IngestConfig
from .ingest.coordinator import IngestCoordinator

logger = logging.getLogger(__name__)

_COPY_CHUNK_SIZE = 1024 * 1024


def _save_upload(upload: UploadFile, limit: int) -> str:
    """Copy an upload to a temp file, stopping one chunk past ``limit`` bytes.

    The coordinator rejects oversized files by size, so a truncated copy is
    never parsed.
    """
    suffix = Path(upload.filename or "").suffix or ".csv"
    copied = 0
    tmp = tempfile.NamedTemporaryFile(delete=False, suffix=suffix)
    try:
        with tmp:
            for chunk in iter(lambda: upload.file.read(_COPY_CHUNK_SIZE), b""):
                tmp.write(chunk)
                copied += len(chunk)
                if copied > limit:
                    break
    except Exception:
        Path(tmp.name).unlink(missing_ok=True)
        raise
    return tmp.name


def _default_coordinator(config: IngestConfig) -> IngestCoordinator:
    from .ingest.postgres_client import PostgresRepository

    repository = PostgresRepository.from_config(config)
    repository.create_table()
    return IngestCoordinator.from_config(config, repository, ChecksumState())


def create_app(
    coordinator: Optional[IngestCoordinator] = None,
    config: Optional[IngestConfig] = None,
) -> FastAPI:
    """
    Build the HTTP app.

    Args:
        coordinator: Pipeline to serve. Defaults to one backed by PostgreSQL,
            configured from the environment.
        config: Settings; read from the environment when omitted
    """
    config = config or IngestConfig.from_env()
    coordinator = coordinator or _default_coordinator(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        coordinator.repository.close()

    app = FastAPI(
        title="Purchase Order Upload API",
        description="Validates vendor purchase-order files and stores their line items",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.coordinator = coordinator

    # Sync route: FastAPI runs it on the worker thread pool, one upload per thread
    @app.post("/api/submitpurchaseorder")
    def submit_purchase_order(
        csv_file: UploadFile = File(..., alias="csvFile"),
        date: Optional[str] = Form(None),
        vendor_name: Optional[str] = Form(None, alias="vendorName"),
    ):
        """Ingest one purchase-order file submitted with its date and vendor name."""
        logger.info(f"Received purchase order upload {csv_file.filename!r} from vendor {vendor_name!r}")
        tmp_path = _save_upload(csv_file, config.max_upload_bytes)
        outcome = coordinator.ingest(tmp_path, date, vendor_name)
        return JSONResponse(content=outcome.to_response(), status_code=outcome.http_status)

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "version": "1.0.0"}

    return app


if __name__ == "__main__":
    import uvicorn

    settings = IngestConfig.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        create_app(config=settings),
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )

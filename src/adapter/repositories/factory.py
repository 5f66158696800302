"""Invoice store backend selection."""

import logging

from src.adapter.repositories.rest_invoice_repository import RestInvoiceRepository
from src.adapter.repositories.sqlite_invoice_repository import SqliteInvoiceRepository
from src.app.repositories.invoice_repository import InvoiceRepository

logger = logging.getLogger(__name__)


def create_invoice_repository(config) -> InvoiceRepository:
    """
    Build the invoice store configured by STORE_BACKEND

    Args:
        config: ApplicationConfig (or subclass)

    Returns:
        Unopened InvoiceRepository; call initialize() before use
    """
    backend = str(config.STORE_BACKEND).strip().lower()

    if backend == "sqlite":
        logger.info("Using embedded SQLite invoice store")
        return SqliteInvoiceRepository(config.SQLITE_PATH)

    if backend == "supabase":
        if not config.SUPABASE_URL or not config.SUPABASE_SERVICE_ROLE_KEY:
            raise ValueError(
                "STORE_BACKEND=supabase requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY"
            )
        logger.info("Using remote Supabase invoice store")
        return RestInvoiceRepository(
            base_url=config.SUPABASE_URL,
            api_key=config.SUPABASE_SERVICE_ROLE_KEY,
            table=config.SUPABASE_TABLE,
            timeout=float(config.REMOTE_TIMEOUT_SECONDS),
        )

    raise ValueError(f"Unknown STORE_BACKEND: {config.STORE_BACKEND!r}")

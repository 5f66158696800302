"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.adapter.repositories.factory import create_invoice_repository
from src.adapter.services.pdf_service import ReportLabPdfService
from src.api.error import register_error_handlers
from src.api.routes import invoices
from src.app.use_cases.invoices.invoice_service import InvoiceService
from src.app.use_cases.invoices.migrate_snapshot import migrate
from src.domain.business_profile import BusinessProfile

logger = logging.getLogger(__name__)


def configure_logging(config) -> None:
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(config) -> FastAPI:
    """
    Build the API application

    Args:
        config: ApplicationConfig class (tests pass a subclass)
    """
    configure_logging(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        invoice_repo = create_invoice_repository(config)
        await invoice_repo.initialize()

        imported = await migrate(invoice_repo, config.LEGACY_INVOICES_SNAPSHOT)
        if imported:
            logger.info(f"Imported {imported} invoices from legacy snapshot")

        app.state.invoice_service = InvoiceService(
            invoice_repo=invoice_repo,
            pdf_service=ReportLabPdfService.from_config(config),
            business_profile=BusinessProfile.from_config(config),
        )
        try:
            yield
        finally:
            await invoice_repo.close()
            logger.info("Invoice store closed")

    app = FastAPI(title="Portfolio Invoice Service", lifespan=lifespan)
    app.state.config = config

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(config.CORS_ORIGINS),
            allow_credentials=bool(config.CORS_ALLOW_CREDENTIALS),
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_error_handlers(app)
    app.include_router(invoices.router, prefix=config.API_PREFIX)

    @app.get("/healthz", tags=["Health"])
    async def healthz():
        return {"ok": True}

    return app

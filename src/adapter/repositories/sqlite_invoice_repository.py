"""SQLite Invoice Repository Implementation

Embedded file-backed invoice store on an async SQLAlchemy engine
(aiosqlite) running in WAL journal mode.
"""

import asyncio
import logging
import os
from typing import Any, Dict, List, Optional

from sqlalchemy import event
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel, func, select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.errors import StoreError
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice
from src.domain.invoice_record import InvoiceRecord

logger = logging.getLogger(__name__)

BUSY_TIMEOUT_MS = 5000


def _configure_connection(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute(f"PRAGMA busy_timeout={BUSY_TIMEOUT_MS}")
    cursor.close()


class SqliteInvoiceRepository(InvoiceRepository):
    """
    SQLite implementation of InvoiceRepository

    One engine per process. Each operation runs in its own session and
    transaction; SQLite's file lock serializes writers across connections
    and the write lock keeps update's read-modify-write atomic in-process.
    """

    def __init__(self, db_path: str):
        """
        Initialize the repository

        Args:
            db_path: Path of the SQLite database file
        """
        self.db_path = db_path
        self.engine = create_async_engine(
            f"sqlite+aiosqlite:///{db_path}", echo=False, future=True
        )
        event.listen(self.engine.sync_engine, "connect", _configure_connection)

        self.async_session_factory = sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
        )
        self._write_lock = asyncio.Lock()

    async def initialize(self) -> None:
        directory = os.path.dirname(os.path.abspath(self.db_path))
        os.makedirs(directory, exist_ok=True)
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(
                    SQLModel.metadata.create_all, tables=[InvoiceRecord.__table__]
                )
        except SQLAlchemyError as e:
            logger.exception(f"Failed to initialize invoice database at {self.db_path}")
            raise StoreError("Failed to open invoice store", reason=str(e)) from e

        logger.info(f"SQLite invoice store ready at {self.db_path}")

    async def close(self) -> None:
        await self.engine.dispose()

    async def insert(self, invoice: Invoice) -> None:
        async with self._write_lock:
            try:
                async with self.async_session_factory() as session:
                    session.add(InvoiceRecord.from_invoice(invoice))
                    await session.commit()
            except SQLAlchemyError as e:
                logger.exception(f"Failed to insert invoice {invoice.id}")
                raise StoreError("Failed to create invoice", reason=str(e)) from e

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        try:
            async with self.async_session_factory() as session:
                record = await self._get_record(session, invoice_id)
                if record is None:
                    return None
                return record.to_invoice()
        except (SQLAlchemyError, ValueError) as e:
            logger.exception(f"Failed to load invoice {invoice_id}")
            raise StoreError("Failed to load invoice", reason=str(e)) from e

    async def list(self) -> List[Invoice]:
        statement = select(InvoiceRecord).order_by(
            InvoiceRecord.created_at.asc(), InvoiceRecord.id.asc()
        )
        try:
            async with self.async_session_factory() as session:
                result = await session.exec(statement)
                records = result.all()
        except SQLAlchemyError as e:
            logger.exception("Failed to list invoices")
            raise StoreError("Failed to load invoices", reason=str(e)) from e

        invoices = []
        for record in records:
            try:
                invoices.append(record.to_invoice())
            except ValueError:
                logger.warning(f"Skipping unreadable invoice row {record.id}")
        return invoices

    async def update(self, invoice_id: str, patch_fields: Dict[str, Any]) -> bool:
        async with self._write_lock:
            try:
                async with self.async_session_factory() as session:
                    record = await self._get_record(session, invoice_id)
                    if record is None:
                        return False

                    record.apply(record.to_invoice().merged(patch_fields))
                    session.add(record)
                    await session.commit()
                    return True
            except (SQLAlchemyError, ValueError) as e:
                logger.exception(f"Failed to update invoice {invoice_id}")
                raise StoreError("Failed to update invoice", reason=str(e)) from e

    async def delete(self, invoice_id: str) -> bool:
        async with self._write_lock:
            try:
                async with self.async_session_factory() as session:
                    record = await self._get_record(session, invoice_id)
                    if record is None:
                        return False

                    await session.delete(record)
                    await session.commit()
                    return True
            except SQLAlchemyError as e:
                logger.exception(f"Failed to delete invoice {invoice_id}")
                raise StoreError("Failed to delete invoice", reason=str(e)) from e

    async def is_empty(self) -> bool:
        statement = select(func.count()).select_from(InvoiceRecord)
        try:
            async with self.async_session_factory() as session:
                result = await session.exec(statement)
                return result.one() == 0
        except SQLAlchemyError as e:
            logger.exception("Failed to count invoices")
            raise StoreError("Failed to load invoices", reason=str(e)) from e

    async def _get_record(
        self, session: AsyncSession, invoice_id: str
    ) -> Optional[InvoiceRecord]:
        statement = select(InvoiceRecord).where(InvoiceRecord.id == invoice_id)
        result = await session.exec(statement)
        return result.first()

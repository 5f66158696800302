"""Backend-specific tests for the SQLite invoice store"""

from decimal import Decimal

import pytest
from sqlalchemy import text

from src.adapter.repositories.sqlite_invoice_repository import SqliteInvoiceRepository


@pytest.mark.asyncio
async def test_wal_journal_mode(sqlite_store):
    async with sqlite_store.engine.connect() as conn:
        mode = (await conn.execute(text("PRAGMA journal_mode"))).scalar()

    assert mode.lower() == "wal"


@pytest.mark.asyncio
async def test_update_refreshes_listing_columns(sqlite_store, sample_invoice):
    await sqlite_store.insert(sample_invoice)

    await sqlite_store.update(sample_invoice.id, {"status": "partial", "payment_status": "partial"})

    async with sqlite_store.engine.connect() as conn:
        row = (
            await conn.execute(
                text("SELECT status, payment_status, total FROM invoices WHERE id = :id"),
                {"id": sample_invoice.id},
            )
        ).one()

    assert row.status == "partial"
    assert row.payment_status == "partial"
    assert Decimal(str(row.total)) == Decimal("330.00")


@pytest.mark.asyncio
async def test_data_survives_reopen(tmp_path, sample_invoice):
    path = str(tmp_path / "reopen.db")
    first = SqliteInvoiceRepository(path)
    await first.initialize()
    await first.insert(sample_invoice)
    await first.close()

    second = SqliteInvoiceRepository(path)
    await second.initialize()
    try:
        loaded = await second.get_by_id(sample_invoice.id)
    finally:
        await second.close()

    assert loaded.to_document() == sample_invoice.to_document()


@pytest.mark.asyncio
async def test_unreadable_row_skipped_in_list(sqlite_store, make_invoice):
    await sqlite_store.insert(make_invoice("inv_good"))
    await sqlite_store.insert(make_invoice("inv_broken"))
    async with sqlite_store.engine.begin() as conn:
        await conn.execute(text("UPDATE invoices SET data = '{oops' WHERE id = 'inv_broken'"))

    invoices = await sqlite_store.list()

    assert [invoice.id for invoice in invoices] == ["inv_good"]

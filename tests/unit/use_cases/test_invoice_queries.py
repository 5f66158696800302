"""Unit tests for GetInvoice, ListInvoices, DeleteInvoice and RenderInvoice"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.app.errors import NotFoundError, RenderError
from src.app.use_cases.invoices.delete_invoice import DeleteInvoice
from src.app.use_cases.invoices.get_invoice import GetInvoice
from src.app.use_cases.invoices.list_invoices import ListInvoices
from src.app.use_cases.invoices.render_invoice import RenderInvoice


@pytest.fixture
def mock_invoice_repo():
    repo = MagicMock()
    repo.get_by_id = AsyncMock(return_value=None)
    repo.list = AsyncMock(return_value=[])
    repo.delete = AsyncMock(return_value=False)
    return repo


@pytest.fixture
def mock_pdf_service():
    """Mock PDF service"""
    return MagicMock()


class TestGetInvoice:
    @pytest.mark.asyncio
    async def test_returns_stored_invoice(self, mock_invoice_repo, sample_invoice):
        mock_invoice_repo.get_by_id.return_value = sample_invoice

        invoice = await GetInvoice(mock_invoice_repo).execute(sample_invoice.id)

        assert invoice is sample_invoice

    @pytest.mark.asyncio
    async def test_unknown_id(self, mock_invoice_repo):
        with pytest.raises(NotFoundError):
            await GetInvoice(mock_invoice_repo).execute("inv_missing")


class TestListInvoices:
    @pytest.mark.asyncio
    async def test_passes_through_store_order(self, mock_invoice_repo, make_invoice):
        invoices = [make_invoice("inv_a"), make_invoice("inv_b")]
        mock_invoice_repo.list.return_value = invoices

        result = await ListInvoices(mock_invoice_repo).execute()

        assert [invoice.id for invoice in result] == ["inv_a", "inv_b"]


class TestDeleteInvoice:
    @pytest.mark.asyncio
    async def test_delete_existing(self, mock_invoice_repo):
        mock_invoice_repo.delete.return_value = True

        assert await DeleteInvoice(mock_invoice_repo).execute("inv_1") is True

    @pytest.mark.asyncio
    async def test_delete_missing(self, mock_invoice_repo):
        with pytest.raises(NotFoundError):
            await DeleteInvoice(mock_invoice_repo).execute("inv_1")


class TestRenderInvoice:
    @pytest.mark.asyncio
    async def test_render_returns_download(self, mock_invoice_repo, mock_pdf_service, sample_invoice):
        mock_invoice_repo.get_by_id.return_value = sample_invoice
        mock_pdf_service.render_invoice.return_value = b"%PDF-1.4 fake"

        rendered = await RenderInvoice(mock_invoice_repo, mock_pdf_service).execute(sample_invoice.id)

        assert rendered.content == b"%PDF-1.4 fake"
        assert rendered.media_type == "application/pdf"
        assert rendered.filename == f"{sample_invoice.id}.pdf"
        mock_pdf_service.render_invoice.assert_called_once_with(sample_invoice)

    @pytest.mark.asyncio
    async def test_render_unknown_id(self, mock_invoice_repo, mock_pdf_service):
        with pytest.raises(NotFoundError):
            await RenderInvoice(mock_invoice_repo, mock_pdf_service).execute("inv_missing")

        mock_pdf_service.render_invoice.assert_not_called()

    @pytest.mark.asyncio
    async def test_render_failure_propagates(self, mock_invoice_repo, mock_pdf_service, sample_invoice):
        mock_invoice_repo.get_by_id.return_value = sample_invoice
        mock_pdf_service.render_invoice.side_effect = RenderError("Failed to generate invoice PDF")

        with pytest.raises(RenderError):
            await RenderInvoice(mock_invoice_repo, mock_pdf_service).execute(sample_invoice.id)

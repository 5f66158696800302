"""Unit tests for ReportLabPdfService"""

import re
from decimal import Decimal

import pytest
from PIL import Image
from reportlab.pdfgen import canvas

from src.adapter.services.pdf_service import ReportLabPdfService
from src.app.errors import RenderError

PAGE_PATTERN = re.compile(rb"/Type\s*/Page\b")


def _page_count(pdf_bytes: bytes) -> int:
    return len(PAGE_PATTERN.findall(pdf_bytes))


@pytest.fixture
def pdf_service():
    return ReportLabPdfService(max_rows=10)


@pytest.fixture
def png_logo(tmp_path):
    path = tmp_path / "uploads" / "logo.png"
    path.parent.mkdir()
    Image.new("RGB", (8, 8), (79, 110, 247)).save(path, format="PNG")
    return path


class TestRenderInvoice:
    def test_renders_single_page_pdf(self, pdf_service, sample_invoice):
        pdf_bytes = pdf_service.render_invoice(sample_invoice)

        assert pdf_bytes.startswith(b"%PDF")
        assert _page_count(pdf_bytes) == 1

    def test_fifty_lines_stay_on_one_page(self, pdf_service, make_invoice):
        invoice = make_invoice(line_count=50)

        pdf_bytes = pdf_service.render_invoice(invoice)

        assert _page_count(pdf_bytes) == 1
        assert invoice.summary.subtotal == Decimal("15000")

    def test_long_text_is_clipped_not_wrapped(self, pdf_service, make_invoice, sample_invoice):
        line = sample_invoice.lines[0].model_copy(update={"name": "W" * 120})
        invoice = make_invoice(lines=[line] * 12, notes="N" * 1200)

        assert _page_count(pdf_service.render_invoice(invoice)) == 1

    def test_uploads_logo_is_drawn(self, make_invoice, png_logo):
        service = ReportLabPdfService(uploads_dir=str(png_logo.parent))
        invoice = make_invoice()
        invoice.footer.logo_url = "/uploads/logo.png"

        pdf_bytes = service.render_invoice(invoice)

        assert b"/Subtype /Image" in pdf_bytes
        assert _page_count(pdf_bytes) == 1

    def test_logo_outside_uploads_is_ignored(self, make_invoice, png_logo, tmp_path):
        service = ReportLabPdfService(uploads_dir=str(png_logo.parent))
        invoice = make_invoice()
        invoice.footer.logo_url = "/uploads/../../etc/passwd"

        assert service._resolve_logo_path(invoice.footer.logo_url) is None
        assert b"/Subtype /Image" not in service.render_invoice(invoice)

    def test_fallback_logo_used(self, png_logo, sample_invoice):
        service = ReportLabPdfService(logo_path=str(png_logo))

        assert service._resolve_logo_path("") == str(png_logo)

    def test_unreadable_logo_is_omitted(self, tmp_path, sample_invoice):
        broken = tmp_path / "logo.jpg"
        broken.write_bytes(b"not an image")
        service = ReportLabPdfService(logo_path=str(broken))

        pdf_bytes = service.render_invoice(sample_invoice)

        assert _page_count(pdf_bytes) == 1
        assert b"/Subtype /Image" not in pdf_bytes

    def test_failure_raises_render_error(self, pdf_service, sample_invoice, monkeypatch):
        def explode(*args, **kwargs):
            raise OSError("disk full")

        monkeypatch.setattr(canvas.Canvas, "save", explode)

        with pytest.raises(RenderError) as exc_info:
            pdf_service.render_invoice(sample_invoice)

        assert exc_info.value.code == "RENDER_FAILED"

    def test_render_does_not_mutate_invoice(self, pdf_service, make_invoice):
        invoice = make_invoice(line_count=30)
        before = invoice.to_document()

        pdf_service.render_invoice(invoice)

        assert invoice.to_document() == before

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from src.domain.invoice import (
    AdditionalCharges,
    ClientInfo,
    Footer,
    Invoice,
    PaymentStatus,
    ServiceLine,
)
from src.domain.invoice_math import summarize


@pytest.fixture
def make_invoice():
    """Factory for stored-shape invoices with a computed summary"""

    def _make(
        invoice_id="inv_test0001",
        line_count=1,
        created_at=None,
        tax_percent=Decimal("10"),
        discount=Decimal("0"),
        **overrides,
    ):
        lines = overrides.pop("lines", None)
        if lines is None:
            lines = [
                ServiceLine(
                    name=f"Service {index + 1}",
                    description="Editing and color grading",
                    quantity=Decimal("2"),
                    rate=Decimal("150"),
                    amount=Decimal("300"),
                )
                for index in range(line_count)
            ]
        charges = overrides.pop("additional_charges", AdditionalCharges())
        fields = dict(
            id=invoice_id,
            created_at=created_at or datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc),
            client_info=ClientInfo(name="Acme Co", address="12 Main St", city="Pune", email="ap@acme.test"),
            project_ref="Launch video",
            lines=lines,
            additional_charges=charges,
            summary=summarize(lines, charges, tax_percent, discount),
            currency="US$",
            status=PaymentStatus.UNPAID,
            payment_status=PaymentStatus.UNPAID,
            footer=Footer(business_name="VR PRODUCTIONS", address="Nagpur, Maharashtra, India"),
        )
        fields.update(overrides)
        return Invoice(**fields)

    return _make


@pytest.fixture
def sample_invoice(make_invoice):
    return make_invoice()


@pytest.fixture
def valid_payload():
    """Minimal valid creation request"""
    return {
        "client_info": {"name": "Acme Co", "email": "ap@acme.test"},
        "project_ref": "Launch video",
        "lines": [{"name": "Video edit", "quantity": 2, "rate": 150}],
        "summary": {"tax_percent": 10, "discount": 0},
    }

"""Invoice Record Table

Relational row for one invoice: denormalized listing columns plus the full
document stored verbatim.
"""

import json
from datetime import datetime, timezone
from decimal import Decimal
from sqlmodel import Field, Column, Index
from sqlalchemy import DateTime, Numeric, String, Text
from src.domain.base import BaseModel
from src.domain.invoice import Invoice


class InvoiceRecord(BaseModel, table=True):
    """
    Invoice Record - Persisted form of an Invoice

    Domain Rules:
    - id is the primary key and never changes
    - status, payment_status, payment_method, currency and total mirror data
    - data holds the complete JSON document used for reconstruction
    """

    __tablename__ = "invoices"
    __table_args__ = (
        Index('ix_invoices_created_at', 'created_at'),
    )

    id: str = Field(
        sa_column=Column(String(64), primary_key=True),
        description="Opaque invoice identifier"
    )

    created_at: datetime = Field(
        sa_column=Column(DateTime, nullable=False),
        description="Creation timestamp (naive UTC)"
    )

    status: str = Field(
        sa_column=Column(String(16), nullable=False),
        description="Invoice status (unpaid, paid, partial)"
    )

    payment_status: str = Field(
        sa_column=Column(String(16), nullable=False),
        description="Payment status, mirrors status"
    )

    payment_method: str = Field(
        default="",
        sa_column=Column(String(80), nullable=False),
        description="Payment method label"
    )

    currency: str = Field(
        default="",
        sa_column=Column(String(10), nullable=False),
        description="Currency code or symbol"
    )

    total: Decimal = Field(
        sa_column=Column(Numeric(18, 2), nullable=False),
        description="Summary total (precision: 18,2)"
    )

    data: str = Field(
        sa_column=Column(Text, nullable=False),
        description="Full invoice document as JSON"
    )

    @staticmethod
    def column_timestamp(value: datetime) -> datetime:
        """SQLite keeps no offset, so rows store naive UTC"""
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    @classmethod
    def from_invoice(cls, invoice: Invoice) -> "InvoiceRecord":
        return cls(
            id=invoice.id,
            created_at=cls.column_timestamp(invoice.created_at),
            data=json.dumps(invoice.to_document()),
            **invoice.listing_columns(),
        )

    def apply(self, invoice: Invoice) -> None:
        """Overwrite the mutable columns from an updated document"""
        for column, value in invoice.listing_columns().items():
            setattr(self, column, value)
        self.data = json.dumps(invoice.to_document())

    def to_invoice(self) -> Invoice:
        return Invoice.from_document(json.loads(self.data))

from .base import BaseModel, generate_id
from .invoice import (
    Invoice,
    PaymentStatus,
    ClientInfo,
    ServiceLine,
    AdditionalCharges,
    Summary,
    Footer,
)
from .invoice_record import InvoiceRecord
from .business_profile import BusinessProfile

__all__ = [
    "BaseModel",
    "generate_id",
    "Invoice",
    "PaymentStatus",
    "ClientInfo",
    "ServiceLine",
    "AdditionalCharges",
    "Summary",
    "Footer",
    "InvoiceRecord",
    "BusinessProfile",
]

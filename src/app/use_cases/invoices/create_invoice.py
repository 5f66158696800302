"""CreateInvoice Use Case

Validates a creation payload, computes the summary server-side and persists
the new invoice.
"""

import logging
from datetime import datetime, timezone
from typing import Any

from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.base import generate_id
from src.domain.business_profile import BusinessProfile
from src.domain.invoice import (
    AdditionalCharges,
    ClientInfo,
    Footer,
    Invoice,
    ServiceLine,
)
from src.domain.invoice_math import line_amount, summarize
from .validation import validate_create

logger = logging.getLogger(__name__)


class CreateInvoice:
    """
    Use Case: Create an invoice

    Business Rules:
    1. Blank lines are dropped; at least one named line must remain
    2. Line amount defaults to quantity * rate
    3. subtotal, tax_amount and total are always recomputed here
    4. tax_percent defaults to the configured rate when not submitted
    5. status and payment_status are stored with the same value
    6. Empty footer identity fields come from the business profile

    Flow:
    1. Validate payload
    2. Build lines and summary
    3. Assign id and created_at
    4. Insert into the store
    5. Return the new id
    """

    def __init__(self, invoice_repo: InvoiceRepository, business_profile: BusinessProfile):
        self.invoice_repo = invoice_repo
        self.business_profile = business_profile

    async def execute(self, payload: Any) -> str:
        """
        Execute invoice creation

        Args:
            payload: Decoded JSON creation request

        Returns:
            Identifier of the stored invoice

        Raises:
            ValidationError: If the payload is rejected (nothing is stored)
            StoreError: If the store write fails
        """
        # Step 1: Validate
        command = validate_create(payload)

        # Step 2: Lines and summary
        lines = [
            ServiceLine(
                name=line.name,
                description=line.description,
                quantity=line.quantity,
                rate=line.rate,
                amount=line_amount(line.quantity, line.rate, line.amount),
            )
            for line in command.lines
        ]
        additional_charges = AdditionalCharges(**command.additional_charges.model_dump())

        tax_percent = command.summary.tax_percent
        if tax_percent is None:
            tax_percent = self.business_profile.default_tax_percent
        summary = summarize(lines, additional_charges, tax_percent, command.summary.discount)

        # Step 3: Identity
        status = command.resolved_status
        invoice = Invoice(
            id=generate_id("inv"),
            created_at=datetime.now(timezone.utc),
            client_info=ClientInfo(**command.client_info.model_dump()),
            project_ref=command.project_ref,
            invoice_number=command.invoice_number,
            reference=command.reference,
            invoice_date=command.invoice_date,
            due_date=command.due_date,
            lines=lines,
            additional_charges=additional_charges,
            summary=summary,
            currency=command.currency or self.business_profile.default_currency,
            status=status,
            payment_status=status,
            payment_method=command.payment_method,
            notes=command.notes,
            footer=self.business_profile.fill_footer(Footer(**command.footer.model_dump())),
        )

        # Step 4: Persist
        await self.invoice_repo.insert(invoice)
        logger.info(f"Created invoice {invoice.id} for {invoice.client_info.name} total={summary.total}")

        return invoice.id

"""MigrateSnapshot

One-time import of the legacy invoices.json snapshot into an empty store.
Legacy entries use camelCase keys and flat client fields; they are converted
into Invoice documents as-is, without recomputing their totals.
"""

import json
import logging
import os
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from src.app.errors import StoreError
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice
from src.domain.invoice_math import line_amount, to_decimal

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _object(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _legacy_line(entry: Dict[str, Any]) -> Dict[str, Any]:
    quantity = to_decimal(entry.get("quantity") or 0)
    rate = to_decimal(entry.get("rate") or 0)
    explicit = entry.get("amount")
    return {
        "name": _text(entry.get("name")),
        "description": _text(entry.get("description")),
        "quantity": quantity,
        "rate": rate,
        "amount": line_amount(quantity, rate, explicit if explicit not in (None, "", 0) else None),
    }


def legacy_to_invoice(entry: Dict[str, Any]) -> Invoice:
    """
    Convert one legacy snapshot entry into an Invoice

    Args:
        entry: Decoded legacy invoice object

    Returns:
        Invoice carrying the legacy summary unchanged

    Raises:
        ValueError: If the entry cannot be represented as an Invoice
    """
    client = _object(entry.get("clientInfo"))
    charges = _object(entry.get("additionalCharges"))
    summary = _object(entry.get("summary"))
    footer = _object(entry.get("footer"))
    status = _text(entry.get("status")) or _text(entry.get("paymentStatus")) or "unpaid"

    document = {
        "id": _text(entry.get("id")),
        "created_at": entry.get("createdAt") or datetime.now(timezone.utc),
        "client_info": {
            "name": _text(entry.get("clientName") or client.get("name")),
            "address": _text(entry.get("clientAddress") or client.get("address")),
            "city": _text(entry.get("clientCity") or client.get("city")),
            "email": _text(entry.get("clientEmail") or client.get("email")),
            "phone": _text(entry.get("clientPhone") or client.get("phone")),
        },
        "project_ref": _text(entry.get("projectName")),
        "invoice_number": _text(entry.get("projectId") or entry.get("invoiceNumber")),
        "reference": _text(entry.get("reference")),
        "invoice_date": _text(entry.get("invoiceDate")),
        "due_date": _text(entry.get("dueDate")),
        "lines": [
            _legacy_line(line)
            for line in (entry.get("services") or [])
            if isinstance(line, dict)
        ],
        "additional_charges": {
            "extra_revision": to_decimal(charges.get("extraRevision") or 0),
            "express_delivery": to_decimal(charges.get("expressDelivery") or 0),
            "addons_amount": to_decimal(charges.get("addonsAmount") or 0),
            "addons_description": _text(charges.get("addonsDescription")),
        },
        "summary": {
            "subtotal": to_decimal(summary.get("subtotal") or 0),
            "tax_percent": to_decimal(summary.get("taxPercent") or 0),
            "tax_amount": to_decimal(summary.get("taxAmount") or 0),
            "discount": to_decimal(summary.get("discount") or 0),
            "total": to_decimal(summary.get("total") or 0),
        },
        "currency": _text(entry.get("currency")),
        "status": status,
        "payment_status": status,
        "payment_method": _text(entry.get("paymentMethod")),
        "notes": _text(entry.get("notes")),
        "footer": {
            "business_name": _text(footer.get("businessName")),
            "contact": _text(footer.get("contact")),
            "address": _text(footer.get("address")),
            "city": _text(footer.get("city")),
            "tax_id": _text(footer.get("taxId")),
            "website": _text(footer.get("website")),
            "email": _text(footer.get("email")),
            "phone": _text(footer.get("phone")),
            "terms": _text(footer.get("terms")),
            "refund_policy": _text(footer.get("refundPolicy")),
            "logo_url": _text(footer.get("logoUrl")),
        },
    }
    return Invoice.from_document(document)


def _read_snapshot(snapshot_path: str) -> Optional[List[Any]]:
    if not snapshot_path or not os.path.exists(snapshot_path):
        return None
    try:
        with open(snapshot_path, "r", encoding="utf-8") as r_file:
            raw = r_file.read()
    except OSError as e:
        logger.warning(f"Could not read invoice snapshot {snapshot_path}: {e}")
        return None
    if not raw.strip():
        return None
    try:
        data = json.loads(raw)
    except ValueError as e:
        logger.warning(f"Invoice snapshot {snapshot_path} is not valid JSON: {e}")
        return None
    if not isinstance(data, list):
        logger.warning(f"Invoice snapshot {snapshot_path} is not a list; skipping migration")
        return None
    return data


async def migrate(store: InvoiceRepository, snapshot_path: str) -> int:
    """
    Import the legacy snapshot when the store holds no invoices

    Safe to call on every startup: a non-empty store is left untouched.
    Store failures are logged and stop the import without raising.

    Args:
        store: Initialized invoice store
        snapshot_path: Path of the legacy invoices.json file

    Returns:
        Number of invoices inserted
    """
    try:
        if not await store.is_empty():
            return 0
    except StoreError as e:
        logger.error(f"Skipping invoice migration; store check failed: {e.message} ({e.reason})")
        return 0

    entries = _read_snapshot(snapshot_path)
    if not entries:
        return 0

    inserted = 0
    seen = set()
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or not entry.get("id"):
            logger.warning(f"Skipping legacy invoice #{index}: missing id")
            continue
        try:
            invoice = legacy_to_invoice(entry)
        except (ValueError, ArithmeticError) as e:
            logger.warning(f"Skipping legacy invoice {entry.get('id')}: {e}")
            continue
        # First entry wins for a repeated id
        if invoice.id in seen:
            logger.warning(f"Skipping duplicate legacy invoice {invoice.id} (entry #{index})")
            continue
        seen.add(invoice.id)
        try:
            await store.insert(invoice)
        except StoreError as e:
            logger.error(
                f"Invoice migration stopped at {invoice.id} after {inserted} rows: "
                f"{e.message} ({e.reason})"
            )
            break
        inserted += 1

    logger.info(f"Migrated {inserted} legacy invoices from {snapshot_path}")
    return inserted

"""Remote Invoice Repository Implementation

Invoice store backed by a hosted Postgres table exposed through a
PostgREST endpoint (Supabase REST API). Every operation is one or two
HTTP round trips; concurrency control is left to the remote service.
"""

import logging
from typing import Any, Dict, List, Optional
import httpx

from src.app.errors import StoreError
from src.app.repositories.invoice_repository import InvoiceRepository
from src.domain.invoice import Invoice

logger = logging.getLogger(__name__)


class RestInvoiceRepository(InvoiceRepository):
    """
    PostgREST implementation of InvoiceRepository

    Row layout (snake_case columns):
        id, created_at, status, payment_status, payment_method,
        currency, total, data (jsonb)

    An empty result set means "not found". Transport failures, 5xx and 429
    responses raise a transient StoreError; other 4xx raise a permanent one.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        table: str = "invoices",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the repository

        Args:
            base_url: Project URL (e.g., https://xyz.supabase.co)
            api_key: Service role key, sent as apikey and bearer token
            table: Table name
            timeout: Per-request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.base_url = base_url.rstrip("/")
        self.table = table
        self.client = httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def initialize(self) -> None:
        logger.info(f"Remote invoice store configured at {self.base_url} (table={self.table})")

    async def close(self) -> None:
        await self.client.aclose()

    async def insert(self, invoice: Invoice) -> None:
        row = {
            "id": invoice.id,
            "created_at": invoice.created_at.isoformat(),
            "data": invoice.to_document(),
            **self._columns(invoice),
        }
        await self._request("POST", json=row, prefer="return=minimal")

    async def get_by_id(self, invoice_id: str) -> Optional[Invoice]:
        rows = await self._request_rows(
            "GET", params={"select": "data", "id": f"eq.{invoice_id}"}
        )
        if not rows:
            return None
        try:
            return Invoice.from_document(rows[0]["data"])
        except (KeyError, TypeError, ValueError) as e:
            logger.exception(f"Unreadable remote invoice row {invoice_id}")
            raise StoreError("Failed to load invoice", reason=str(e)) from e

    async def list(self) -> List[Invoice]:
        rows = await self._request_rows(
            "GET", params={"select": "id,data", "order": "created_at.asc,id.asc"}
        )
        invoices = []
        for row in rows:
            try:
                invoices.append(Invoice.from_document(row["data"]))
            except (KeyError, TypeError, ValueError):
                logger.warning(f"Skipping unreadable remote invoice row {row.get('id')}")
        return invoices

    async def update(self, invoice_id: str, patch_fields: Dict[str, Any]) -> bool:
        existing = await self.get_by_id(invoice_id)
        if existing is None:
            return False

        try:
            invoice = existing.merged(patch_fields)
        except ValueError as e:
            logger.exception(f"Invalid merged document for invoice {invoice_id}")
            raise StoreError("Failed to update invoice", reason=str(e)) from e

        row = {"data": invoice.to_document(), **self._columns(invoice)}
        rows = await self._request_rows(
            "PATCH",
            params={"id": f"eq.{invoice_id}", "select": "id"},
            json=row,
            prefer="return=representation",
        )
        return len(rows) > 0

    async def delete(self, invoice_id: str) -> bool:
        rows = await self._request_rows(
            "DELETE",
            params={"id": f"eq.{invoice_id}", "select": "id"},
            prefer="return=representation",
        )
        return len(rows) > 0

    async def is_empty(self) -> bool:
        rows = await self._request_rows("GET", params={"select": "id", "limit": "1"})
        return len(rows) == 0

    @staticmethod
    def _columns(invoice: Invoice) -> Dict[str, Any]:
        columns = invoice.listing_columns()
        columns["total"] = str(columns["total"])
        return columns

    async def _request(
        self,
        method: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        prefer: Optional[str] = None,
    ) -> httpx.Response:
        headers = {"Prefer": prefer} if prefer else None
        try:
            response = await self.client.request(
                method, f"/{self.table}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            logger.error(f"Invoice store request {method} /{self.table} failed: {e!r}")
            raise StoreError(
                "Invoice store unavailable", reason=repr(e), transient=True
            ) from e

        if response.status_code >= 400:
            transient = response.status_code >= 500 or response.status_code == 429
            logger.error(
                f"Invoice store request {method} /{self.table} returned "
                f"{response.status_code}: {response.text}"
            )
            raise StoreError(
                "Invoice store request failed",
                reason=f"HTTP {response.status_code}: {response.text}",
                transient=transient,
            )
        return response

    async def _request_rows(
        self,
        method: str,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
        prefer: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        response = await self._request(method, params=params, json=json, prefer=prefer)
        try:
            rows = response.json()
        except ValueError as e:
            logger.error(
                f"Invoice store request {method} /{self.table} returned a non-JSON body: "
                f"{response.text[:200]!r}"
            )
            raise StoreError(
                "Invoice store returned an unreadable response", reason=repr(e), transient=True
            ) from e
        if not isinstance(rows, list):
            logger.error(
                f"Invoice store request {method} /{self.table} returned "
                f"{type(rows).__name__}, not rows"
            )
            raise StoreError(
                "Invoice store returned an unreadable response",
                reason=f"Expected a JSON array, got {type(rows).__name__}",
                transient=True,
            )
        return rows

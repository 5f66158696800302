"""Backend-specific tests for the PostgREST invoice store"""

import pytest

from src.app.errors import StoreError


@pytest.mark.asyncio
async def test_requests_carry_service_key(rest_store, fake_postgrest):
    await rest_store.is_empty()

    request = fake_postgrest.requests[-1]
    assert request.headers["apikey"] == "service-role-key"
    assert request.headers["authorization"] == "Bearer service-role-key"


@pytest.mark.asyncio
async def test_listing_columns_written(rest_store, fake_postgrest, sample_invoice):
    await rest_store.insert(sample_invoice)
    await rest_store.update(sample_invoice.id, {"status": "paid", "payment_status": "paid"})

    row = fake_postgrest.rows[sample_invoice.id]
    assert row["status"] == "paid"
    assert row["payment_status"] == "paid"
    assert row["total"] == "330.00"
    assert row["data"]["status"] == "paid"


@pytest.mark.asyncio
async def test_network_failure_is_transient(rest_store, fake_postgrest):
    fake_postgrest.fail_network = True

    with pytest.raises(StoreError) as exc_info:
        await rest_store.get_by_id("inv_1")

    assert exc_info.value.transient is True
    assert exc_info.value.code == "STORE_UNAVAILABLE"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code,transient", [(500, True), (503, True), (429, True), (400, False), (401, False)])
async def test_http_errors_classified(rest_store, fake_postgrest, sample_invoice, status_code, transient):
    fake_postgrest.fail_status = status_code

    with pytest.raises(StoreError) as exc_info:
        await rest_store.insert(sample_invoice)

    assert exc_info.value.transient is transient


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "call",
    [
        lambda store: store.get_by_id("inv_1"),
        lambda store: store.list(),
        lambda store: store.delete("inv_1"),
        lambda store: store.is_empty(),
    ],
    ids=["get_by_id", "list", "delete", "is_empty"],
)
async def test_non_json_success_body_is_transient(rest_store, fake_postgrest, call):
    fake_postgrest.garbage_body = b"<html>Bad gateway</html>"

    with pytest.raises(StoreError) as exc_info:
        await call(rest_store)

    assert exc_info.value.transient is True


@pytest.mark.asyncio
async def test_non_array_body_is_transient(rest_store, fake_postgrest):
    fake_postgrest.garbage_body = b'{"message": "not rows"}'

    with pytest.raises(StoreError) as exc_info:
        await rest_store.list()

    assert exc_info.value.transient is True

"""Migration of the legacy snapshot into real stores"""

import json

import pytest

from src.app.use_cases.invoices.migrate_snapshot import migrate


@pytest.fixture
def legacy_snapshot(tmp_path):
    entries = [
        {
            "id": f"inv_legacy{i}",
            "createdAt": f"2024-01-0{i + 1}T10:00:00.000Z",
            "clientName": f"Client {i}",
            "projectName": "Wedding film",
            "services": [{"name": "Edit", "quantity": 1, "rate": 100, "amount": 100}],
            "summary": {"subtotal": 100, "taxPercent": 10, "taxAmount": 10, "total": 110},
            "paymentStatus": "unpaid",
        }
        for i in range(3)
    ]
    path = tmp_path / "invoices.json"
    path.write_text(json.dumps(entries), encoding="utf-8")
    return str(path)


@pytest.mark.asyncio
async def test_migrate_twice_does_not_duplicate(store, legacy_snapshot):
    first = await migrate(store, legacy_snapshot)
    second = await migrate(store, legacy_snapshot)

    assert first == 3
    assert second == 0
    invoices = await store.list()
    assert [invoice.id for invoice in invoices] == ["inv_legacy0", "inv_legacy1", "inv_legacy2"]
    assert str(invoices[0].summary.total) == "110"


@pytest.mark.asyncio
async def test_repeated_id_does_not_stop_import(store, tmp_path):
    entries = [
        {"id": "inv_a", "createdAt": "2024-01-01T10:00:00.000Z", "clientName": "First"},
        {"id": "inv_a", "createdAt": "2024-01-02T10:00:00.000Z", "clientName": "Repeat"},
        {"id": "inv_b", "createdAt": "2024-01-03T10:00:00.000Z", "clientName": "Second"},
        {"id": "inv_c", "createdAt": "2024-01-04T10:00:00.000Z", "clientName": "Third"},
    ]
    path = tmp_path / "repeated.json"
    path.write_text(json.dumps(entries), encoding="utf-8")

    first = await migrate(store, str(path))
    second = await migrate(store, str(path))

    assert first == 3
    assert second == 0
    invoices = await store.list()
    assert [invoice.id for invoice in invoices] == ["inv_a", "inv_b", "inv_c"]
    assert invoices[0].client_info.name == "First"

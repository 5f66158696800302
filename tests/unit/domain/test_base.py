"""Unit tests for identifier generation"""

import time

from src.domain.base import generate_id

BASE36 = set("0123456789abcdefghijklmnopqrstuvwxyz")


class TestGenerateId:
    def test_has_prefix_and_base36_body(self):
        invoice_id = generate_id("inv")

        prefix, body = invoice_id.split("_", 1)
        assert prefix == "inv"
        assert len(body) > 8
        assert set(body) <= BASE36

    def test_time_part_is_current_millis(self):
        before = int(time.time() * 1000)
        invoice_id = generate_id()
        after = int(time.time() * 1000)

        millis = int(invoice_id[len("inv_"):-8], 36)
        assert before - 1 <= millis <= after + 1

    def test_ids_are_unique(self):
        ids = {generate_id() for _ in range(2000)}

        assert len(ids) == 2000

"""Unit tests for key helpers."""

from __future__ import annotations

import uuid

from recstore_ddb.schema import KeySchema
from recstore_ddb.utils import build_keys, extract_keys, generate_id


def test_generate_id_returns_distinct_uuid4_strings() -> None:
    first, second = generate_id(), generate_id()

    assert first != second
    assert uuid.UUID(first).version == 4


def test_build_keys_skips_sort_value_when_absent() -> None:
    schema = KeySchema(table_name="stub-table")

    assert build_keys(schema, "p1", "products") == {"id": "p1", "sk": "products"}
    assert build_keys(schema, "p1") == {"id": "p1"}
    assert build_keys(KeySchema(table_name="stub-table", sort_field=None), "p1", "ignored") == {"id": "p1"}


def test_extract_keys_projects_present_key_fields() -> None:
    schema = KeySchema(table_name="stub-table", partition_field="userId", sort_field="entityType")

    assert extract_keys({"userId": "u1", "entityType": "profile", "name": "Ada"}, schema) == {
        "userId": "u1",
        "entityType": "profile",
    }
    assert extract_keys({"userId": "u1"}, schema) == {"userId": "u1"}

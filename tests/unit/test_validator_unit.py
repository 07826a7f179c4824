"""Unit tests for key, record and patch validation."""

from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from recstore_ddb.exception import BatchItemException, ValidationError
from recstore_ddb.schema import KeySchema
from recstore_ddb.validator import RecordValidator, is_key_value

from tests.unit.mocks import build_test_item


def _validator(**overrides) -> RecordValidator:
    return RecordValidator(KeySchema(table_name="stub-table", **overrides))


@pytest.mark.parametrize("value", ["a", "not-a-uuid", 0, 7, 1.5, Decimal("3")])
def test_key_values_accept_non_empty_strings_and_numbers(value) -> None:
    assert is_key_value(value)


@pytest.mark.parametrize(
    "value",
    ["", None, True, False, [], {}, ("a",), float("nan"), float("inf"), -float("inf"), Decimal("NaN"), Decimal("Infinity")],
)
def test_key_values_reject_empty_non_scalar_and_non_finite(value) -> None:
    assert not is_key_value(value)


def test_validate_keys_restricts_to_schema_fields() -> None:
    keys = _validator().validate_keys({"id": "p1", "sk": "products", "name": "Widget"})

    assert keys == {"id": "p1", "sk": "products"}


def test_validate_keys_accepts_numeric_values_without_coercion() -> None:
    keys = _validator().validate_keys({"id": 42, "sk": "products"})

    assert keys["id"] == 42
    assert isinstance(keys["id"], int)


def test_validate_keys_names_every_missing_field() -> None:
    with pytest.raises(ValidationError) as excinfo:
        _validator().validate_keys({"name": "Widget"})

    assert excinfo.value.fields == ("id", "sk")
    assert str(excinfo.value) == "Validation failed for keys: Missing or invalid fields: id, sk"


def test_validate_keys_rejects_empty_string() -> None:
    with pytest.raises(ValidationError) as excinfo:
        _validator().validate_keys({"id": "", "sk": "products"})

    assert excinfo.value.fields == ("id",)


@pytest.mark.parametrize("value", [float("nan"), float("inf"), Decimal("NaN"), Decimal("-Infinity")])
def test_validate_keys_rejects_non_finite_numbers(value) -> None:
    with pytest.raises(ValidationError) as excinfo:
        _validator().validate_keys({"id": value, "sk": "products"})

    assert excinfo.value.fields == ("id",)


def test_validate_record_rejects_non_finite_key_inside_batch() -> None:
    records = [build_test_item(), build_test_item(sk=float("nan"))]

    with pytest.raises(ValidationError) as excinfo:
        _validator().validate_batch_records(records)

    assert excinfo.value.index == 1
    assert excinfo.value.fields == ("sk",)


def test_validate_keys_keeps_decimal_and_float_values_as_given() -> None:
    keys = _validator().validate_keys({"id": Decimal("1.10"), "sk": 2.5})

    assert isinstance(keys["id"], Decimal)
    assert keys["id"] == Decimal("1.10")
    assert keys["sk"] == 2.5


def test_validate_keys_lists_invalid_fields_in_schema_order() -> None:
    with pytest.raises(ValidationError) as excinfo:
        _validator().validate_keys({"sk": True, "id": ""})

    assert excinfo.value.fields == ("id", "sk")
    assert str(excinfo.value) == "Validation failed for keys: Missing or invalid fields: id, sk"


def test_key_fields_may_use_any_attribute_name() -> None:
    validator = _validator(partition_field="user-id", sort_field="model_config")

    assert validator.validate_keys({"user-id": "u1", "model_config": "profile"}) == {
        "user-id": "u1",
        "model_config": "profile",
    }
    with pytest.raises(ValidationError) as excinfo:
        validator.validate_record({"user-id": "u1"})

    assert excinfo.value.fields == ("model_config",)


def test_validate_record_error_is_chained_to_pydantic_error() -> None:
    with pytest.raises(ValidationError) as excinfo:
        _validator().validate_record({"id": "p1"})

    assert isinstance(excinfo.value.__cause__, PydanticValidationError)


def test_patch_updates_must_be_a_mapping() -> None:
    with pytest.raises(ValidationError) as excinfo:
        _validator().validate_patch_updates({"id": "p1", "sk": "products"}, ["price", 12])

    assert str(excinfo.value).startswith("Validation failed for updates: ")


def test_validate_keys_rejects_non_mapping() -> None:
    with pytest.raises(ValidationError):
        _validator().validate_keys(["p1", "products"])


def test_validate_keys_with_custom_fields() -> None:
    validator = _validator(partition_field="userId", sort_field="entityType")

    keys = validator.validate_keys({"userId": "u1", "entityType": "profile", "id": "ignored"})

    assert keys == {"userId": "u1", "entityType": "profile"}
    with pytest.raises(ValidationError):
        validator.validate_keys({"id": "p1", "sk": "products"})


def test_partition_only_schema_needs_only_partition_field() -> None:
    validator = _validator(sort_field=None)

    assert validator.validate_keys({"id": "p1", "sk": "ignored"}) == {"id": "p1"}
    assert validator.validate_record({"id": "p1"}) == {"id": "p1"}


def test_validate_record_passes_extra_fields_through_as_copy() -> None:
    original = build_test_item()

    record = _validator().validate_record(original)

    assert record == original
    assert record is not original
    record["dimensions"]["width"] = 99
    assert original["dimensions"]["width"] == 2


def test_validate_record_rejects_missing_sort_field() -> None:
    with pytest.raises(ValidationError) as excinfo:
        _validator().validate_record({"id": "p1", "name": "Widget"})

    assert str(excinfo.value) == "Validation failed for record: Missing or invalid fields: sk"


def test_batch_keys_error_names_failing_index() -> None:
    keys_list = [{"id": "a", "sk": "x"}, {"id": "b", "sk": "x"}, {"id": "c"}]

    with pytest.raises(ValidationError) as excinfo:
        _validator().validate_batch_keys(keys_list)

    assert excinfo.value.index == 2
    assert excinfo.value.fields == ("sk",)
    assert str(excinfo.value).startswith("Validation failed for keys at index 2: ")
    assert "Missing or invalid fields: sk" in str(excinfo.value)


def test_batch_records_error_names_first_failing_index() -> None:
    records = [build_test_item(), build_test_item(id=""), build_test_item(sk=None)]

    with pytest.raises(ValidationError) as excinfo:
        _validator().validate_batch_records(records)

    assert excinfo.value.index == 1
    assert "record at index 1" in str(excinfo.value)


def test_batch_validation_rejects_non_list_input() -> None:
    with pytest.raises(BatchItemException):
        _validator().validate_batch_records((build_test_item(),))


def test_batch_validation_of_empty_list_is_empty() -> None:
    assert _validator().validate_batch_keys([]) == []


def test_patch_updates_strip_key_fields() -> None:
    keys, updates = _validator().validate_patch_updates(
        {"id": "p1", "sk": "products"}, {"id": "other", "sk": "users", "price": 12}
    )

    assert keys == {"id": "p1", "sk": "products"}
    assert updates == {"price": 12}


def test_patch_updates_strip_matching_key_values_too() -> None:
    _, updates = _validator().validate_patch_updates(
        {"id": "p1", "sk": "products"}, {"id": "p1", "sk": "products"}
    )

    assert updates == {}


def test_patch_updates_validate_keys_first() -> None:
    with pytest.raises(ValidationError):
        _validator().validate_patch_updates({"id": "p1"}, {"price": 12})


def test_batch_patch_updates_name_failing_index() -> None:
    requests = [
        {"keys": {"id": "p1", "sk": "products"}, "updates": {"price": 1}},
        {"keys": {"id": "p2", "sk": "products"}},
    ]

    with pytest.raises(ValidationError) as excinfo:
        _validator().validate_batch_patch_updates(requests)

    assert excinfo.value.index == 1
    assert "patch at index 1" in str(excinfo.value)


def test_index_value_requires_configured_sort_field() -> None:
    with pytest.raises(ValidationError):
        _validator(sort_field=None).validate_index_value("products")
    with pytest.raises(ValidationError):
        _validator().validate_index_value("")
    assert _validator().validate_index_value("products") == "products"


def test_key_schema_rejects_empty_table_name() -> None:
    with pytest.raises(ValueError):
        KeySchema(table_name="")

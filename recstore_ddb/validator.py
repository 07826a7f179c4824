"""Structural checks applied to keys, records and patches before any backend call.

Key and record models are built per ``KeySchema`` with pydantic. Only the key
fields are declared; records stay open to any other attribute.
"""

from copy import deepcopy
from decimal import Decimal
from typing import Annotated, Any, Callable, Dict, List, Tuple, Type, Union

from pydantic import (
    AllowInfNan,
    BaseModel,
    ConfigDict,
    Field,
    Strict,
    StrictInt,
    StringConstraints,
    TypeAdapter,
    create_model,
)
from pydantic import ValidationError as PydanticValidationError

from recstore_ddb.exception import BatchItemException, ValidationError
from recstore_ddb.schema import KeySchema
from recstore_ddb.types import Key, KeyValue, PatchRequest, Record

FiniteFloat = Annotated[float, Strict(), AllowInfNan(False)]
FiniteDecimal = Annotated[Decimal, Strict(), AllowInfNan(False)]
NonEmptyString = Annotated[str, StringConstraints(strict=True, min_length=1)]

# booleans are rejected by the strict number types
KeyValueField = Union[StrictInt, FiniteFloat, FiniteDecimal, NonEmptyString]

key_value_adapter = TypeAdapter(KeyValueField)
updates_adapter = TypeAdapter(Dict[str, Any])


class PatchRequestModel(BaseModel):
    keys: Dict[str, Any]
    updates: Dict[str, Any]


def is_key_value(value: Any) -> bool:
    try:
        key_value_adapter.validate_python(value)
    except PydanticValidationError:
        return False
    return True


def to_validation_error(error: PydanticValidationError, subject: str) -> ValidationError:
    """Collapse pydantic error details onto the top-level field names they concern."""
    details = error.errors()
    fields: List[str] = []
    for detail in details:
        if detail["loc"] and str(detail["loc"][0]) not in fields:
            fields.append(str(detail["loc"][0]))
    if not fields:
        return ValidationError(f"Validation failed for {subject}: {details[0]['msg']}")
    return ValidationError(
        f"Validation failed for {subject}: Missing or invalid fields: {', '.join(fields)}",
        fields=fields,
    )


class RecordValidator:

    def __init__(self, schema: KeySchema) -> None:
        self.schema = schema
        self.key_model = self.__build_model("KeyModel", "ignore")
        self.record_model = self.__build_model("RecordModel", "allow")

    def validate_keys(self, raw: Any) -> Key:
        keys = self.__check(self.key_model.model_validate, raw, "keys")
        return keys.model_dump(by_alias=True)

    def validate_record(self, raw: Any) -> Record:
        self.__check(self.record_model.model_validate, raw, "record")
        return deepcopy(dict(raw))

    def validate_batch_keys(self, raw_list: Any) -> List[Key]:
        return self.__validate_each(raw_list, self.validate_keys, "keys")

    def validate_batch_records(self, raw_list: Any) -> List[Record]:
        return self.__validate_each(raw_list, self.validate_record, "record")

    def validate_patch_updates(self, keys: Any, updates: Any) -> Tuple[Key, Dict[str, Any]]:
        validated_keys = self.validate_keys(keys)
        validated_updates = self.__check(updates_adapter.validate_python, updates, "updates")
        cleaned = {
            field: deepcopy(value)
            for field, value in validated_updates.items()
            if field not in self.schema.key_fields
        }
        return validated_keys, cleaned

    def validate_batch_patch_updates(self, requests: Any) -> List[PatchRequest]:
        def validate_request(request: Any) -> PatchRequest:
            parsed = self.__check(PatchRequestModel.model_validate, request, "patch")
            keys, updates = self.validate_patch_updates(parsed.keys, parsed.updates)
            return {"keys": keys, "updates": updates}

        return self.__validate_each(requests, validate_request, "patch")

    def validate_index_value(self, value: Any) -> KeyValue:
        if self.schema.sort_field is None:
            raise ValidationError("Index lookups require a sort field to be configured")
        try:
            return key_value_adapter.validate_python(value)
        except PydanticValidationError as error:
            raise ValidationError(
                f"Validation failed for index value: Missing or invalid fields: {self.schema.sort_field}",
                fields=(self.schema.sort_field,),
            ) from error

    def __build_model(self, model_name: str, extra: str) -> Type[BaseModel]:
        # attribute names are positional so any table attribute name can be a key field
        fields = {
            f"key_{position}": (KeyValueField, Field(alias=name))
            for position, name in enumerate(self.schema.key_fields)
        }
        return create_model(model_name, __config__=ConfigDict(extra=extra), **fields)

    def __check(self, validate: Callable[[Any], Any], raw: Any, subject: str) -> Any:
        try:
            return validate(raw)
        except PydanticValidationError as error:
            raise to_validation_error(error, subject) from error

    def __validate_each(self, raw_list: Any, validate: Callable[[Any], Any], subject: str) -> List[Any]:
        if not isinstance(raw_list, list):
            raise BatchItemException("Batched data must be contained within a list")
        validated: List[Any] = []
        for index, item in enumerate(raw_list):
            try:
                validated.append(validate(item))
            except ValidationError as error:
                raise error.at_index(index, subject) from error
        return validated

"""Field contract checks for retrieved records."""

from __future__ import annotations

from typing import Any, Dict, Iterable, Sequence, Set

from jsonschema import Draft7Validator

from .errors import FieldContractError


def contract_schema(required: Iterable[str]) -> Dict[str, Any]:
    return {
        "$schema": "http://json-schema.org/draft-07/schema#",
        "type": "object",
        "required": sorted(set(required)),
    }


def missing_fields(records: Sequence[Any], required: Iterable[str]) -> Set[str]:
    """Fields from `required` absent in at least one record."""
    required = set(required)
    missing: Set[str] = set()
    for record in records:
        # A non-object record carries none of the fields
        present = set(record) if isinstance(record, dict) else set()
        missing |= required - present
    return missing


def validate_fields(records: Sequence[Any], required: Iterable[str]) -> None:
    required = set(required)
    validator = Draft7Validator(contract_schema(required))
    invalid = [record for record in records if not validator.is_valid(record)]
    if invalid:
        raise FieldContractError(missing_fields(invalid, required))

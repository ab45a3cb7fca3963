"""
Field resolution for raw provider verification records.

Upstream records name the same logical field either with legacy keys
("Licenses", "NPI Validation") or camelCase keys ("licenses",
"npiValidation"). Each logical field maps to an ordered tuple of candidate
keys; the first key holding a value wins.
"""

import copy
import logging
from typing import Any, Dict, Mapping, Tuple

logger = logging.getLogger(__name__)


class MalformedRecordError(ValueError):
    """Raised when a record or one of its entries is not a structured object."""
    pass


# logical field -> (candidate keys in precedence order, default)
RECORD_FIELDS: Dict[str, Tuple[Tuple[str, ...], Any]] = {
    "licenses": (("Licenses", "licenses"), []),
    "npiValidation": (("NPI Validation", "npiValidation"), {}),
    "cmsPreclusionList": (("CMS Preclusion List", "cmsPreclusionList"), []),
    "exclusions": (("Exclusions", "exclusions"), []),
    "ofac": (("OFAC", "ofac"), []),
    "optOut": (("Opt Out", "optOut"), {}),
    "primarySourceCheckedDates": (("Primary Source Checked Dates", "primarySourceCheckedDates"), []),
    "resultStatus": (("Result Status", "resultStatus"), None),
    "searchHistoryId": (("Search History Id", "searchHistoryId"), None),
    "searchRequest": (("Search Request", "searchRequest"), None),
}

# Upstream misspells otherLastNameTypeCode with a lowercase "c"
NPI_VALIDATION_FIELDS: Dict[str, Tuple[Tuple[str, ...], Any]] = {
    "otherLastNameTypeCode": (("otherLastNameTypecode", "otherLastNameTypeCode"), None),
}


def ensure_mapping(value: Any, what: str) -> Mapping:
    """
    Check that a value is a structured object.

    Args:
        value: Value to check
        what: Description used in the error message

    Returns:
        The value unchanged

    Raises:
        MalformedRecordError: If the value is not a mapping
    """
    if not isinstance(value, Mapping):
        raise MalformedRecordError(f"{what} must be an object, got {type(value).__name__}")
    return value


def resolve_field(record: Mapping, field_name: str,
                  aliases: Dict[str, Tuple[Tuple[str, ...], Any]] = RECORD_FIELDS,
                  skip_empty: bool = False) -> Any:
    """
    Resolve a logical field from a record.

    A candidate key counts as absent only when it is missing or holds None;
    empty collections are returned as-is.

    Args:
        record: Raw record mapping
        field_name: Logical field name
        aliases: Field resolution table
        skip_empty: Also skip empty values ('', 0, [], {}); when every
            candidate is empty the last candidate's value is returned

    Returns:
        Resolved value, or a fresh copy of the field's default
    """
    keys, default = aliases[field_name]

    for key in keys:
        value = record.get(key)
        if value is not None and (value or not skip_empty):
            return value

    if skip_empty and record.get(keys[-1]) is not None:
        return record[keys[-1]]

    return copy.deepcopy(default)


def matched_key(record: Mapping, field_name: str,
                aliases: Dict[str, Tuple[Tuple[str, ...], Any]] = RECORD_FIELDS) -> Any:
    """Return the key a field resolved from, or None when the default applied."""
    keys, _ = aliases[field_name]
    for key in keys:
        if record.get(key) is not None:
            return key
    return None

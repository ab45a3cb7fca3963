"""
Pydantic models for raw provider verification records.

The models describe only the structure the transform depends on: the record
and its license / taxonomy entries must be objects and the license lists must
be lists. Every other field is kept as-is.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.normalize.field_resolver import RECORD_FIELDS, resolve_field


class RawLicense(BaseModel):
    """A license entry as delivered upstream."""

    model_config = ConfigDict(extra="allow")

    issuer: Any = None
    category: Any = None
    hasBoardAction: Any = None
    additionalInfo: Any = None
    boardActionData: Any = None
    boardActionDetails: Any = None
    boardActionScreenshotId: Any = None


class NpiTaxonomyEntry(BaseModel):
    """An NPI validation taxonomy entry."""

    model_config = ConfigDict(extra="allow")

    code: Any = None
    switch: Any = None


class NpiValidation(BaseModel):
    """The NPI validation result."""

    model_config = ConfigDict(extra="allow")

    licenses: List[NpiTaxonomyEntry] = Field(default_factory=list)

    @field_validator("licenses", mode="before")
    @classmethod
    def empty_licenses(cls, v):
        # Missing or empty taxonomy lists are treated as no entries
        return v or []


class RawRecord(BaseModel):
    """
    A raw record with each logical field resolved to a single value.

    Pass-through fields are typed Any; the transform copies them unchanged.
    """

    model_config = ConfigDict(extra="allow")

    licenses: List[RawLicense] = Field(default_factory=list)
    npiValidation: NpiValidation = Field(default_factory=NpiValidation)
    cmsPreclusionList: Any = None
    exclusions: Any = None
    ofac: Any = None
    optOut: Any = None
    primarySourceCheckedDates: Any = None
    resultStatus: Any = None
    searchHistoryId: Any = None
    searchRequest: Any = None


def resolved_view(raw_record: Dict[str, Any]) -> Dict[str, Any]:
    """
    Map a raw record onto logical field names.

    Args:
        raw_record: Raw record using legacy or camelCase keys

    Returns:
        Dictionary keyed by logical field name
    """
    return {field: resolve_field(raw_record, field) for field in RECORD_FIELDS}


def parse_raw_record(raw_record: Any) -> RawRecord:
    """
    Parse a raw record into its model.

    Raises:
        pydantic.ValidationError: If the record structure is malformed
    """
    if isinstance(raw_record, dict):
        raw_record = resolved_view(raw_record)
    return RawRecord.model_validate(raw_record)

"""
Canonical record assembly.

Composes field resolution, license normalization, taxonomy extraction and
metadata aggregation into the canonical record handed to downstream indexing.
"""

import logging
from typing import Any, Dict, Optional

from src.aggregate.metadata_aggregator import (
    aggregate_profile_metadata, derive_provider_type, select_primary_taxonomy
)
from src.normalize.field_resolver import (
    NPI_VALIDATION_FIELDS, ensure_mapping, resolve_field
)
from src.normalize.license_normalizer import LicenseNormalizer
from src.normalize.taxonomy_extractor import normalize_npi_licenses

logger = logging.getLogger(__name__)

PASS_THROUGH_FIELDS = ["ofac", "optOut", "primarySourceCheckedDates",
                       "resultStatus", "searchHistoryId", "searchRequest"]


def build_npi_validation(npi_validation: Dict[str, Any]) -> Dict[str, Any]:
    """
    Build the canonical NPI validation object.

    Args:
        npi_validation: Raw NPI validation mapping

    Returns:
        Copy with parsed taxonomy entries, provider type and the
        otherLastNameTypeCode key spelled correctly
    """
    npi_licenses = normalize_npi_licenses(npi_validation.get("licenses") or [])

    provider_type_code, provider_type_label = derive_provider_type(select_primary_taxonomy(npi_licenses))

    canonical = dict(npi_validation)
    canonical["otherLastNameTypeCode"] = resolve_field(
        npi_validation, "otherLastNameTypeCode", NPI_VALIDATION_FIELDS, skip_empty=True
    )
    canonical["providerTypeLabel"] = provider_type_label
    canonical["providerTypeCode"] = provider_type_code
    canonical["licenses"] = npi_licenses
    canonical.pop("otherLastNameTypecode", None)

    return canonical


def transform(raw_record: Any, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Transform a raw provider verification record into its canonical shape.

    The raw record is never mutated; the same input always yields an equal
    output.

    Args:
        raw_record: Raw record mapping using legacy or camelCase keys
        config: Normalization section of the configuration

    Returns:
        Canonical record dictionary

    Raises:
        MalformedRecordError: If the record or one of its entries is not an object
    """
    ensure_mapping(raw_record, "Raw record")
    config = config or {}

    license_normalizer = LicenseNormalizer(config.get("license", {}))
    licenses = license_normalizer.normalize_licenses(resolve_field(raw_record, "licenses"))

    npi_validation = ensure_mapping(resolve_field(raw_record, "npiValidation"), "NPI validation")
    canonical_npi_validation = build_npi_validation(npi_validation)

    resolved = {field: resolve_field(raw_record, field) for field in PASS_THROUGH_FIELDS}

    profile_metadata = aggregate_profile_metadata(
        licenses,
        canonical_npi_validation["licenses"],
        npi_validation,
        result_status=resolved["resultStatus"],
        search_request=resolved["searchRequest"]
    )

    canonical = {
        "profileMetadata": profile_metadata,
        "cmsPreclusionList": resolve_field(raw_record, "cmsPreclusionList"),
        "exclusions": resolve_field(raw_record, "exclusions"),
        "licenses": licenses,
        "npiValidation": canonical_npi_validation,
        "ofac": resolved["ofac"],
        "optOut": resolved["optOut"],
        "primarySourceCheckedDates": resolved["primarySourceCheckedDates"],
        "resultStatus": resolved["resultStatus"],
        "searchHistoryId": resolved["searchHistoryId"],
        "searchRequest": resolved["searchRequest"]
    }

    logger.debug(f"Assembled canonical record with {len(licenses)} licenses")
    return canonical

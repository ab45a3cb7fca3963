"""
Profile metadata aggregation.

Computes profile-level summary fields (primary provider type, board action
flag, distinct states, categories and issuers) from normalized licenses and
parsed NPI taxonomy entries.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

PRIMARY_SWITCH_VALUE = "Yes"


def select_primary_taxonomy(entries: List[Mapping]) -> Optional[Mapping]:
    """
    Select the primary NPI taxonomy entry.

    Args:
        entries: Parsed NPI taxonomy entries

    Returns:
        First entry switched on as primary, else the first entry, else None
    """
    for entry in entries:
        if entry.get("switch") == PRIMARY_SWITCH_VALUE:
            return entry

    return entries[0] if entries else None


def derive_provider_type(primary: Optional[Mapping]) -> Tuple[Optional[str], Optional[str]]:
    """
    Derive provider type code and label from the primary taxonomy entry.

    Args:
        primary: Primary taxonomy entry, or None

    Returns:
        Tuple of (provider_type_code, provider_type_label)
    """
    if primary is None:
        return None, None

    label = primary.get("taxonomyLabel") or primary.get("code")
    code = primary.get("taxonomyCode") or None
    return code, label


def has_board_action(licenses: Iterable[Mapping]) -> bool:
    """True if any license carries hasBoardAction exactly equal to True."""
    return any(license_entry.get("hasBoardAction") is True for license_entry in licenses)


def _type_key(value: Any) -> Tuple[str, Any]:
    # Keyed by type so True and 1, or 1 and "1", stay distinct
    return (type(value).__name__, value)


def _sort_key(value: Any) -> Tuple[bool, str, Any]:
    # None sorts last, like null in a JSON array sort; values group by type
    if value is None:
        return (True, "", "")
    comparable = value if isinstance(value, (str, int, float)) else repr(value)
    return (False, type(value).__name__, comparable)


def distinct_sorted(values: Iterable[Any], drop_missing: bool = False) -> List[Any]:
    """
    Distinct values sorted lexicographically.

    Missing values collapse into a single None member ordered last unless
    drop_missing is set, in which case falsy values are dropped entirely.

    Args:
        values: Values to project
        drop_missing: Drop None and empty values

    Returns:
        Sorted list without duplicates
    """
    distinct = []
    seen = []
    for value in values:
        if drop_missing and not value:
            continue
        key = _type_key(value)
        if key not in seen:
            seen.append(key)
            distinct.append(value)

    return sorted(distinct, key=_sort_key)


def resolve_npi(npi_validation: Mapping, search_request: Any) -> Any:
    """
    Resolve the provider NPI.

    Falls back to the first NPI of the search request when the NPI
    validation result carries none.
    """
    npi = npi_validation.get("npi")
    if npi:
        return npi

    if isinstance(search_request, Mapping):
        npis = search_request.get("npis")
        if isinstance(npis, list) and npis:
            return npis[0]

    return None


def aggregate_profile_metadata(licenses: List[Mapping], npi_licenses: List[Mapping],
                               npi_validation: Mapping, result_status: Any = None,
                               search_request: Any = None) -> Dict[str, Any]:
    """
    Build profile metadata for a canonical record.

    Args:
        licenses: Canonical licenses
        npi_licenses: Parsed NPI taxonomy entries
        npi_validation: Raw NPI validation object
        result_status: Resolved result status
        search_request: Resolved search request

    Returns:
        Profile metadata dictionary
    """
    primary = select_primary_taxonomy(npi_licenses)
    provider_type_code, provider_type_label = derive_provider_type(primary)

    metadata = {
        "npi": resolve_npi(npi_validation, search_request),
        "providerTypeCode": provider_type_code,
        "providerTypeLabel": provider_type_label,
        "resultStatus": result_status,
        "hasBoardAction": has_board_action(licenses),
        "states": distinct_sorted((lic.get("state") for lic in licenses), drop_missing=True),
        "categories": distinct_sorted(lic.get("category") for lic in licenses),
        "issuers": distinct_sorted(lic.get("issuer") for lic in licenses)
    }

    logger.debug(f"Aggregated metadata over {len(licenses)} licenses and "
                 f"{len(npi_licenses)} taxonomy entries")
    return metadata

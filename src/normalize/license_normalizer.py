"""
License normalization for provider verification records.

Derives a two-letter jurisdiction code for each license and folds the two
legacy board action representations into a single structured value.
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from src.normalize.field_resolver import MalformedRecordError, ensure_mapping

logger = logging.getLogger(__name__)

# Licensing jurisdiction name -> two-letter code (exact name match)
ISSUER_TO_STATE = {
    "Alabama": "AL", "Alaska": "AK", "Arizona": "AZ", "Arkansas": "AR",
    "California": "CA", "Colorado": "CO", "Connecticut": "CT", "Delaware": "DE",
    "Florida": "FL", "Georgia": "GA", "Hawaii": "HI", "Idaho": "ID",
    "Illinois": "IL", "Indiana": "IN", "Iowa": "IA", "Kansas": "KS",
    "Kentucky": "KY", "Louisiana": "LA", "Maine": "ME", "Maryland": "MD",
    "Massachusetts": "MA", "Michigan": "MI", "Minnesota": "MN", "Mississippi": "MS",
    "Missouri": "MO", "Montana": "MT", "Nebraska": "NE", "Nevada": "NV",
    "New Hampshire": "NH", "New Jersey": "NJ", "New Mexico": "NM", "New York": "NY",
    "North Carolina": "NC", "North Dakota": "ND", "Ohio": "OH", "Oklahoma": "OK",
    "Oregon": "OR", "Pennsylvania": "PA", "Rhode Island": "RI", "South Carolina": "SC",
    "South Dakota": "SD", "Tennessee": "TN", "Texas": "TX", "Utah": "UT",
    "Vermont": "VT", "Virginia": "VA", "Washington": "WA", "West Virginia": "WV",
    "Wisconsin": "WI", "Wyoming": "WY", "District of Columbia": "DC",
    "Puerto Rico": "PR", "Guam": "GU", "U.S. Virgin Islands": "VI",
    "American Samoa": "AS", "Northern Mariana Islands": "MP"
}

LEGACY_BOARD_ACTION_FIELDS = ("boardActionDetails", "boardActionScreenshotId")


def merge_board_action(existing: Any, details: Any, screenshot_id: Any) -> Optional[Any]:
    """
    Pick the single structured board action value for a license.

    An existing structured value always wins and is returned unchanged.
    Otherwise the legacy details text and screenshot id are folded into
    parallel lists, either of which may be empty.

    Args:
        existing: Existing boardActionData value, if any
        details: Legacy boardActionDetails text, if any
        screenshot_id: Legacy boardActionScreenshotId, if any

    Returns:
        Structured board action value, or None when there is no payload
    """
    if existing is not None:
        return existing

    if details is None and screenshot_id is None:
        return None

    return {
        "boardActionScreenshotIds": [screenshot_id] if screenshot_id is not None else [],
        "boardActionTexts": [details] if details is not None else []
    }


class LicenseNormalizer:
    """
    Normalizes raw license entries into canonical licenses.

    Holds only configuration; every call is independent.
    """

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize license normalizer with configuration.

        Args:
            config: License normalization section of the configuration
        """
        self.config = config or {}

        # Configured issuers extend or override the built-in table
        self.issuer_states = dict(ISSUER_TO_STATE)
        self.issuer_states.update(self.config.get("issuer_states") or {})

        logger.debug(f"Initialized LicenseNormalizer with {len(self.issuer_states)} issuers")

    def derive_state(self, license_entry: Mapping) -> Optional[str]:
        """
        Derive the jurisdiction code of a license.

        An explicit additionalInfo.licenseState wins even when it conflicts
        with the issuer.

        Args:
            license_entry: Raw license mapping

        Returns:
            Two-letter code, or None if not derivable
        """
        additional_info = license_entry.get("additionalInfo")
        if isinstance(additional_info, Mapping) and additional_info.get("licenseState"):
            return additional_info["licenseState"]

        issuer = license_entry.get("issuer")
        if not isinstance(issuer, str):
            return None

        return self.issuer_states.get(issuer)

    def normalize_license(self, license_entry: Any) -> Dict[str, Any]:
        """
        Normalize a single raw license.

        Args:
            license_entry: Raw license mapping

        Returns:
            Canonical license dictionary
        """
        ensure_mapping(license_entry, "License entry")

        normalized = dict(license_entry)

        state = self.derive_state(license_entry)
        if state is not None:
            normalized["state"] = state

        board_action = merge_board_action(
            license_entry.get("boardActionData"),
            license_entry.get("boardActionDetails"),
            license_entry.get("boardActionScreenshotId")
        )
        for field in LEGACY_BOARD_ACTION_FIELDS:
            normalized.pop(field, None)

        # An input boardActionData of null without legacy fields is copied as-is
        if board_action is not None:
            normalized["boardActionData"] = board_action

        return normalized

    def normalize_licenses(self, licenses: Any) -> List[Dict[str, Any]]:
        """
        Normalize a list of raw licenses.

        Args:
            licenses: Sequence of raw license mappings

        Returns:
            List of canonical licenses in input order
        """
        if not isinstance(licenses, list):
            raise MalformedRecordError(f"Licenses must be a list, got {type(licenses).__name__}")

        normalized = [self.normalize_license(entry) for entry in licenses]

        logger.debug(f"Normalized {len(normalized)} licenses")
        return normalized


def normalize_provider_licenses(licenses: Any, config: Optional[Dict] = None) -> List[Dict[str, Any]]:
    """
    Convenience function to normalize provider licenses.

    Args:
        licenses: Sequence of raw license mappings
        config: License normalization configuration

    Returns:
        List of canonical licenses
    """
    normalizer = LicenseNormalizer(config)
    return normalizer.normalize_licenses(licenses)

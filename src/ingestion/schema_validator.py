"""
Structural validation of raw provider verification records.

Validates a raw record against the pydantic record models. Fails fast on
structurally malformed records; soft findings such as a license without an
issuer are logged and reported in the summary.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from src.ingestion.record_models import RawRecord, parse_raw_record
from src.normalize.field_resolver import MalformedRecordError, RECORD_FIELDS, matched_key

logger = logging.getLogger(__name__)

LICENSE_EXPECTED_KEYS = ["issuer", "category", "hasBoardAction"]


def format_validation_errors(error: ValidationError) -> List[str]:
    """
    Render pydantic errors as short messages.

    Only locations and error messages are kept; input values may carry PHI.
    """
    messages = []
    for detail in error.errors():
        location = ".".join(str(part) for part in detail["loc"]) or "record"
        messages.append(f"{location}: {detail['msg']}")
    return messages


class ProviderRecordValidator:
    """
    Validates the structure of a raw provider verification record.

    Security note: only key names and counts are logged, never record values.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize validator with configuration.

        Args:
            config: Validation configuration (optional)
        """
        self.config = config or {}
        self.license_expected_keys = self.config.get("license_expected_keys", LICENSE_EXPECTED_KEYS)

        logger.debug("Initialized ProviderRecordValidator")

    def parse_record(self, raw_record: Any) -> RawRecord:
        """
        Parse a raw record into the record model.

        Args:
            raw_record: Raw record

        Returns:
            Parsed RawRecord

        Raises:
            MalformedRecordError: If the record structure is malformed
        """
        try:
            return parse_raw_record(raw_record)
        except ValidationError as e:
            errors = format_validation_errors(e)
            for error in errors:
                logger.error(f"Malformed record: {error}")
            raise MalformedRecordError("; ".join(errors)) from e

    def check_completeness(self, record: RawRecord) -> List[str]:
        """
        Collect soft findings on a parsed record.

        Args:
            record: Parsed record

        Returns:
            List of warning messages
        """
        warnings = []

        for i, license_entry in enumerate(record.licenses):
            missing = [key for key in self.license_expected_keys
                       if key not in license_entry.model_fields_set
                       and key not in (license_entry.model_extra or {})]
            if missing:
                warnings.append(f"licenses[{i}] missing keys: {', '.join(missing)}")

        for i, entry in enumerate(record.npiValidation.licenses):
            if not isinstance(entry.code, str):
                warnings.append(f"npiValidation.licenses[{i}] has no taxonomy code")

        return warnings

    def validate_record(self, raw_record: Any) -> Dict[str, Any]:
        """
        Validate a raw record.

        Args:
            raw_record: Raw record

        Returns:
            Validation summary dictionary

        Raises:
            MalformedRecordError: If the record structure is malformed
        """
        record = self.parse_record(raw_record)

        warnings = self.check_completeness(record)
        for warning in warnings:
            logger.warning(f"Incomplete record: {warning}")

        key_conventions = {
            field: matched_key(raw_record, field) for field in RECORD_FIELDS
        }
        license_count = len(record.licenses)

        summary = {
            "success": not warnings,
            "license_count": license_count,
            "warning_count": len(warnings),
            "warnings": warnings,
            "resolved_keys": key_conventions
        }

        logger.info(f"Validation completed: {license_count} licenses, {len(warnings)} warnings")
        return summary


def validate_provider_record(raw_record: Any, config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Convenience function to validate a raw provider record.

    Args:
        raw_record: Raw record
        config: Validation configuration

    Returns:
        Validation summary
    """
    validator = ProviderRecordValidator(config)
    return validator.validate_record(raw_record)

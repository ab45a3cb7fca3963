"""
Unit tests for canonical record assembly and record validation.
"""

import copy
import pytest
import sys
from pathlib import Path

# Add src to path
sys.path.append(str(Path(__file__).parent.parent))

from src.ingestion.schema_validator import ProviderRecordValidator, validate_provider_record
from src.normalize.field_resolver import MalformedRecordError
from src.pipeline.assembler import build_npi_validation, transform


def legacy_record():
    """Raw record using legacy keys."""
    return {
        "Licenses": [
            {"issuer": "California", "category": "MD", "hasBoardAction": False,
             "number": "A12345", "additionalInfo": {"licenseState": "CA"}},
            {"issuer": "Texas", "category": "MD", "hasBoardAction": True,
             "boardActionDetails": "Reprimand", "boardActionScreenshotId": "scr-1"},
            {"issuer": "Drug Enforcement Administration", "category": "DEA",
             "hasBoardAction": False}
        ],
        "NPI Validation": {
            "npi": "1234567890",
            "firstName": "JANE",
            "otherLastNameTypecode": "5",
            "licenses": [
                {"code": "207R00000X - Internal Medicine", "switch": "No"},
                {"code": "2084N0400X - Psychiatry & Neurology", "switch": "Yes"}
            ]
        },
        "CMS Preclusion List": [],
        "Exclusions": [{"source": "OIG", "match": False}],
        "OFAC": [],
        "Opt Out": {"optedOut": False},
        "Primary Source Checked Dates": [{"source": "Texas", "date": "2024-05-01"}],
        "resultStatus": "Complete",
        "searchHistoryId": "sh-42",
        "searchRequest": {"npis": ["1234567890"], "lastName": "Doe"}
    }


class TestTransform:
    """Test cases for the assembled transform."""

    def setup_method(self):
        """Setup test fixtures."""
        self.raw = legacy_record()

    def test_top_level_shape(self):
        """Test canonical key order and pass-through fields."""
        canonical = transform(self.raw)
        assert list(canonical.keys()) == [
            "profileMetadata", "cmsPreclusionList", "exclusions", "licenses",
            "npiValidation", "ofac", "optOut", "primarySourceCheckedDates",
            "resultStatus", "searchHistoryId", "searchRequest"
        ]
        assert canonical["exclusions"] == [{"source": "OIG", "match": False}]
        assert canonical["optOut"] == {"optedOut": False}
        assert canonical["searchHistoryId"] == "sh-42"
        assert canonical["resultStatus"] == "Complete"

    def test_licenses_normalized(self):
        """Test license normalization inside the record."""
        licenses = transform(self.raw)["licenses"]
        assert licenses[0]["state"] == "CA"
        assert licenses[1]["state"] == "TX"
        assert licenses[1]["boardActionData"] == {
            "boardActionScreenshotIds": ["scr-1"],
            "boardActionTexts": ["Reprimand"]
        }
        assert "boardActionDetails" not in licenses[1]
        assert "state" not in licenses[2]

    def test_profile_metadata(self):
        """Test profile metadata of the record."""
        metadata = transform(self.raw)["profileMetadata"]
        assert metadata["npi"] == "1234567890"
        assert metadata["providerTypeCode"] == "2084N0400X"
        assert metadata["providerTypeLabel"] == "Psychiatry & Neurology"
        assert metadata["resultStatus"] == "Complete"
        assert metadata["hasBoardAction"] is True
        assert metadata["states"] == ["CA", "TX"]
        assert metadata["categories"] == ["DEA", "MD"]
        assert metadata["issuers"] == ["California", "Drug Enforcement Administration", "Texas"]

    def test_npi_validation(self):
        """Test NPI validation canonicalization."""
        npi_validation = transform(self.raw)["npiValidation"]
        assert npi_validation["firstName"] == "JANE"
        assert npi_validation["otherLastNameTypeCode"] == "5"
        assert "otherLastNameTypecode" not in npi_validation
        assert npi_validation["providerTypeCode"] == "2084N0400X"
        assert npi_validation["licenses"][0]["taxonomyLabel"] == "Internal Medicine"

    def test_npi_validation_without_misspelling(self):
        """Test that a correctly spelled key is kept."""
        canonical = build_npi_validation({"otherLastNameTypeCode": "3"})
        assert canonical["otherLastNameTypeCode"] == "3"
        assert canonical["licenses"] == []
        assert canonical["providerTypeLabel"] is None

    def test_empty_misspelled_value_falls_through(self):
        """Test that an empty misspelled value yields to the correct spelling."""
        canonical = build_npi_validation({"otherLastNameTypecode": "", "otherLastNameTypeCode": "3"})
        assert canonical["otherLastNameTypeCode"] == "3"
        assert "otherLastNameTypecode" not in canonical

    def test_legacy_key_precedence(self):
        """Test that legacy keys are used exclusively when both exist."""
        self.raw["licenses"] = [{"issuer": "Ohio", "category": "RN", "hasBoardAction": True}]
        canonical = transform(self.raw)
        assert len(canonical["licenses"]) == 3
        assert "OH" not in canonical["profileMetadata"]["states"]

    def test_camel_case_record(self):
        """Test a record using camelCase keys only."""
        raw = {
            "licenses": [{"issuer": "Michigan", "category": "MD", "hasBoardAction": False}],
            "npiValidation": {"licenses": [{"code": "2084N0400X", "switch": "Yes"}]},
            "searchRequest": {"npis": ["999"]}
        }
        canonical = transform(raw)
        assert canonical["licenses"][0]["state"] == "MI"
        assert canonical["profileMetadata"]["npi"] == "999"
        assert canonical["profileMetadata"]["providerTypeLabel"] == "2084N0400X"
        assert canonical["profileMetadata"]["hasBoardAction"] is False
        assert canonical["ofac"] == []
        assert canonical["optOut"] == {}
        assert canonical["npiValidation"]["otherLastNameTypeCode"] is None

    def test_empty_record(self):
        """Test that an empty record yields defaults."""
        canonical = transform({})
        assert canonical["licenses"] == []
        assert canonical["profileMetadata"]["hasBoardAction"] is False
        assert canonical["profileMetadata"]["states"] == []
        assert canonical["profileMetadata"]["npi"] is None

    def test_deterministic(self):
        """Test that two calls produce equal results."""
        assert transform(self.raw) == transform(self.raw)

    def test_input_not_mutated(self):
        """Test that the raw record is left untouched."""
        snapshot = copy.deepcopy(self.raw)
        transform(self.raw)
        assert self.raw == snapshot

    def test_configured_issuer(self):
        """Test issuer configuration flowing through the transform."""
        canonical = transform(self.raw, {"license": {"issuer_states": {"Drug Enforcement Administration": "US"}}})
        assert canonical["licenses"][2]["state"] == "US"

    def test_malformed_input(self):
        """Test that non-object input is rejected."""
        with pytest.raises(MalformedRecordError):
            transform(["not", "a", "record"])
        with pytest.raises(MalformedRecordError):
            transform({"Licenses": ["Texas"]})
        with pytest.raises(MalformedRecordError):
            transform({"NPI Validation": {"licenses": [42]}})
        with pytest.raises(MalformedRecordError):
            transform({"npiValidation": "1234567890"})


class TestProviderRecordValidator:
    """Test cases for record validation."""

    def setup_method(self):
        """Setup test fixtures."""
        self.validator = ProviderRecordValidator({})

    def test_valid_record(self):
        """Test validation summary for a complete record."""
        summary = self.validator.validate_record(legacy_record())
        assert summary["success"]
        assert summary["license_count"] == 3
        assert summary["warning_count"] == 0
        assert summary["resolved_keys"]["licenses"] == "Licenses"
        assert summary["resolved_keys"]["searchHistoryId"] == "searchHistoryId"

    def test_soft_findings(self):
        """Test warnings for incomplete licenses and taxonomy entries."""
        raw = {"licenses": [{"issuer": "Ohio"}], "npiValidation": {"licenses": [{"switch": "Yes"}]}}
        summary = validate_provider_record(raw)
        assert not summary["success"]
        assert summary["warning_count"] == 2

    def test_structural_errors(self):
        """Test fail-fast on malformed structure."""
        with pytest.raises(MalformedRecordError):
            self.validator.validate_record("raw")
        with pytest.raises(MalformedRecordError):
            self.validator.validate_record({"Licenses": {"issuer": "Ohio"}})
        with pytest.raises(MalformedRecordError):
            self.validator.parse_record({"Licenses": ["Texas"]})
        with pytest.raises(MalformedRecordError):
            self.validator.parse_record({"npiValidation": {"licenses": [42]}})

    def test_pass_through_fields_not_checked(self):
        """Test that pass-through fields of any shape are accepted."""
        raw = {
            "licenses": [{"issuer": "Ohio", "category": "MD", "hasBoardAction": False}],
            "ofac": {"hits": 0},
            "optOut": [],
            "exclusions": "none",
            "primarySourceCheckedDates": {"licenses": "2024-01-01"}
        }
        summary = self.validator.validate_record(raw)
        assert summary["success"]
        assert summary["license_count"] == 1

    def test_parse_record_resolves_keys(self):
        """Test that parsed records expose logical field names."""
        record = self.validator.parse_record(legacy_record())
        assert len(record.licenses) == 3
        assert record.licenses[1].boardActionDetails == "Reprimand"
        assert record.licenses[0].model_extra["number"] == "A12345"
        assert record.npiValidation.licenses[1].switch == "Yes"


if __name__ == "__main__":
    pytest.main([__file__])

"""
NPI taxonomy code parsing.

Splits upstream taxonomy strings such as "2084N0400X - Psychiatry & Neurology"
into a code and a label.
"""

import re
import logging
from typing import Any, Dict, List, Optional

from src.normalize.field_resolver import MalformedRecordError, ensure_mapping

logger = logging.getLogger(__name__)

# Hyphen, en-dash, or the en-dash as mangled by a cp1252 decode of UTF-8
TAXONOMY_PATTERN = re.compile(
    r"^(\d+[A-Z0-9]*)\s*(?:-|\u2013|\u00e2\u20ac\u201c)\s*(.+)$"
)


def extract_taxonomy(code: Any) -> Dict[str, Optional[str]]:
    """
    Parse a taxonomy code string into code and label.

    Unparseable strings are used as both code and label.

    Args:
        code: Raw taxonomy code value

    Returns:
        Dictionary with taxonomyCode and taxonomyLabel
    """
    if not code or not isinstance(code, str):
        return {"taxonomyCode": None, "taxonomyLabel": None}

    match = TAXONOMY_PATTERN.match(code)
    if match:
        return {"taxonomyCode": match.group(1), "taxonomyLabel": match.group(2).strip()}

    return {"taxonomyCode": code, "taxonomyLabel": code}


def normalize_npi_licenses(entries: Any) -> List[Dict[str, Any]]:
    """
    Augment NPI validation license entries with parsed taxonomy fields.

    Args:
        entries: Sequence of raw NPI taxonomy entries

    Returns:
        List of entry copies carrying taxonomyCode and taxonomyLabel
    """
    if not isinstance(entries, list):
        raise MalformedRecordError(
            f"NPI validation licenses must be a list, got {type(entries).__name__}"
        )

    normalized = []
    for entry in entries:
        ensure_mapping(entry, "NPI taxonomy entry")
        taxonomy_entry = dict(entry)
        taxonomy_entry.update(extract_taxonomy(entry.get("code")))
        normalized.append(taxonomy_entry)

    return normalized

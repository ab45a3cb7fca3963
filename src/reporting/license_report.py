"""
License reporting for canonical provider records.

Flattens canonical licenses into a tabular report for review and export.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union
import pandas as pd

logger = logging.getLogger(__name__)

REPORT_COLUMNS = ["issuer", "state", "category", "hasBoardAction",
                  "boardActionTextCount", "boardActionScreenshotCount"]


def _count(board_action: Any, key: str) -> int:
    if not isinstance(board_action, dict):
        return 0
    values = board_action.get(key)
    return len(values) if isinstance(values, list) else 0


def build_license_frame(canonical_record: Dict[str, Any]) -> pd.DataFrame:
    """
    Build a DataFrame with one row per canonical license.

    Args:
        canonical_record: Output of the transform

    Returns:
        DataFrame with REPORT_COLUMNS
    """
    rows = []
    for license_entry in canonical_record.get("licenses", []):
        board_action = license_entry.get("boardActionData")
        rows.append({
            "issuer": license_entry.get("issuer"),
            "state": license_entry.get("state"),
            "category": license_entry.get("category"),
            "hasBoardAction": license_entry.get("hasBoardAction") is True,
            "boardActionTextCount": _count(board_action, "boardActionTexts"),
            "boardActionScreenshotCount": _count(board_action, "boardActionScreenshotIds")
        })

    return pd.DataFrame(rows, columns=REPORT_COLUMNS)


def summarize_by_state(license_df: pd.DataFrame) -> pd.DataFrame:
    """
    Summarize licenses per jurisdiction.

    Args:
        license_df: Output of build_license_frame

    Returns:
        DataFrame indexed by state with licenses and boardActions counts
    """
    if license_df.empty:
        return pd.DataFrame(columns=["licenses", "boardActions"], index=pd.Index([], name="state"))

    grouped = license_df.assign(state=license_df["state"].fillna("UNKNOWN")).groupby("state")
    summary = pd.DataFrame({
        "licenses": grouped.size(),
        "boardActions": grouped["hasBoardAction"].sum().astype(int)
    })

    return summary.sort_index()


def export_license_report(canonical_record: Dict[str, Any], output_path: Union[str, Path]) -> pd.DataFrame:
    """
    Export the license report of a canonical record to CSV.

    Args:
        canonical_record: Output of the transform
        output_path: CSV destination

    Returns:
        The exported DataFrame
    """
    license_df = build_license_frame(canonical_record)

    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    license_df.to_csv(output_file, index=False)

    logger.info(f"Exported {len(license_df)} licenses to {output_path}")
    return license_df

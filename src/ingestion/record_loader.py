"""
JSON record loader.

Reads a single provider verification record from a local JSON document.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from src.normalize.field_resolver import MalformedRecordError

logger = logging.getLogger(__name__)


def load_record(input_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load one raw record from a JSON file.

    Args:
        input_path: Path to the JSON document

    Returns:
        Raw record mapping

    Raises:
        MalformedRecordError: If the document is not valid JSON or not an object
    """
    path = Path(input_path)

    with open(path, 'r', encoding='utf-8') as f:
        text = f.read()

    try:
        record = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedRecordError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(record, dict):
        raise MalformedRecordError(
            f"{path} must contain a JSON object, got {type(record).__name__}"
        )

    logger.info(f"Loaded record from {path} ({len(record)} top-level keys)")
    return record


def write_record(record: Dict[str, Any], output_path: Union[str, Path], indent: int = 2) -> Path:
    """
    Write a canonical record as JSON.

    The document is serialized in full before the file is opened, so a
    serialization failure leaves no partial output behind.

    Args:
        record: Canonical record
        output_path: Destination path
        indent: JSON indentation

    Returns:
        Path written
    """
    path = Path(output_path)
    text = json.dumps(record, indent=indent, ensure_ascii=False)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)

    logger.info(f"Wrote canonical record to {path}")
    return path

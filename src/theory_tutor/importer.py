"""Question bank import and export."""
import json
import logging
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


class BankImportError(ValueError):
    """Raised when replacement bank content is not a list of entries."""


def parse_bank_text(text: str) -> list:
    """Parse pasted bank JSON. Entries are accepted as-is; only the outer array is checked."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise BankImportError(f"Could not parse bank JSON: {e}") from e
    if not isinstance(data, list):
        raise BankImportError("Bank must be a JSON array.")
    return data


def read_bank_file(file_path: str) -> list:
    path = Path(file_path)
    suffix = path.suffix.lower()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise BankImportError(f"Could not read {path}: {e}") from e

    if suffix in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise BankImportError(f"Could not parse bank YAML: {e}") from e
        if not isinstance(data, list):
            raise BankImportError("Bank must be a list of entries.")
        # YAML can produce dates and other values the store can't save
        try:
            json.dumps(data)
        except (TypeError, ValueError) as e:
            raise BankImportError(f"Bank contains values that can't be stored as JSON: {e}") from e
        return data
    # Anything else is treated as JSON
    return parse_bank_text(text)


def export_bank(bank: list) -> str:
    return json.dumps(bank, indent=2, ensure_ascii=False)


def write_bank_file(bank: list, file_path: str) -> Path:
    path = Path(file_path)
    path.write_text(export_bank(bank) + "\n", encoding="utf-8")
    logger.info("Exported %d bank entries to %s", len(bank), path)
    return path

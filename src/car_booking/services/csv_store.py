"""
CSV file helpers shared by the storage services.
"""
import csv
from datetime import datetime, timezone
from pathlib import Path


def read_rows(path: Path) -> list[dict]:
    """Read all rows of a CSV file; a missing file reads as empty."""
    if not path.exists():
        return []
    with open(path, 'r', encoding='utf-8', newline='') as f:
        return [row for row in csv.DictReader(f) if row.get('id')]


def write_rows(path: Path, columns: list[str], rows: list[dict]):
    """Rewrite a CSV file with the given rows."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=columns)
        writer.writeheader()
        for row in rows:
            writer.writerow(row)


def utc_timestamp() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()

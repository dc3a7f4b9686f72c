"""
Tabular record ingestion.

Turns comma-delimited text (header row + data rows) into an ordered list
of mapping records. Values that parse cleanly as finite numbers become
int/float; everything else keeps its original (stripped) string.
"""

import csv
import io
import math
from typing import Any, Dict, List


def coerce_value(raw: str) -> Any:
    """
    Convert a raw field to a number when it parses losslessly.

    Args:
        raw: Stripped field text

    Returns:
        int for integral text, float for other finite numerals,
        otherwise the original string (including "")
    """
    if raw == "" or "_" in raw:
        # int()/float() accept digit separators, tabular sources don't
        return raw

    try:
        return int(raw)
    except ValueError:
        pass

    try:
        number = float(raw)
    except ValueError:
        return raw

    if not math.isfinite(number):
        return raw
    return number


def parse_records(text: str) -> List[Dict[str, Any]]:
    """
    Parse delimited text into records keyed by header names.

    Blank lines are skipped, missing trailing fields map to "", and
    fields beyond the header are ignored. No header validation.

    Args:
        text: Raw tabular text

    Returns:
        Records in source order (empty if there is no data row)
    """
    rows = [
        row for row in csv.reader(io.StringIO(text.strip()))
        if any(part.strip() for part in row)
    ]
    if len(rows) <= 1:
        return []

    headers = [h.strip() for h in rows[0]]
    records = []

    for parts in rows[1:]:
        record = {}
        for idx, header in enumerate(headers):
            raw = parts[idx].strip() if idx < len(parts) else ""
            record[header] = coerce_value(raw)
        records.append(record)

    return records

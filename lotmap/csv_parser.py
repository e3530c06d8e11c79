"""
CSV parser for AutoCAD parking-lot exports.

Each data line is one vertex of a drawable entity:

    x, y, z, layer, paperSpace, subClasses, linetype, entityHandle, text?, style?

The first line is a header and is always skipped. Fields are split on a literal
comma; quoted fields are not supported by the export format.
"""

# Standard library imports
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

# Third-party imports
import pandas as pd

logger = logging.getLogger(__name__)

# CSV parsing constants
FIELD_SEPARATOR = ","
DATAFRAME_COLUMNS = ["x_coords", "y_coords", "z_coords", "layer", "entity_handle", "text"]


@dataclass(frozen=True)
class Row:
    """
    One parsed CSV data line.

    Attributes:
        x, y: Raw CAD coordinates, always finite.
        z: Raw elevation, carried through but unused for 2D output.
        layer: CAD layer name, e.g. ``p-parking-basic``.
        paper_space, sub_classes, linetype: Passthrough CAD metadata.
        entity_handle: Opaque per-shape id, unique within a layer.
        text: Optional text payload (labels), None when absent.
        style: Optional text style, None when absent.
    """

    x: float
    y: float
    z: float
    layer: str = ""
    paper_space: str = ""
    sub_classes: str = ""
    linetype: str = ""
    entity_handle: str = ""
    text: Optional[str] = None
    style: Optional[str] = None


def _parse_float(value: str) -> float:
    """Parse a field as float, returning nan on failure."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return math.nan


def _field(cols: Sequence[str], index: int) -> str:
    return cols[index] if index < len(cols) else ""


def parse_line(line: str) -> Optional[Row]:
    """
    Parse one data line into a Row.

    Returns None when x or y is not a finite number.
    """
    cols = line.rstrip("\r").split(FIELD_SEPARATOR)

    x = _parse_float(_field(cols, 0))
    y = _parse_float(_field(cols, 1))
    if not (math.isfinite(x) and math.isfinite(y)):
        return None

    return Row(
        x=x,
        y=y,
        z=_parse_float(_field(cols, 2)),
        layer=_field(cols, 3),
        paper_space=_field(cols, 4),
        sub_classes=_field(cols, 5),
        linetype=_field(cols, 6),
        entity_handle=_field(cols, 7),
        text=_field(cols, 8) or None,
        style=_field(cols, 9) or None,
    )


def parse_rows(csv_text: str) -> List[Row]:
    """
    Parse raw CSV text into an ordered list of Rows.

    Lines end at "\\n" only; a trailing "\\r" is stripped per line. The
    header line is skipped unconditionally. Blank lines are skipped
    silently; lines whose x or y is not numeric are skipped with a warning.
    Malformed input never raises, it only yields fewer rows.

    Args:
        csv_text (str): Full CSV file contents.

    Returns:
        List[Row]: Parsed rows in file order.
    """
    if not csv_text:
        return []

    lines = csv_text.split("\n")
    rows: List[Row] = []

    # Skip header row
    for line_no, line in enumerate(lines[1:], start=2):
        if not line.strip():
            continue

        row = parse_line(line)
        if row is None:
            logger.warning(f"Skipping invalid row {line_no}: {line!r}")
            continue
        rows.append(row)

    logger.info(f"Parsed {len(rows)} rows from CSV")
    return rows


def read_csv_file(csv_path: Union[str, Path]) -> List[Row]:
    """Read a UTF-8 CSV export from disk and parse it (a leading BOM is tolerated)."""
    csv_path = Path(csv_path)
    logger.info(f"Loading and parsing data from: {csv_path}")
    text = csv_path.read_text(encoding="utf-8-sig")
    return parse_rows(text)


def rows_to_dataframe(rows: Iterable[Row]) -> pd.DataFrame:
    """
    Convert Rows to a DataFrame for tabular analysis.

    Returns:
        pd.DataFrame: Columns ``x_coords, y_coords, z_coords, layer,
        entity_handle, text``, one line per row, in input order.
    """
    records = [
        (row.x, row.y, row.z, row.layer, row.entity_handle, row.text)
        for row in rows
    ]
    return pd.DataFrame.from_records(records, columns=DATAFRAME_COLUMNS)

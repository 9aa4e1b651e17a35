# MIT License
"""Bulk upload of measured LCA data.

Uploaded CSV or Excel tables are parsed into flat string records,
validated row by row and averaged per (material, stage).  Three kinds of
failure are kept apart:

* an unsupported file extension raises :class:`UnsupportedFormatError`
  before anything is parsed;
* bytes the CSV/Excel reader cannot make sense of raise
  :class:`TableParseError`;
* rows with bad content are *returned* as a list of messages, one per
  problem, so that the caller can show the whole report at once.  A file
  with any invalid row is not aggregated at all.
"""

from __future__ import annotations

import asyncio
import io
import logging
import math
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from .params import UPLOAD_METRICS, AggregatedDataset, IngestResult, Material, Stage, StageRecord

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".csv", ".xlsx", ".xls")
REQUIRED_FIELDS = ("material", "stage", "co2", "energy", "water")
SAMPLE_FILENAME = "lca_sample_data.csv"

SAMPLE_ROWS = [
    dict(material="aluminium", stage="mining", co2=2.5, energy=15, water=8),
    dict(material="aluminium", stage="refining", co2=8.2, energy=45, water=25),
    dict(material="aluminium", stage="smelting", co2=12.8, energy=65, water=35),
    dict(material="copper", stage="mining", co2=4.2, energy=22, water=15),
    dict(material="copper", stage="refining", co2=6.8, energy=35, water=20),
]

Record = Mapping[str, object]


class IngestError(ValueError):
    """A bulk upload could not be read."""


class UnsupportedFormatError(IngestError):
    pass


class TableParseError(IngestError):
    pass


def _extension(filename: str) -> str:
    return Path(filename).suffix.lower()


def check_format(filename: str) -> str:
    """Return the lower‑case extension or raise :class:`UnsupportedFormatError`."""
    ext = _extension(filename)
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFormatError(
            f"Unsupported file format '{ext or filename}'. Please use CSV or Excel files."
        )
    return ext


def _clean(value) -> str:
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return ""
    return str(value).strip()


def _frame_to_records(df: pd.DataFrame) -> List[Dict[str, str]]:
    df = df.rename(columns=lambda c: str(c).strip())
    df = df.dropna(how="all")
    return [{k: _clean(v) for k, v in row.items()} for row in df.to_dict(orient="records")]


def parse_table(filename: str, content: bytes) -> List[Dict[str, str]]:
    """Parse an uploaded table into string records.

    Parameters
    ----------
    filename:
        Original file name; its extension selects the parser.
    content:
        Raw file bytes.

    Returns
    -------
    list of dict
        One ``{column: value}`` mapping per non‑empty row, values as
        stripped strings.  An empty file gives an empty list.

    Raises
    ------
    UnsupportedFormatError
        The extension is not one of :data:`SUPPORTED_EXTENSIONS`.
    TableParseError
        The bytes are not a readable CSV or Excel workbook.
    """
    ext = check_format(filename)
    buffer = io.BytesIO(content)
    if ext == ".csv":
        try:
            df = pd.read_csv(buffer, dtype=str, keep_default_na=False, skip_blank_lines=True)
        except pd.errors.EmptyDataError:
            return []
        except (pd.errors.ParserError, UnicodeDecodeError) as exc:
            raise TableParseError(f"CSV parsing error: {exc}") from exc
    else:
        engine = "openpyxl" if ext == ".xlsx" else "xlrd"
        try:
            df = pd.read_excel(buffer, sheet_name=0, dtype=str, engine=engine)
        except Exception as exc:  # openpyxl/xlrd raise a variety of types on corrupt files
            raise TableParseError(f"Excel parsing error: {exc}") from exc
    records = _frame_to_records(df)
    logger.info("Parsed %d row(s) from %s", len(records), filename)
    return records


def _parse_metric(raw) -> Optional[float]:
    try:
        value = float(_clean(raw))
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def validate_records(records: Iterable[Record]) -> List[str]:
    """Check uploaded rows and report every problem found.

    Rows are numbered from 1.  Material and stage are compared without
    regard to case; co2, energy and water must be finite numbers ≥ 0.

    Returns
    -------
    list of str
        Human‑readable messages; empty when the table is valid.
    """
    records = list(records)
    errors: List[str] = []
    if not records:
        errors.append("No data found in file")
        return errors

    headers = set(records[0].keys())
    missing = [f for f in REQUIRED_FIELDS if f not in headers]
    if missing:
        errors.append(f"Missing required fields: {', '.join(missing)}")

    for n, row in enumerate(records, start=1):
        material = _clean(row.get("material"))
        if Material.parse(material) is None:
            errors.append(f"Row {n}: Invalid material '{material}'")
        stage = _clean(row.get("stage"))
        if Stage.parse(stage) is None:
            errors.append(f"Row {n}: Invalid stage '{stage}'")
        for metric in UPLOAD_METRICS:
            raw = _clean(row.get(metric.value))
            if _parse_metric(raw) is None:
                errors.append(f"Row {n}: Invalid {metric.value} value '{raw}'")
    return errors


def aggregate_records(records: Iterable[Record]) -> AggregatedDataset:
    """Average validated rows per (material, stage).

    Must only be called on records that passed :func:`validate_records`.
    """
    df = pd.DataFrame(list(records))
    processed_at = datetime.now(timezone.utc)
    if df.empty:
        return AggregatedDataset(materials={}, total_rows=0, processed_at=processed_at)
    df["material"] = df["material"].map(lambda v: Material.parse(v).value)
    df["stage"] = df["stage"].map(lambda v: Stage.parse(v).value)
    cols = [m.value for m in UPLOAD_METRICS]
    for col in cols:
        df[col] = df[col].map(_parse_metric).astype(float)
    grouped = df.groupby(["material", "stage"], sort=False)
    means = grouped[cols].mean()
    counts = grouped.size()

    materials: Dict[str, Dict[str, StageRecord]] = {}
    for (material, stage), row in means.iterrows():
        materials.setdefault(material, {})[stage] = StageRecord(
            co2=float(row["co2"]),
            energy=float(row["energy"]),
            water=float(row["water"]),
            count=int(counts.loc[(material, stage)]),
        )
    return AggregatedDataset(materials=materials, total_rows=len(df), processed_at=processed_at)


def ingest(records: Iterable[Record]) -> IngestResult:
    """Validate and aggregate parsed records.

    Either ``errors`` is non‑empty and ``dataset`` is None, or the
    dataset holds the per‑stage means.
    """
    records = list(records)
    errors = validate_records(records)
    if errors:
        logger.warning("Upload rejected with %d validation error(s)", len(errors))
        return IngestResult(errors=errors)
    dataset = aggregate_records(records)
    logger.info(
        "Aggregated %d row(s) into %d material(s)", dataset.total_rows, len(dataset.materials)
    )
    return IngestResult(dataset=dataset)


def ingest_bytes(filename: str, content: bytes, max_bytes: Optional[int] = None) -> IngestResult:
    """Parse and ingest an uploaded file.

    Raises
    ------
    IngestError
        The file is too large, has an unsupported extension or cannot be
        parsed.
    """
    check_format(filename)
    if max_bytes is not None and len(content) > max_bytes:
        raise IngestError(f"File {filename} is larger than {max_bytes} bytes")
    return ingest(parse_table(filename, content))


def ingest_path(path: Union[str, Path], max_bytes: Optional[int] = None) -> IngestResult:
    path = Path(path)
    check_format(path.name)
    return ingest_bytes(path.name, path.read_bytes(), max_bytes=max_bytes)


async def ingest_path_async(path: Union[str, Path], max_bytes: Optional[int] = None) -> IngestResult:
    """Like :func:`ingest_path` but reads the file in a worker thread.

    Parsing and validation run synchronously once the bytes are in.
    """
    path = Path(path)
    check_format(path.name)
    content = await asyncio.to_thread(path.read_bytes)
    return ingest_bytes(path.name, content, max_bytes=max_bytes)


def sample_frame() -> pd.DataFrame:
    return pd.DataFrame(SAMPLE_ROWS, columns=list(REQUIRED_FIELDS))


def sample_csv() -> str:
    """The example upload table as CSV text."""
    return sample_frame().to_csv(index=False)

"""
Dataset ingestion from text and files.
Single responsibility: turn delimited text, JSON and spreadsheets into Datasets.
"""

import io
import json
from pathlib import Path
from typing import Any, List, Optional, Sequence

import pandas as pd

from ..core.dataset import Dataset, object_columns
from ..utils.logger import get_logger
from ..utils.normalizers import normalize_header


logger = get_logger()


DELIMITER_CANDIDATES = [",", "\t", ";", "|"]

# Tried in order; utf-8-sig first so a BOM never leaks into the first header
ENCODINGS = ["utf-8-sig", "utf-8", "cp1252", "latin-1"]

TEXT_SUFFIXES = {".csv", ".tsv", ".txt", ".json"}
EXCEL_SUFFIXES = {".xlsx", ".xls"}


class DatasetParseError(Exception):
    """Exception raised when input cannot be parsed into a Dataset."""

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message if not details else f"{message} ({details})")
        self.message = message
        self.details = details


def unique_headers(headers: Sequence[str]) -> List[str]:
    """
    Trim headers and disambiguate duplicates.

    The first occurrence keeps its name; later ones get " (2)", " (3)"...

    Args:
        headers: Raw header names

    Returns:
        Unique header names in input order
    """
    seen = {}
    out = []
    for raw in headers:
        base = normalize_header(raw)
        count = seen.get(base, 0)
        seen[base] = count + 1
        out.append(base if count == 0 else f"{base} ({count + 1})")
    return out


def guess_delimiter(text: str) -> str:
    """
    Pick the most frequent candidate delimiter on the header line.

    Args:
        text: Delimited text

    Returns:
        The delimiter (comma when nothing else is present)
    """
    first_line = text.split("\n", 1)[0]
    best, best_count = ",", 0
    for candidate in DELIMITER_CANDIDATES:
        count = first_line.count(candidate)
        if count > best_count:
            best, best_count = candidate, count
    return best


def _parse_json(text: str) -> Dataset:
    """Parse an array of objects or a 2-D array with a header row."""
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise DatasetParseError("Invalid JSON.", str(e))

    if isinstance(parsed, list):
        if not parsed:
            return Dataset()

        first = parsed[0]
        if isinstance(first, dict):
            if not all(isinstance(r, dict) for r in parsed):
                raise DatasetParseError(
                    "Unsupported JSON shape. Provide an array of objects or a 2D array (first row headers).",
                    "mixed objects and non-objects",
                )
            return Dataset.from_records(parsed, object_columns(parsed))

        if isinstance(first, list):
            headers = unique_headers(["" if h is None else str(h) for h in first])
            rows = []
            for r in parsed[1:]:
                values = r if isinstance(r, list) else []
                rows.append({h: values[i] if i < len(values) else None
                             for i, h in enumerate(headers)})
            return Dataset.from_records(rows, headers)

    raise DatasetParseError(
        "Unsupported JSON shape. Provide an array of objects or a 2D array (first row headers)."
    )


def _parse_delimited(text: str, empty_rows: str) -> Dataset:
    """Parse delimited text as all-text cells with a header row."""
    delimiter = guess_delimiter(text)
    try:
        df = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            header=None,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=(empty_rows != "keep"),
        )
    except (pd.errors.ParserError, ValueError) as e:
        raise DatasetParseError(f"CSV parse error: {e}", f"delimiter {delimiter!r}")

    if df.empty:
        return Dataset()

    header_row = ["" if pd.isna(h) else str(h) for h in df.iloc[0].tolist()]
    columns = unique_headers(header_row)

    body = df.iloc[1:]
    body = body.astype(object).where(body.notna(), None)
    rows = [dict(zip(columns, values)) for values in body.itertuples(index=False, name=None)]
    return Dataset.from_records(rows, columns)


def parse_text_to_dataset(text: str, empty_rows: str = "skip") -> Dataset:
    """
    Parse pasted or loaded text into a Dataset.

    Text starting with "[" or "{" is JSON; anything else is delimited text
    (comma, tab, semicolon or pipe). Delimited cells stay text: no type
    inference happens at this stage. Every row carries every column.

    Args:
        text: Raw text
        empty_rows: "skip" drops blank lines, "keep" turns them into empty rows

    Returns:
        Dataset (empty for blank input)

    Raises:
        DatasetParseError: If the text cannot be parsed
    """
    trimmed = text.strip()
    if not trimmed:
        return Dataset()

    if trimmed.startswith("[") or trimmed.startswith("{"):
        dataset = _parse_json(trimmed)
    else:
        dataset = _parse_delimited(trimmed, empty_rows)

    logger.debug("file_reader.text.parsed",
                 rows=len(dataset.rows),
                 columns=len(dataset.columns))
    return dataset


def _frame_with_header_row(raw: pd.DataFrame) -> Dataset:
    """Use the first row of a header-less frame as de-duplicated headers."""
    if raw.empty:
        return Dataset()
    columns = unique_headers(["" if pd.isna(h) else str(h) for h in raw.iloc[0].tolist()])
    body = raw.iloc[1:].reset_index(drop=True)
    body.columns = columns
    return Dataset.from_dataframe(body)


class UniversalFileReader:
    """
    Handles reading of various file formats into Datasets.
    """

    def read_text(self, file_path: Path) -> str:
        """
        Read a text file, trying common encodings in order.

        Args:
            file_path: Path to file

        Returns:
            Decoded text
        """
        data = Path(file_path).read_bytes()
        for encoding in ENCODINGS:
            try:
                text = data.decode(encoding)
                logger.debug("file_reader.text.decoded",
                             file=str(file_path),
                             encoding=encoding)
                return text
            except UnicodeDecodeError:
                continue

        logger.warning("file_reader.text.encoding_fallback", file=str(file_path))
        return data.decode("utf-8", errors="replace")

    def read_excel(self, file_path: Path, sheet_name: Any = 0) -> Dataset:
        """
        Read an Excel sheet.

        Args:
            file_path: Path to Excel file
            sheet_name: Sheet to read

        Returns:
            Dataset
        """
        logger.info("file_reader.excel.reading",
                   file=str(file_path),
                   sheet=sheet_name)
        raw = pd.read_excel(file_path, sheet_name=sheet_name, header=None, dtype=object)
        return _frame_with_header_row(raw)

    def read_parquet(self, file_path: Path) -> Dataset:
        """
        Read a Parquet file.

        Args:
            file_path: Path to Parquet file

        Returns:
            Dataset
        """
        logger.info("file_reader.parquet.reading", file=str(file_path))
        return Dataset.from_dataframe(pd.read_parquet(file_path))

    def read(self, file_path: Path, file_type: str = "auto",
             empty_rows: str = "skip") -> Dataset:
        """
        Read any supported file type.

        Args:
            file_path: Path to file
            file_type: auto | csv | tsv | json | excel | parquet
            empty_rows: Blank line policy for delimited text

        Returns:
            Dataset

        Raises:
            FileNotFoundError: If the file does not exist
            DatasetParseError: If the type is unsupported or parsing fails
        """
        file_path = Path(file_path)

        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        suffix = file_path.suffix.lower()
        kind = file_type
        if kind == "auto":
            if suffix in TEXT_SUFFIXES:
                kind = "text"
            elif suffix in EXCEL_SUFFIXES:
                kind = "excel"
            elif suffix == ".parquet":
                kind = "parquet"
            else:
                raise DatasetParseError(f"Unsupported file type: {suffix or file_path.name}")

        if kind in ("text", "csv", "tsv", "json"):
            dataset = parse_text_to_dataset(self.read_text(file_path), empty_rows=empty_rows)
        elif kind == "excel":
            dataset = self.read_excel(file_path)
        elif kind == "parquet":
            dataset = self.read_parquet(file_path)
        else:
            raise DatasetParseError(f"Unsupported file type: {file_type}")

        logger.info("file_reader.loaded",
                   file=str(file_path),
                   rows=len(dataset.rows),
                   columns=len(dataset.columns))
        return dataset

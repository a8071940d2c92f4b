"""Decode an uploaded bank statement into header-keyed rows.

The reader is a pure function over the uploaded bytes. It detects the
encoding and delimiter, treats the first non-empty line as the header, and
drops (with a warning) any row whose field count does not match the header.
"""

import codecs
import csv
import io
from dataclasses import dataclass, field
from typing import Optional

from finport.domain.errors import NoDataRowsError, ParseError
from finport.logging_setup import get_logger

logger = get_logger(__name__)

CANDIDATE_DELIMITERS = (",", ";", "\t")

# Data rows checked when deciding whether a delimiter splits consistently
DELIMITER_SAMPLE_ROWS = 10


@dataclass(frozen=True)
class ParsedRow:
    """One data line: its 1-based position and header-keyed values."""

    index: int
    values: dict[str, str]

    def get(self, header: Optional[str]) -> str:
        """Return the cell under header, or "" when header is None or absent."""
        if header is None:
            return ""
        return self.values.get(header, "")


@dataclass(frozen=True)
class ParseWarning:
    """A data row excluded from the result."""

    row: int
    reason: str


@dataclass(frozen=True)
class ParsedFile:
    """Result of parsing one upload."""

    headers: list[str]
    rows: list[ParsedRow]
    delimiter: str
    encoding: str
    warnings: list[ParseWarning] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    def sample(self, limit: int) -> list[ParsedRow]:
        return self.rows[:limit]


def decode_content(data: bytes) -> tuple[str, str]:
    """Decode upload bytes, returning (text, encoding name).

    A UTF-8 byte-order mark is stripped. Latin-1 is the fallback because it
    accepts every byte sequence.
    """
    encoding = "utf-8"
    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8):]
        encoding = "utf-8-sig"

    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError:
        text = data.decode("latin-1")
        encoding = "latin-1"

    return text.lstrip("\ufeff"), encoding


def _is_blank(record: list[str]) -> bool:
    return all(not cell.strip() for cell in record)


def _read_records(text: str, delimiter: str) -> list[list[str]]:
    # newline="" lets the csv module see CR, LF and CRLF itself, so quoted
    # fields keep their embedded line breaks.
    reader = csv.reader(io.StringIO(text, newline=""), delimiter=delimiter)
    try:
        return list(reader)
    except csv.Error as exc:
        raise ParseError(f"Failed to parse CSV: {exc}") from exc


def _first_line(text: str) -> str:
    for line in text.splitlines():
        if line.strip():
            return line
    return ""


def _splits_consistently(text: str, delimiter: str) -> bool:
    try:
        records = [r for r in _read_records(text, delimiter) if not _is_blank(r)]
    except ParseError:
        return False
    if not records:
        return False
    width = len(records[0])
    sample = records[1 : DELIMITER_SAMPLE_ROWS + 1]
    return all(len(record) == width for record in sample)


def detect_delimiter(text: str) -> str:
    """Pick the delimiter for text from its header line.

    Candidates are tried by descending count in the header. The first that
    gives every sampled data row the header's width wins. Failing that, the
    most frequent candidate is used, and "," when none appear at all.
    """
    header_line = _first_line(text)
    counts = {d: header_line.count(d) for d in CANDIDATE_DELIMITERS}
    # sorted() is stable, so equal counts keep the CANDIDATE_DELIMITERS order
    present = sorted((d for d in CANDIDATE_DELIMITERS if counts[d] > 0), key=lambda d: -counts[d])

    if not present:
        return ","

    for delimiter in present:
        if _splits_consistently(text, delimiter):
            return delimiter

    return present[0]


def normalize_headers(raw_headers: list[str]) -> list[str]:
    """Strip header cells, name empty ones by position and de-duplicate names."""
    headers: list[str] = []
    emitted: set[str] = set()
    for position, raw in enumerate(raw_headers, start=1):
        base = raw.strip() or f"Column {position}"
        name = base
        counter = 1
        while name in emitted:
            counter += 1
            name = f"{base} ({counter})"
        emitted.add(name)
        headers.append(name)
    return headers


def parse_csv(data: bytes, delimiter: Optional[str] = None) -> ParsedFile:
    """Parse an uploaded CSV statement.

    Args:
        data: Raw file bytes
        delimiter: Field delimiter; detected from the header line when None

    Returns:
        ParsedFile with headers, rows and warnings for excluded rows

    Raises:
        ParseError: If the delimiter is invalid or the text is not CSV
        NoDataRowsError: If there is no header or no usable data row
    """
    if delimiter is not None and len(delimiter) != 1:
        raise ParseError(f"Delimiter must be a single character, got {delimiter!r}")

    text, encoding = decode_content(data)
    if not text.strip():
        raise NoDataRowsError("CSV file is empty or contains no data")

    if delimiter is None:
        delimiter = detect_delimiter(text)

    records = [r for r in _read_records(text, delimiter) if not _is_blank(r)]
    if not records:
        raise NoDataRowsError("CSV file is empty or contains no data")

    headers = normalize_headers(records[0])
    rows: list[ParsedRow] = []
    warnings: list[ParseWarning] = []

    for index, record in enumerate(records[1:], start=1):
        if len(record) != len(headers):
            warnings.append(
                ParseWarning(
                    row=index,
                    reason=f"Expected {len(headers)} fields but found {len(record)}",
                )
            )
            continue
        values = {header: cell.strip() for header, cell in zip(headers, record)}
        rows.append(ParsedRow(index=index, values=values))

    if not rows:
        detail = f" ({len(warnings)} malformed rows skipped)" if warnings else ""
        raise NoDataRowsError(f"CSV file contains no usable data rows{detail}")

    logger.debug(
        "Parsed %d rows (%d skipped) with delimiter %r and encoding %s",
        len(rows),
        len(warnings),
        delimiter,
        encoding,
    )
    return ParsedFile(
        headers=headers,
        rows=rows,
        delimiter=delimiter,
        encoding=encoding,
        warnings=warnings,
    )

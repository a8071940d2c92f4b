"""Column mapping and the heuristics that propose one.

``infer_mapping`` is advisory. Each field is resolved by an ordered chain of
named strategies; every strategy is a pure function returning a header or
None, and the first non-None answer wins. A header is assigned to at most
one field, and fields nothing matches confidently stay None for the user to
fill in before committing.
"""

import json
import re
from dataclasses import dataclass, fields, replace, asdict
from typing import Callable, Optional, Sequence

from finport.domain.errors import InvalidMappingError, missing_mapping_fields
from finport.importing.csv_reader import ParsedRow
from finport.logging_setup import get_logger
from finport.utils.amount_parser import looks_like_amount
from finport.utils.date_parser import looks_like_date

logger = get_logger(__name__)

SPLIT_MODE = "split"
SIGNED_MODE = "signed"

# Minimum share of non-empty sampled values that must parse as dates
DATE_CONTENT_THRESHOLD = 0.8

# Rows handed to the inferencer by callers
INFERENCE_SAMPLE_ROWS = 20

DATE_SYNONYMS = (
    "date",
    "transaction date",
    "trans date",
    "posted date",
    "posting date",
    "value date",
    "booking date",
)
DESCRIPTION_SYNONYMS = (
    "description",
    "transaction description",
    "narrative",
    "details",
    "memo",
    "payee",
    "merchant",
    "reference",
)
DEBIT_SYNONYMS = ("debit", "debit amount", "withdrawal", "withdrawals", "paid out", "money out", "out")
CREDIT_SYNONYMS = ("credit", "credit amount", "deposit", "deposits", "paid in", "money in", "in")
AMOUNT_SYNONYMS = ("amount", "transaction amount", "net amount", "value", "sum")

# Headers containing any of these words never hold a transaction amount,
# so "Value Date" is not mistaken for a signed "value" column
AMOUNT_EXCLUDED_WORDS = ("balance", "date")


@dataclass(frozen=True)
class ColumnMapping:
    """Which header supplies each transaction field.

    Exactly one of the debit+credit pair or amount must be set for a commit,
    and date and description are always required.
    """

    date: Optional[str] = None
    description: Optional[str] = None
    debit: Optional[str] = None
    credit: Optional[str] = None
    amount: Optional[str] = None

    @property
    def mode(self) -> Optional[str]:
        has_pair = self.debit is not None and self.credit is not None
        has_either = self.debit is not None or self.credit is not None
        if has_pair and self.amount is None:
            return SPLIT_MODE
        if self.amount is not None and not has_either:
            return SIGNED_MODE
        return None

    def missing_fields(self) -> list[str]:
        """Return the assignments still needed before a commit."""
        missing = []
        if self.date is None:
            missing.append("date")
        if self.description is None:
            missing.append("description")
        if self.mode is None:
            if self.amount is not None:
                missing.append("amount (clear debit/credit when amount is used)")
            elif self.debit is None and self.credit is None:
                missing.append("debit+credit or amount")
            elif self.debit is None:
                missing.append("debit")
            else:
                missing.append("credit")
        return missing

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def validate(self, headers: Sequence[str]) -> None:
        """Check the mapping is usable against a file's headers.

        Raises:
            InvalidMappingError: If required fields are missing, the amount
                configuration is ambiguous, or a header is not in the file
        """
        missing = self.missing_fields()
        if missing:
            raise InvalidMappingError(missing_mapping_fields(missing))

        known = set(headers)
        for name, header in self.assigned().items():
            if header not in known:
                raise InvalidMappingError(
                    f"Mapping field '{name}' refers to unknown column '{header}'"
                )

    def assigned(self) -> dict[str, str]:
        """Return only the fields that have a header."""
        return {k: v for k, v in asdict(self).items() if v is not None}

    def with_overrides(self, **overrides: Optional[str]) -> "ColumnMapping":
        """Return a copy with the given fields replaced.

        Keys whose value is None are ignored; pass "" to clear a field.
        """
        unknown = set(overrides) - _FIELD_NAMES
        if unknown:
            raise InvalidMappingError(f"Unknown mapping fields: {', '.join(sorted(unknown))}")
        changes = {k: (v or None) for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Optional[str]]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "ColumnMapping":
        """Build a mapping from a plain dict, rejecting unknown keys.

        Raises:
            InvalidMappingError: On unknown keys or non-string values
        """
        unknown = set(data) - _FIELD_NAMES
        if unknown:
            raise InvalidMappingError(f"Unknown mapping fields: {', '.join(sorted(unknown))}")
        values = {}
        for key, value in data.items():
            if value is not None and not isinstance(value, str):
                raise InvalidMappingError(f"Mapping field '{key}' must be a column name")
            values[key] = value or None
        return cls(**values)

    @classmethod
    def from_json(cls, text: str) -> "ColumnMapping":
        """Parse a JSON-encoded mapping.

        Raises:
            InvalidMappingError: If text is not a JSON object of column names
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidMappingError(f"Invalid mapping format - must be valid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise InvalidMappingError("Invalid mapping format - expected a JSON object")
        return cls.from_dict(data)


_FIELD_NAMES = {f.name for f in fields(ColumnMapping)}


def normalize_header(header: str) -> str:
    """Lower-case and collapse non-alphanumeric runs to single spaces."""
    return re.sub(r"[^a-z0-9]+", " ", header.lower()).strip()


def header_matches(header: str, synonyms: Sequence[str]) -> bool:
    """Return True if header equals a synonym or contains it as whole words.

    Synonyms of three characters or fewer only match exactly, so "in" does
    not match "Paid in full" and "sum" does not match "Sum Insured".
    """
    normalized = normalize_header(header)
    padded = f" {normalized} "
    for synonym in synonyms:
        if normalized == synonym:
            return True
        if len(synonym) > 3 and f" {synonym} " in padded:
            return True
    return False


def _column_values(header: str, rows: Sequence[ParsedRow]) -> list[str]:
    return [v for v in (row.get(header) for row in rows) if v]


def _match_rate(values: list[str], predicate: Callable[[str], bool]) -> float:
    if not values:
        return 0.0
    return sum(1 for v in values if predicate(v)) / len(values)


# A strategy receives the candidate headers (already-assigned ones removed)
# and the sample rows, and returns a header or None.
Strategy = Callable[[Sequence[str], Sequence[ParsedRow]], Optional[str]]


def _by_synonyms(synonyms: Sequence[str], excluded_words: Sequence[str] = ()) -> Strategy:
    def strategy(headers: Sequence[str], rows: Sequence[ParsedRow]) -> Optional[str]:
        eligible = [h for h in headers if not _has_excluded(h, excluded_words)]
        # Exact matches beat phrase matches, and earlier synonyms beat later
        # ones: "Description" wins over "Reference" wherever they appear.
        for synonym in synonyms:
            for header in eligible:
                if normalize_header(header) == synonym:
                    return header
        for synonym in synonyms:
            for header in eligible:
                if header_matches(header, (synonym,)):
                    return header
        return None

    return strategy


def _has_excluded(header: str, words: Sequence[str]) -> bool:
    normalized = normalize_header(header)
    return any(word in normalized for word in words)


def date_by_content(headers: Sequence[str], rows: Sequence[ParsedRow]) -> Optional[str]:
    """Pick the column whose values most often parse as dates, above the threshold."""
    best_header = None
    best_rate = 0.0
    for header in headers:
        rate = _match_rate(_column_values(header, rows), looks_like_date)
        if rate > best_rate:
            best_header, best_rate = header, rate
    if best_header is not None and best_rate >= DATE_CONTENT_THRESHOLD:
        return best_header
    return None


def description_by_text_length(headers: Sequence[str], rows: Sequence[ParsedRow]) -> Optional[str]:
    """Pick the textual column with the longest average value."""
    best_header = None
    best_length = 0.0
    for header in headers:
        values = _column_values(header, rows)
        if not values:
            continue
        if _match_rate(values, looks_like_amount) >= 0.5:
            continue
        if _match_rate(values, looks_like_date) >= 0.5:
            continue
        average = sum(len(v) for v in values) / len(values)
        if average > best_length:
            best_header, best_length = header, average
    return best_header


DATE_STRATEGIES: list[tuple[str, Strategy]] = [
    ("header-name", _by_synonyms(DATE_SYNONYMS)),
    ("content", date_by_content),
]
DESCRIPTION_STRATEGIES: list[tuple[str, Strategy]] = [
    ("header-name", _by_synonyms(DESCRIPTION_SYNONYMS)),
    ("longest-text", description_by_text_length),
]
DEBIT_STRATEGIES: list[tuple[str, Strategy]] = [
    ("header-name", _by_synonyms(DEBIT_SYNONYMS, AMOUNT_EXCLUDED_WORDS)),
]
CREDIT_STRATEGIES: list[tuple[str, Strategy]] = [
    ("header-name", _by_synonyms(CREDIT_SYNONYMS, AMOUNT_EXCLUDED_WORDS)),
]
AMOUNT_STRATEGIES: list[tuple[str, Strategy]] = [
    ("header-name", _by_synonyms(AMOUNT_SYNONYMS, AMOUNT_EXCLUDED_WORDS + ("debit", "credit"))),
]


def resolve_field(
    field_name: str,
    strategies: list[tuple[str, Strategy]],
    headers: Sequence[str],
    rows: Sequence[ParsedRow],
) -> Optional[str]:
    """Run strategies in order and return the first header found."""
    for strategy_name, strategy in strategies:
        header = strategy(headers, rows)
        if header is not None:
            logger.debug("Mapped %s to %r via %s", field_name, header, strategy_name)
            return header
    logger.debug("No column found for %s", field_name)
    return None


def infer_mapping(headers: Sequence[str], sample_rows: Sequence[ParsedRow]) -> ColumnMapping:
    """Propose a column mapping from headers and sample rows.

    Always returns; fields with no confident match are None. Separate
    debit/credit columns are preferred over a signed amount column because
    they do not depend on the bank's sign convention.
    """
    available = list(headers)

    def take(field_name: str, strategies: list[tuple[str, Strategy]]) -> Optional[str]:
        header = resolve_field(field_name, strategies, available, sample_rows)
        if header is not None:
            available.remove(header)
        return header

    date_header = take("date", DATE_STRATEGIES)

    # Amount headers are claimed before the description fallback so that a
    # wordy "Money Out" column is never guessed as the description.
    debit_header = resolve_field("debit", DEBIT_STRATEGIES, available, sample_rows)
    credit_header = None
    if debit_header is not None:
        credit_header = resolve_field(
            "credit", CREDIT_STRATEGIES, [h for h in available if h != debit_header], sample_rows
        )

    amount_header = None
    if debit_header is not None and credit_header is not None:
        available.remove(debit_header)
        available.remove(credit_header)
    else:
        debit_header = credit_header = None
        amount_header = take("amount", AMOUNT_STRATEGIES)

    description_header = take("description", DESCRIPTION_STRATEGIES)

    mapping = ColumnMapping(
        date=date_header,
        description=description_header,
        debit=debit_header,
        credit=credit_header,
        amount=amount_header,
    )
    logger.info("Suggested mapping %s (mode=%s)", mapping.assigned(), mapping.mode)
    return mapping

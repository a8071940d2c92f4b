"""Turn a parsed statement row into a transaction candidate."""

from decimal import Decimal

from finport.domain.entities import TransactionCandidate
from finport.domain.errors import InvalidAmountError, InvalidDateError, MissingFieldError
from finport.importing.csv_reader import ParsedRow
from finport.importing.mapping import ColumnMapping, SPLIT_MODE
from finport.utils.amount_parser import parse_amount, parse_optional_amount
from finport.utils.date_parser import parse_statement_date
from finport.utils.text import collapse_whitespace

ZERO = Decimal("0.00")


def _amount_or_error(raw: str, column: str, optional: bool, decimal_comma: bool = False) -> Decimal:
    try:
        if optional:
            return parse_optional_amount(raw, decimal_comma=decimal_comma)
        return parse_amount(raw, decimal_comma=decimal_comma)
    except ValueError as exc:
        raise InvalidAmountError(f"Invalid amount in '{column}': {exc}") from exc


def resolve_amounts(
    row: ParsedRow, mapping: ColumnMapping, decimal_comma: bool = False
) -> tuple[Decimal, Decimal]:
    """Return (debit, credit) magnitudes for a row.

    In split mode each column is read independently and an empty cell is
    zero. In signed mode a negative amount is a debit and a positive amount
    a credit; the sign is not stored.

    Raises:
        MissingFieldError: If the signed amount cell is empty
        InvalidAmountError: If a cell is not a finite number, or the row
            does not have exactly one non-zero side
    """
    if mapping.mode == SPLIT_MODE:
        debit = abs(_amount_or_error(row.get(mapping.debit), mapping.debit, True, decimal_comma))
        credit = abs(_amount_or_error(row.get(mapping.credit), mapping.credit, True, decimal_comma))
        if debit and credit:
            raise InvalidAmountError(
                f"Row has both a debit ({debit}) and a credit ({credit}); expected only one"
            )
    else:
        raw = row.get(mapping.amount)
        if not raw:
            raise MissingFieldError(f"Missing amount in '{mapping.amount}'")
        amount = _amount_or_error(raw, mapping.amount, False, decimal_comma)
        debit = -amount if amount < 0 else ZERO
        credit = amount if amount > 0 else ZERO

    if not debit and not credit:
        raise InvalidAmountError("Both debit and credit amounts are zero or empty")

    return debit, credit


def normalize_row(
    row: ParsedRow,
    mapping: ColumnMapping,
    account_id: int,
    day_first: bool = True,
    decimal_comma: bool = False,
) -> TransactionCandidate:
    """Normalize one row using a validated mapping.

    Args:
        row: Parsed statement row
        mapping: Complete column mapping
        account_id: Account the transaction belongs to
        day_first: Read ambiguous slash dates as DD/MM
        decimal_comma: Read "," as the decimal point in amounts

    Returns:
        TransactionCandidate for the row

    Raises:
        MissingFieldError: If the date or description cell is empty
        InvalidDateError: If the date does not match an accepted format
        InvalidAmountError: If the amounts are unusable
    """
    date_raw = row.get(mapping.date)
    if not date_raw:
        raise MissingFieldError(f"Missing date in '{mapping.date}'")

    original_description = row.get(mapping.description)
    description = collapse_whitespace(original_description)
    if not description:
        raise MissingFieldError(f"Missing description in '{mapping.description}'")

    try:
        transaction_date = parse_statement_date(date_raw, day_first=day_first)
    except ValueError as exc:
        raise InvalidDateError(f"Invalid date format: {date_raw}") from exc

    debit, credit = resolve_amounts(row, mapping, decimal_comma=decimal_comma)

    return TransactionCandidate(
        account_id=account_id,
        transaction_date=transaction_date,
        description=description,
        original_description=original_description,
        debit_amount=debit,
        credit_amount=credit,
        row=row.index,
    )

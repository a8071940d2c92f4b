"""Tests for row normalization."""

import pytest
from datetime import date
from decimal import Decimal
from finport.domain.errors import InvalidAmountError, InvalidDateError, MissingFieldError
from finport.importing.csv_reader import ParsedRow
from finport.importing.mapping import ColumnMapping
from finport.importing.normalize import normalize_row, resolve_amounts

SPLIT = ColumnMapping(date="Date", description="Description", debit="Debit", credit="Credit")
SIGNED = ColumnMapping(date="Date", description="Description", amount="Amount")


def split_row(date_value="01/03/2024", description="Coffee Shop", debit="", credit=""):
    return ParsedRow(
        index=1,
        values={"Date": date_value, "Description": description, "Debit": debit, "Credit": credit},
    )


def signed_row(amount, date_value="2024-03-01", description="Coffee Shop"):
    return ParsedRow(index=4, values={"Date": date_value, "Description": description, "Amount": amount})


class TestResolveAmounts:
    """Tests for debit/credit resolution."""

    def test_split_debit(self):
        assert resolve_amounts(split_row(debit="4.50"), SPLIT) == (Decimal("4.50"), Decimal("0.00"))

    def test_split_credit(self):
        assert resolve_amounts(split_row(credit="2,000.00"), SPLIT) == (Decimal("0.00"), Decimal("2000.00"))

    def test_split_stores_magnitudes(self):
        """Test banks that print debits as negatives still store positive amounts."""
        assert resolve_amounts(split_row(debit="-4.50"), SPLIT) == (Decimal("4.50"), Decimal("0.00"))

    def test_split_both_empty(self):
        with pytest.raises(InvalidAmountError):
            resolve_amounts(split_row(), SPLIT)

    def test_split_both_zero(self):
        with pytest.raises(InvalidAmountError):
            resolve_amounts(split_row(debit="0.00", credit="0"), SPLIT)

    def test_split_both_set(self):
        with pytest.raises(InvalidAmountError, match="both a debit"):
            resolve_amounts(split_row(debit="1.00", credit="2.00"), SPLIT)

    def test_split_invalid_number(self):
        with pytest.raises(InvalidAmountError, match="'Debit'"):
            resolve_amounts(split_row(debit="abc"), SPLIT)

    def test_signed_negative_is_debit(self):
        assert resolve_amounts(signed_row("-12.34"), SIGNED) == (Decimal("12.34"), Decimal("0.00"))

    def test_signed_positive_is_credit(self):
        assert resolve_amounts(signed_row("45.00"), SIGNED) == (Decimal("0.00"), Decimal("45.00"))

    def test_signed_parentheses_is_debit(self):
        assert resolve_amounts(signed_row("(3.50)"), SIGNED) == (Decimal("3.50"), Decimal("0.00"))

    def test_signed_decimal_comma(self):
        assert resolve_amounts(signed_row("-1.234,50"), SIGNED, decimal_comma=True) == (
            Decimal("1234.50"),
            Decimal("0.00"),
        )

    def test_signed_empty_is_missing(self):
        with pytest.raises(MissingFieldError):
            resolve_amounts(signed_row(""), SIGNED)

    def test_signed_zero(self):
        with pytest.raises(InvalidAmountError):
            resolve_amounts(signed_row("0.00"), SIGNED)

    def test_signed_not_finite(self):
        with pytest.raises(InvalidAmountError):
            resolve_amounts(signed_row("NaN"), SIGNED)


class TestNormalizeRow:
    """Tests for normalize_row."""

    def test_candidate_fields(self):
        row = split_row(description="  Coffee   Shop ", debit="4.50")
        candidate = normalize_row(row, SPLIT, account_id=7)

        assert candidate.account_id == 7
        assert candidate.transaction_date == date(2024, 3, 1)
        assert candidate.description == "Coffee Shop"
        assert candidate.original_description == "  Coffee   Shop "
        assert candidate.debit_amount == Decimal("4.50")
        assert candidate.credit_amount == Decimal("0.00")
        assert candidate.row == 1

    def test_month_first(self):
        candidate = normalize_row(split_row(debit="1.00"), SPLIT, account_id=1, day_first=False)

        assert candidate.transaction_date == date(2024, 1, 3)

    def test_decimal_comma(self):
        candidate = normalize_row(split_row(credit="4,50"), SPLIT, account_id=1, decimal_comma=True)

        assert candidate.credit_amount == Decimal("4.50")

    def test_missing_date(self):
        with pytest.raises(MissingFieldError, match="date"):
            normalize_row(split_row(date_value="", debit="1.00"), SPLIT, account_id=1)

    def test_missing_description(self):
        with pytest.raises(MissingFieldError, match="description"):
            normalize_row(split_row(description="   ", debit="1.00"), SPLIT, account_id=1)

    def test_invalid_date(self):
        with pytest.raises(InvalidDateError, match="Invalid date format: 31/02/2024"):
            normalize_row(split_row(date_value="31/02/2024", debit="1.00"), SPLIT, account_id=1)

    def test_error_codes(self):
        assert MissingFieldError.code == "MissingField"
        assert InvalidDateError.code == "InvalidDate"
        assert InvalidAmountError.code == "InvalidAmount"

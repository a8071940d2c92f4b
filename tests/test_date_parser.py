"""Tests for statement dates and relative filter dates."""

import pytest
from datetime import date, timedelta
from finport.utils.date_parser import (
    looks_like_date,
    parse_date,
    parse_statement_date,
    statement_date_formats,
)


class TestStatementDates:
    """Tests for the fixed statement date formats."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2024-03-01", date(2024, 3, 1)),
            ("2024/03/01", date(2024, 3, 1)),
            ("01/03/2024", date(2024, 3, 1)),
            ("01-03-2024", date(2024, 3, 1)),
            ("01.03.2024", date(2024, 3, 1)),
            ("01/03/24", date(2024, 3, 1)),
            ("01-Mar-2024", date(2024, 3, 1)),
            ("1 March 2024", date(2024, 3, 1)),
        ],
    )
    def test_day_first_formats(self, raw, expected):
        """Test accepted formats read day-first by default."""
        assert parse_statement_date(raw) == expected

    def test_month_first_when_configured(self):
        """Test ambiguous slash dates follow the configured order."""
        assert parse_statement_date("01/03/2024", day_first=False) == date(2024, 1, 3)
        assert parse_statement_date("01/03/2024", day_first=True) == date(2024, 3, 1)

    def test_falls_back_to_other_order(self):
        """Test a date impossible in the preferred order uses the other one."""
        assert parse_statement_date("03/25/2024") == date(2024, 3, 25)
        assert parse_statement_date("25/03/2024", day_first=False) == date(2024, 3, 25)

    def test_iso_formats_tried_first(self):
        """Test ISO formats lead the trial order either way."""
        assert statement_date_formats(True)[0] == "%Y-%m-%d"
        assert statement_date_formats(False)[0] == "%Y-%m-%d"

    @pytest.mark.parametrize("raw", ["", "31/02/2024", "yesterday", "2024-13-01", "Coffee"])
    def test_rejects_invalid(self, raw):
        """Test impossible and free-form values are rejected."""
        with pytest.raises(ValueError):
            parse_statement_date(raw)

    def test_looks_like_date(self):
        """Test date sniffing used by inference."""
        assert looks_like_date("15/01/2024")
        assert not looks_like_date("4.50")
        assert not looks_like_date("Salary")


class TestFilterDates:
    """Tests for dates typed on the command line."""

    def test_parse_absolute_date(self):
        """Test parsing absolute dates."""
        assert parse_date("2024-01-15") == date(2024, 1, 15)

    def test_parse_today(self):
        """Test parsing 'today'."""
        assert parse_date("today") == date.today()

    def test_parse_yesterday(self):
        """Test parsing 'yesterday'."""
        assert parse_date("Yesterday") == date.today() - timedelta(days=1)

    def test_parse_this_month(self):
        """Test 'this month' means the first day of the current month."""
        assert parse_date("this month") == date.today().replace(day=1)

    def test_parse_last_year(self):
        """Test 'last year' means January 1st of the previous year."""
        assert parse_date("last year") == date(date.today().year - 1, 1, 1)

    def test_parse_invalid(self):
        """Test unparseable input raises ValueError."""
        with pytest.raises(ValueError):
            parse_date("banana")

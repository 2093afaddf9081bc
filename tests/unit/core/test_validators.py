"""Tests for DataValidator."""
import pytest

from blogdata.core.exceptions import ValidationError
from blogdata.core.validators import DataValidator


class TestNormalizeString:
    """Tests for normalize_string."""

    def test_strips_whitespace(self):
        assert DataValidator.normalize_string("  hello  ") == "hello"

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_becomes_none(self, value):
        assert DataValidator.normalize_string(value) is None


class TestNormalizeIds:
    """Tests for normalize_int and normalize_ids."""

    def test_numeric_strings_accepted(self):
        assert DataValidator.normalize_int("42") == 42

    def test_booleans_rejected(self):
        with pytest.raises(ValidationError):
            DataValidator.normalize_int(True)

    def test_garbage_rejected(self):
        with pytest.raises(ValidationError):
            DataValidator.normalize_int("abc")

    def test_ids_deduplicated_in_order(self):
        """First appearance wins."""
        assert DataValidator.normalize_ids([3, 1, "3", 2, 1]) == [3, 1, 2]

    def test_none_ids(self):
        assert DataValidator.normalize_ids(None) == []


class TestPaging:
    """Tests for validate_paging."""

    def test_valid(self):
        DataValidator.validate_paging(0, 0)
        DataValidator.validate_paging(10, 20)

    @pytest.mark.parametrize(
        "count,offset",
        [(-1, 0), (0, -1), ("10", 0), (True, 0), (1.5, 0)],
    )
    def test_invalid(self, count, offset):
        with pytest.raises(ValidationError):
            DataValidator.validate_paging(count, offset)


class TestYearMonth:
    """Tests for validate_year_month."""

    @pytest.mark.parametrize("month", [1, 6, 12])
    def test_valid_months(self, month):
        DataValidator.validate_year_month(2024, month)

    @pytest.mark.parametrize("month", [1, 11])
    def test_last_year_before_december(self, month):
        """Year 9999 is accepted up to November."""
        DataValidator.validate_year_month(9999, month)

    @pytest.mark.parametrize("year,month", [(2024, 0), (2024, 13), (0, 5), (10000, 1), (9999, 12), (2024, "3")])
    def test_invalid(self, year, month):
        with pytest.raises(ValidationError):
            DataValidator.validate_year_month(year, month)

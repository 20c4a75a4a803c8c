import locale
import pytest
from datetime import date, datetime
from shopadmin.utils.sales import SaleStatus, get_sale_status, format_date_range, parse_datetime


class TestGetSaleStatus:
    """Tests for sale status derivation."""

    def test_upcoming(self):
        now = datetime(2024, 3, 1)
        assert get_sale_status("2024-03-15", "2024-03-22", now=now) == SaleStatus.UPCOMING

    def test_active(self):
        now = datetime(2024, 3, 18, 12, 0)
        assert get_sale_status("2024-03-15", "2024-03-22", now=now) == SaleStatus.ACTIVE

    def test_ended(self):
        now = datetime(2024, 3, 22, 0, 0, 1)
        assert get_sale_status("2024-03-15", "2024-03-22", now=now) == SaleStatus.ENDED

    def test_start_boundary_is_active(self):
        now = datetime(2024, 3, 15)
        assert get_sale_status("2024-03-15", "2024-03-22", now=now) == SaleStatus.ACTIVE

    def test_end_boundary_is_active(self):
        now = datetime(2024, 3, 22)
        assert get_sale_status("2024-03-15", "2024-03-22", now=now) == SaleStatus.ACTIVE

    def test_defaults_to_current_time(self):
        """Without `now` the status follows the clock."""
        assert get_sale_status("2000-01-01", "2000-01-02") == SaleStatus.ENDED
        assert get_sale_status("2999-01-01", "2999-01-02") == SaleStatus.UPCOMING
        assert get_sale_status("2000-01-01", "2999-01-02") == SaleStatus.ACTIVE

    def test_accepts_datetimes(self):
        status = get_sale_status(
            datetime(2024, 3, 15), datetime(2024, 3, 22), now=datetime(2024, 3, 16)
        )
        assert status == SaleStatus.ACTIVE

    def test_status_serializes_as_string(self):
        assert SaleStatus.ACTIVE.value == "active"
        assert SaleStatus.UPCOMING == "upcoming"


class TestFormatDateRange:
    """Tests for date range display."""

    def test_same_year(self):
        assert format_date_range("2024-03-15", "2024-03-22") == "Mar 15 - Mar 22, 2024"

    def test_different_years(self):
        assert format_date_range("2023-12-30", "2024-01-02") == "Dec 30, 2023 - Jan 2, 2024"

    def test_no_zero_padding(self):
        assert format_date_range("2024-01-05", "2024-02-09") == "Jan 5 - Feb 9, 2024"

    def test_date_objects(self):
        assert format_date_range(date(2024, 7, 1), date(2024, 7, 4)) == "Jul 1 - Jul 4, 2024"

    @pytest.mark.parametrize("month,label", list(enumerate(
        ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"], start=1
    )))
    def test_english_month_names(self, month, label):
        assert format_date_range(date(2024, month, 1), date(2024, month, 2)) == f"{label} 1 - {label} 2, 2024"

    def test_ignores_process_locale(self):
        previous = locale.setlocale(locale.LC_TIME)
        try:
            locale.setlocale(locale.LC_TIME, "de_DE.UTF-8")
        except locale.Error:
            pytest.skip("de_DE.UTF-8 locale not installed")
        try:
            assert format_date_range("2024-03-01", "2024-05-02") == "Mar 1 - May 2, 2024"
        finally:
            locale.setlocale(locale.LC_TIME, previous)


class TestParseDatetime:
    """Tests for date normalization."""

    def test_date_only_string_is_midnight(self):
        assert parse_datetime("2024-03-15") == datetime(2024, 3, 15)

    def test_zulu_suffix(self):
        assert parse_datetime("2024-03-15T10:30:00Z") == datetime(2024, 3, 15, 10, 30)

    def test_offset_converted_to_utc(self):
        assert parse_datetime("2024-03-15T10:30:00+02:00") == datetime(2024, 3, 15, 8, 30)

    def test_invalid_string(self):
        with pytest.raises(ValueError):
            parse_datetime("next tuesday")

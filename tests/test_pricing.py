"""
Unit tests for price, rating and review parsing.
"""
import pytest

from advisor.pricing import (
    parse_price, parse_price_range, parse_rating, parse_review_count
)


class TestParsePrice:
    """Localized price strings."""

    def test_thousands_and_decimals(self):
        assert parse_price("$1.234,56") == pytest.approx(1234.56)

    def test_empty_is_zero(self):
        assert parse_price("") == 0
        assert parse_price(None) == 0

    def test_currency_code(self):
        assert parse_price("ARS 999") == 999

    def test_thousands_only(self):
        assert parse_price("$ 500.000") == 500000

    def test_non_numeric(self):
        assert parse_price("Consultar precio") == 0
        assert parse_price("1,2,3") == 0

    def test_numeric_input(self):
        assert parse_price(1499.5) == 1499.5
        assert parse_price(-10) == 0
        assert parse_price(float("nan")) == 0
        assert parse_price(float("inf")) == 0

    def test_decimal_point_locale_is_not_supported(self):
        # "." is always a thousands separator
        assert parse_price("1234.56") == 123456


class TestParseRating:

    def test_values(self):
        assert parse_rating("4.8") == 4.8
        assert parse_rating("4,5") == 4.5
        assert parse_rating(3) == 3.0

    def test_absent_or_invalid(self):
        assert parse_rating(None) == 0
        assert parse_rating("") == 0
        assert parse_rating("n/a") == 0

    def test_clamped(self):
        assert parse_rating("7") == 5.0
        assert parse_rating("-1") == 0.0

    def test_non_finite(self):
        assert parse_rating(float("nan")) == 0
        assert parse_rating("inf") == 0


class TestParseReviewCount:

    def test_digits_only(self):
        assert parse_review_count("1.500 reseñas") == 1500
        assert parse_review_count("(230)") == 230

    def test_numbers_and_absent(self):
        assert parse_review_count(42) == 42
        assert parse_review_count(None) == 0
        assert parse_review_count("") == 0

    def test_non_finite_numbers(self):
        assert parse_review_count(float("nan")) == 0
        assert parse_review_count(float("inf")) == 0


class TestParsePriceRange:

    def test_between(self):
        assert parse_price_range("entre 100.000 y 200.000") == {
            "min_price": 100000, "max_price": 200000
        }

    def test_upper_bound(self):
        assert parse_price_range("hasta 150000") == {"max_price": 150000}
        assert parse_price_range("menos de 80.000 pesos") == {"max_price": 80000}

    def test_lower_bound(self):
        assert parse_price_range("desde 50.000") == {"min_price": 50000}

    def test_no_range(self):
        assert parse_price_range("no") == {}

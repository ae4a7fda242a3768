"""Parsing of localized prices, ratings and review counts.

Prices follow the Spanish / Latin-American convention: ``.`` separates
thousands and ``,`` marks decimals. ``"$1.234,56"`` is 1234.56. Prices
written with a decimal point (``"1234.56"``) misparse as 123456; this is a
known limitation of the format, not something the parser tries to guess.
"""
import math
import re
from typing import Any

_NON_NUMERIC = re.compile(r"[^\d.,]")
_DIGITS = re.compile(r"\D")
_RANGE_NUMBER = re.compile(r"\d{1,3}(?:[.,]\d{3})+|\d+")


def parse_price(raw: Any) -> float:
    """Convert a localized price into a float, 0 when it cannot be read."""
    if raw is None or isinstance(raw, bool):
        return 0.0
    if isinstance(raw, (int, float)):
        return float(raw) if math.isfinite(raw) and raw > 0 else 0.0

    cleaned = _NON_NUMERIC.sub("", str(raw))
    cleaned = cleaned.replace(".", "").replace(",", ".")
    try:
        value = float(cleaned)
    except ValueError:
        return 0.0
    return value if math.isfinite(value) and value > 0 else 0.0


def parse_rating(raw: Any) -> float:
    """Star rating in the 0-5 range, 0 when absent."""
    if raw is None or isinstance(raw, bool):
        return 0.0
    try:
        value = float(str(raw).strip().replace(",", "."))
    except ValueError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return min(max(value, 0.0), 5.0)


def parse_review_count(raw: Any) -> int:
    """Review count from the digits in ``raw`` ("1.500 reseñas" -> 1500)."""
    if raw is None or isinstance(raw, bool):
        return 0
    if isinstance(raw, (int, float)):
        return max(int(raw), 0) if math.isfinite(raw) else 0
    digits = _DIGITS.sub("", str(raw))
    return int(digits) if digits else 0


def parse_price_range(text: str) -> dict[str, int]:
    """
    Extract a price range from a chat message.

    "entre 100.000 y 200.000" -> min and max, "menos de" / "hasta" -> max,
    "más de" / "desde" -> min. Anything else yields an empty dict.
    """
    text = (text or "").lower()
    numbers = [
        int(re.sub(r"[.,]", "", n)) for n in _RANGE_NUMBER.findall(text)
    ]
    if "entre" in text and len(numbers) >= 2:
        return {"min_price": min(numbers), "max_price": max(numbers)}
    if ("menos de" in text or "hasta" in text) and numbers:
        return {"max_price": numbers[0]}
    if ("más de" in text or "mas de" in text or "desde" in text) and numbers:
        return {"min_price": numbers[0]}
    return {}

"""
Shared pytest fixtures.
"""
import pytest
from datetime import date

from advisor.models import CategoryProfile, ProductListing
from advisor.profiles import ProfileStore


@pytest.fixture
def today():
    """Fixed date so the recency factor does not depend on the clock."""
    return date(2024, 6, 1)


@pytest.fixture
def neutral_store():
    """Store with only a neutral default profile."""
    return ProfileStore({})


@pytest.fixture
def phone_store():
    """Small store with a phone profile and a neutral default."""
    celular = CategoryProfile.from_dict("celular", {
        "weights": {"brand": 1.5},
        "brands": {"samsung": 12, "motorola": 10, "genericphone": -5},
        "positiveKeywords": {"5g": 8},
        "negativeKeywords": {"usado": -15, "generico": -10},
    })
    return ProfileStore({"celular": celular})


@pytest.fixture
def scenario_a_listings():
    return [
        ProductListing.from_dict({
            "product_id": "1",
            "title": "Samsung Galaxy S24 2024",
            "price": "$500.000",
            "rating": "4.8",
            "reviews": "1500",
            "brand": "Samsung",
            "link": "https://example.com/1",
        }),
        ProductListing.from_dict({
            "product_id": "2",
            "title": "Celular generico usado",
            "price": "$50.000",
            "rating": "",
            "reviews": "",
            "brand": "",
        }),
    ]


def make_listing(product_id, title="Producto", price="$100.000", rating="4.0",
                 reviews="50", brand="", **extra):
    data = {
        "product_id": product_id,
        "title": title,
        "price": price,
        "rating": rating,
        "reviews": reviews,
        "brand": brand,
    }
    data.update(extra)
    return ProductListing.from_dict(data)


@pytest.fixture
def listing_factory():
    return make_listing

"""
Unit tests for title structuring.
"""
from advisor.features import detect_brand, extract_specs, structure_products
from advisor.models import ProductListing


class TestExtractSpecs:

    def test_phone_title(self):
        specs = extract_specs("Samsung Galaxy A55 5G 256GB 8GB RAM NFC")
        assert "256gb" in specs
        assert "8gb ram" in specs
        assert "5g" in specs
        assert "nfc" in specs

    def test_ram_is_not_storage(self):
        specs = extract_specs("Notebook Lenovo 16GB RAM 512GB SSD")
        assert "16gb ram" in specs
        assert "16gb" not in specs
        assert "512gb" in specs
        assert "ssd" in specs

    def test_appliance_units(self):
        assert "55 pulgadas" in extract_specs('Smart TV LG 55" 4K')
        assert "300 litros" in extract_specs("Heladera Drean 300 L No Frost")
        assert "no frost" in extract_specs("Heladera Drean 300 L No Frost")
        assert "3000 frigorias" in extract_specs("Aire Split 3.000 frigorías inverter")

    def test_no_duplicates(self):
        specs = extract_specs("Celular 5G 5G 128GB")
        assert specs.count("5g") == 1

    def test_empty_title(self):
        assert extract_specs("") == []


def test_detect_brand_picks_first_in_title():
    assert detect_brand("Funda Samsung para Motorola", {"motorola", "samsung"}) == "samsung"
    assert detect_brand("Celular sin marca", {"samsung"}) is None


def test_structure_products(phone_store):
    listings = [
        ProductListing.from_dict({"product_id": "1", "title": "Motorola  Edge 40 256GB"}),
        ProductListing.from_dict({"product_id": "2", "title": "Telefono basico", "brand": "lg"}),
        ProductListing.from_dict({"product_id": "3", "title": "Telefono basico"}),
    ]

    first, second, third = structure_products(listings, phone_store)

    assert first.product_id == "1"
    assert first.clean_title == "Motorola Edge 40 256GB"
    assert first.brand == "Motorola"
    assert first.model == "Edge 40"
    assert first.specs == ["256gb"]
    assert second.brand == "LG"
    assert third.brand == "Genérico"

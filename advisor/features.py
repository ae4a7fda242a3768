"""Structuring of raw shopping titles into brand, model and key specs."""
import re
from typing import Iterable, Optional

from .models import ProductListing, StructuredProduct
from .profiles import ProfileStore, default_store

# ─── Spec patterns ───

_STORAGE_PATTERN = re.compile(r"\b(\d{2,4})\s*(gb|tb)\b(?!\s*(?:de\s*)?ram)", re.I)
_RAM_PATTERN = re.compile(r"\b(\d{1,2})\s*gb\s*(?:de\s*)?ram\b|\bram\s*(\d{1,2})\s*gb\b", re.I)
_SCREEN_PATTERN = re.compile(r"\b(\d{2,3}(?:[.,]\d)?)\s*(?:\"|''|”|pulgadas|pulg|inch|in)(?=\W|$)", re.I)
_LITERS_PATTERN = re.compile(r"\b(\d{2,4})\s*(?:l|lts?|litros)\b", re.I)
_KG_PATTERN = re.compile(r"\b(\d{1,2}(?:[.,]\d)?)\s*kg\b", re.I)
_FRIGORIAS_PATTERN = re.compile(r"\b(\d{1,2}\.?\d{3})\s*(?:frigor[ií]as|fg)\b", re.I)
_WATTS_PATTERN = re.compile(r"\b(\d{3,4})\s*w\b", re.I)
_MAH_PATTERN = re.compile(r"\b(\d{4,5})\s*mah\b", re.I)

_FEATURE_KEYWORDS = [
    "5g", "4g", "wifi", "wi-fi", "bluetooth", "nfc", "4k", "8k", "full hd",
    "oled", "qled", "amoled", "led", "hdr", "inverter", "no frost",
    "frost free", "ssd", "hdd", "i3", "i5", "i7", "i9", "ryzen", "rtx",
    "gps", "anc", "cancelacion de ruido", "cancelación de ruido",
    "carga rapida", "carga rápida", "dual sim", "smart",
]

_WORD = re.compile(r"[\w\-+]+", re.U)


def _keyword_hits(text: str, keywords: Iterable[str]) -> list[str]:
    hits = []
    for kw in keywords:
        if re.search(r"(?<!\w)" + re.escape(kw) + r"(?!\w)", text):
            hits.append(kw)
    return hits


def extract_specs(title: str) -> list[str]:
    """Key specs found in a title, lowercased (``["128gb", "8gb ram", "5g"]``)."""
    text = (title or "").lower()
    specs = []

    for m in _STORAGE_PATTERN.finditer(text):
        specs.append(f"{m.group(1)}{m.group(2).lower()}")
    for m in _RAM_PATTERN.finditer(text):
        specs.append(f"{m.group(1) or m.group(2)}gb ram")

    screen = _SCREEN_PATTERN.search(text)
    if screen:
        specs.append(f"{screen.group(1).replace(',', '.')} pulgadas")
    liters = _LITERS_PATTERN.search(text)
    if liters:
        specs.append(f"{liters.group(1)} litros")
    kg = _KG_PATTERN.search(text)
    if kg:
        specs.append(f"{kg.group(1).replace(',', '.')} kg")
    frigorias = _FRIGORIAS_PATTERN.search(text)
    if frigorias:
        specs.append(f"{frigorias.group(1).replace('.', '')} frigorias")
    watts = _WATTS_PATTERN.search(text)
    if watts:
        specs.append(f"{watts.group(1)}w")
    mah = _MAH_PATTERN.search(text)
    if mah:
        specs.append(f"{mah.group(1)}mah")

    specs.extend(_keyword_hits(text, _FEATURE_KEYWORDS))

    # drop duplicates, keep first occurrence
    return list(dict.fromkeys(specs))


def detect_brand(title: str, known_brands: Iterable[str]) -> Optional[str]:
    """First known brand appearing in the title, by position."""
    text = (title or "").lower()
    best = None
    best_pos = len(text) + 1
    for brand in known_brands:
        m = re.search(r"(?<!\w)" + re.escape(brand) + r"(?!\w)", text)
        if m and m.start() < best_pos:
            best, best_pos = brand, m.start()
    return best


def display_brand(brand: str) -> str:
    # Short names are acronyms: LG, HP, TCL
    return brand.upper() if len(brand) <= 3 else brand.title()


def _model_from_title(title: str, brand: Optional[str], specs: list[str]) -> str:
    words = _WORD.findall(title or "")
    skip = {s.split()[0] for s in specs}
    if brand:
        skip.add(brand)
    model = [w for w in words if w.lower() not in skip]
    return " ".join(model[:4])


def structure_product(
    listing: ProductListing, known_brands: Iterable[str]
) -> StructuredProduct:
    title = " ".join((listing.title or "").split())
    specs = extract_specs(title)
    brand = (listing.brand or "").strip().lower() or detect_brand(title, known_brands)
    return StructuredProduct(
        product_id=listing.product_id,
        clean_title=title,
        brand=display_brand(brand) if brand else "Genérico",
        model=_model_from_title(title, brand, specs) or title,
        specs=specs,
    )


def structure_products(
    listings: list[ProductListing], profiles: Optional[ProfileStore] = None
) -> list[StructuredProduct]:
    """Structure every listing using the brands known to the profiles."""
    store = profiles or default_store()
    known_brands = store.known_brands()
    return [structure_product(listing, known_brands) for listing in listings]

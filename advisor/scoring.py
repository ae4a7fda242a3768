"""Rule-based scoring and ranking of shopping results.

Every listing is scored on eight factors. Each factor is a function returning
``(delta, pros, cons)``; the delta is multiplied by the profile weight for
that factor and the weighted deltas are summed into the listing score. The
pros and cons collected along the way explain the score.

Listings are then sorted by score (ties keep their input order), the top six
are returned and the first one is recommended.
"""
import logging
import re
from datetime import date
from typing import Callable, Optional

from . import config
from .category import detect_category
from .features import display_brand
from .models import (
    AnalysisResult,
    CategoryProfile,
    ProductAnalysis,
    ProductListing,
    ScoredProduct,
    StructuredProduct,
)
from .pricing import parse_price, parse_rating, parse_review_count
from .profiles import DEFAULT_CATEGORY, ProfileStore, default_store

logger = logging.getLogger(__name__)

EMPTY_RESULT_MESSAGE = "No se encontraron productos para analizar."
MAX_NOTES = 3

FactorResult = tuple[float, list[str], list[str]]

# ─── Points ───

RELEVANCE_PER_TOKEN = 10

RATING_TIERS = [(4.5, 30), (4.0, 20), (3.5, 10)]
LOW_RATING_PENALTY = -10
NO_RATING_PENALTY = -20

REVIEW_TIERS = [(1000, 20), (100, 10), (10, 5)]
FEW_REVIEWS_PENALTY = -10

PRICE_COMPETITIVE = 15
PRICE_REASONABLE = 5
PRICE_ELEVATED = -5
PRICE_TOO_HIGH = -15
NO_PRICE_PENALTY = -10

CURRENT_YEAR_BONUS = 10
PREVIOUS_YEAR_BONUS = 5

BIG_DISCOUNT_BONUS = 15
DISCOUNT_BONUS = 8

MISSING_REVIEWS_PENALTY = 10
MISSING_PRICE_PENALTY = 5


def _add_note(notes: list[str], note: str) -> None:
    if note not in notes and len(notes) < MAX_NOTES:
        notes.append(note)


# ─── Factors ───


def relevance_factor(product: ScoredProduct, tokens: list[str]) -> FactorResult:
    hits = [t for t in tokens if t in product.title]
    delta = RELEVANCE_PER_TOKEN * len(hits)
    pros = []
    if tokens and len(hits) == len(tokens):
        pros.append("Título relevante")
    return delta, pros, []


def quality_factor(product: ScoredProduct) -> FactorResult:
    delta = 0
    pros, cons = [], []
    rating = product.rating
    reviews = product.review_count

    if rating > 0:
        for threshold, points in RATING_TIERS:
            if rating >= threshold:
                delta += points
                break
        else:
            delta += LOW_RATING_PENALTY
            cons.append(f"Valoración baja ({rating:g}⭐)")
        if rating >= 4.0:
            pros.append(f"Valoración ({rating:g}⭐)")
    else:
        delta += NO_RATING_PENALTY
        cons.append("Sin valoración")

    for threshold, points in REVIEW_TIERS:
        if reviews > threshold:
            delta += points
            break
    if reviews > 1000 and not pros:
        pros.append(f"Muy popular ({reviews} reseñas)")
    if rating > 0 and reviews < 10:
        delta += FEW_REVIEWS_PENALTY
        cons.append("Pocas reseñas")

    return delta, pros, cons


def price_factor(product: ScoredProduct, average_price: float) -> FactorResult:
    price = product.numeric_price
    if price <= 0:
        return NO_PRICE_PENALTY, [], ["Precio no disponible"]
    if average_price <= 0:
        return 0, [], []

    ratio = price / average_price
    if ratio <= 0.8:
        return PRICE_COMPETITIVE, ["Precio competitivo"], []
    if ratio <= 1.05:
        return PRICE_REASONABLE, ["Precio razonable"], []
    if ratio <= 1.3:
        return PRICE_ELEVATED, [], ["Precio algo elevado"]
    return PRICE_TOO_HIGH, [], ["Precio demasiado alto"]


def brand_factor(product: ScoredProduct, profile: CategoryProfile) -> FactorResult:
    if not product.brand:
        return 0, [], []
    points = profile.brands.get(product.brand, 0)
    if points > 0:
        return points, [f"Marca: {display_brand(product.brand)}"], []
    if points < 0:
        return points, [], [f"Marca poco valorada: {display_brand(product.brand)}"]
    return 0, [], []


def recency_factor(product: ScoredProduct, current_year: int) -> FactorResult:
    if str(current_year) in product.title:
        return CURRENT_YEAR_BONUS, [f"Modelo reciente ({current_year})"], []
    if str(current_year - 1) in product.title:
        return PREVIOUS_YEAR_BONUS, [f"Modelo reciente ({current_year - 1})"], []
    return 0, [], []


def discount_factor(product: ScoredProduct) -> FactorResult:
    original = product.extracted_numeric_price
    price = product.numeric_price
    if original <= 0 or price <= 0 or original <= price:
        return 0, [], []

    discount = (original - price) * 100 / original
    if discount >= 25:
        return BIG_DISCOUNT_BONUS, [f"¡Buena oferta! ({round(discount)}% off)"], []
    if discount >= 15:
        return DISCOUNT_BONUS, [f"Oferta ({round(discount)}% off)"], []
    return 0, [], []


def completeness_factor(product: ScoredProduct) -> FactorResult:
    penalty = 0
    if product.rating <= 0 and product.review_count <= 0:
        penalty += MISSING_REVIEWS_PENALTY
    if product.numeric_price <= 0:
        penalty += MISSING_PRICE_PENALTY
    if penalty:
        return -penalty, [], ["Datos incompletos"]
    return 0, [], []


def _contains_word(text: str, keyword: str) -> bool:
    return re.search(r"(?<!\w)" + re.escape(keyword) + r"(?!\w)", text) is not None


def keyword_factor(product: ScoredProduct, profile: CategoryProfile) -> FactorResult:
    text = " ".join([product.title] + product.specs)
    delta = 0
    pros, cons = [], []
    for keyword, points in profile.positive_keywords.items():
        if _contains_word(text, keyword):
            delta += points
            pros.append(f"Destaca: {keyword}")
    for keyword, points in profile.negative_keywords.items():
        if _contains_word(text, keyword):
            delta += points
            cons.append(f"Atención: {keyword}")
    return delta, pros, cons


# ─── Scoring ───


def _query_tokens(query: str) -> list[str]:
    return [t for t in re.findall(r"\w+", query.lower()) if len(t) > 2]


def _prepare(
    listing: ProductListing, structured: Optional[StructuredProduct]
) -> ScoredProduct:
    brand = (listing.brand or "").strip().lower()
    specs = []
    if structured is not None:
        specs = [s.lower() for s in structured.specs]
        if not brand and structured.brand.lower() not in ("", "genérico", "generico"):
            brand = structured.brand.lower()
    return ScoredProduct(
        listing=listing,
        numeric_price=parse_price(listing.price),
        extracted_numeric_price=parse_price(listing.original_price),
        rating=parse_rating(listing.rating),
        review_count=parse_review_count(listing.reviews),
        title=(listing.title or "").lower(),
        brand=brand,
        specs=specs,
    )


def score_product(
    product: ScoredProduct,
    profile: CategoryProfile,
    tokens: list[str],
    average_price: float,
    current_year: int,
) -> ScoredProduct:
    """Fill in score, pros and cons of a prepared product."""
    steps: list[tuple[str, Callable[[], FactorResult]]] = [
        ("relevance", lambda: relevance_factor(product, tokens)),
        ("quality", lambda: quality_factor(product)),
        ("price", lambda: price_factor(product, average_price)),
        ("brand", lambda: brand_factor(product, profile)),
        ("recency", lambda: recency_factor(product, current_year)),
        ("discount", lambda: discount_factor(product)),
        ("completeness", lambda: completeness_factor(product)),
        ("keyword", lambda: keyword_factor(product, profile)),
    ]

    score = 0.0
    pros: list[str] = []
    cons: list[str] = []
    for name, step in steps:
        delta, step_pros, step_cons = step()
        score += delta * profile.weight(name)
        for note in step_pros:
            _add_note(pros, note)
        for note in step_cons:
            _add_note(cons, note)

    product.score = score
    product.pros = pros
    product.cons = cons
    return product


def rank_products(
    query: str,
    listings: list[ProductListing],
    profile: CategoryProfile,
    structured: Optional[list[StructuredProduct]] = None,
    today: Optional[date] = None,
) -> list[ScoredProduct]:
    """Score every listing and sort by score, highest first."""
    by_id = {s.product_id: s for s in (structured or [])}

    seen = set()
    products = []
    for listing in listings:
        if not listing.product_id:
            logger.warning("Skipping listing without product id: %r", listing.title)
            continue
        if listing.product_id in seen:
            continue
        seen.add(listing.product_id)
        products.append(_prepare(listing, by_id.get(listing.product_id)))

    prices = [p.numeric_price for p in products if p.numeric_price > 0]
    average_price = sum(prices) / len(prices) if prices else 0.0
    tokens = _query_tokens(query)
    current_year = (today or date.today()).year

    for product in products:
        score_product(product, profile, tokens, average_price, current_year)

    return sorted(products, key=lambda p: p.score, reverse=True)


def build_recommendation(query: str, best: ScoredProduct) -> str:
    reason = best.pros[0].lower() if best.pros else "su puntuación general"
    text = (
        f"Considerando '{query}', te recomiendo '{best.listing.title}' "
        f"principalmente por {reason}."
    )
    if best.cons:
        text += f" Ten en cuenta: {best.cons[0].lower()}."
    return text


def analyze_shopping_results(
    query: str,
    listings: list[ProductListing],
    structured: Optional[list[StructuredProduct]] = None,
    category: Optional[str] = None,
    profiles: Optional[ProfileStore] = None,
    today: Optional[date] = None,
) -> AnalysisResult:
    """
    Rank shopping results with the local rule engine.

    Args:
        query: the user's search
        listings: results from the search provider, possibly empty
        structured: cleaned variants of the listings, matched by product id
        category: profile key; empty or ``default`` detects it from the query
        profiles: profile store, the configured one when omitted
        today: date used for the recency factor

    Returns:
        AnalysisResult with at most ``TOP_N`` products, the first one
        recommended
    """
    if not listings:
        return AnalysisResult(productos_analisis=[], recomendacion_final=EMPTY_RESULT_MESSAGE)

    if not category or category == DEFAULT_CATEGORY:
        category = detect_category(query)

    try:
        store = profiles or default_store()
        profile = store.get_profile(category)
        ranked = rank_products(query, listings, profile, structured, today)
        if not ranked:
            return AnalysisResult(
                productos_analisis=[], recomendacion_final=EMPTY_RESULT_MESSAGE
            )
        top = ranked[: config.TOP_N]

        productos_analisis = [
            ProductAnalysis(
                product_id=p.product_id,
                pros=list(p.pros),
                contras=list(p.cons),
                is_recommended=index == 0,
            )
            for index, p in enumerate(top)
        ]
        recomendacion_final = build_recommendation(query, top[0])
    except Exception:
        logger.exception(
            "Local analysis failed (query=%r, category=%r, listings=%d)",
            query,
            category,
            len(listings),
        )
        raise

    logger.info(
        "Analyzed %d listings for %r with profile %r", len(listings), query, profile.key
    )
    return AnalysisResult(
        productos_analisis=productos_analisis,
        recomendacion_final=recomendacion_final,
    )

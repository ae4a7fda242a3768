"""Search flow: fetch, structure, analyze, fuse and store."""
import logging
from dataclasses import replace
from typing import Callable, Optional

from . import convex_client
from .ai_analyzer import analyze_with_ai
from .errors import NoResultsError
from .features import structure_products
from .fusion import fuse_analysis
from .models import SearchRequest, SearchResults
from .profiles import ProfileStore, default_store
from .scoring import analyze_shopping_results

logger = logging.getLogger(__name__)

SearchProvider = Callable[[SearchRequest], SearchResults]
Saver = Callable[[str, str, dict], tuple]


def build_search_query(request: SearchRequest) -> str:
    """Query text with the brand preference and feature keyword appended."""
    query = request.query.strip()
    brand = (request.brand_preference or "").strip()
    if brand and brand.lower() != "ninguna":
        query += f" {brand}"
    feature = (request.feature_keyword or "").strip()
    if feature:
        query += f" {feature}"
    return query


def perform_search(
    request: SearchRequest,
    search_provider: SearchProvider,
    profiles: Optional[ProfileStore] = None,
    saver: Optional[Saver] = None,
    use_ai: bool = False,
) -> dict:
    """
    Run a full search for a user.

    Args:
        request: query, user and filters
        search_provider: returns the shopping results for a request
        profiles: category profiles, the configured ones when omitted
        saver: persists the fused result, Convex when omitted
        use_ai: ask the LLM instead of the local rule engine

    Returns:
        dict with recomendacion_final, productos, total_results, id, createdAt

    Raises:
        ValueError: empty query
        NoResultsError: the provider found nothing
    """
    if not request.query or not request.query.strip():
        raise ValueError("La consulta no puede estar vacía.")

    store = profiles or default_store()
    save = saver or convex_client.save_search
    query = build_search_query(request)

    results = search_provider(replace(request, query=query))
    listings = results.products if results else []
    if not listings:
        raise NoResultsError(f"No se encontraron productos para {query!r}.")

    logger.info("Analyzing %d products for %r", len(listings), query)
    if use_ai:
        analysis = analyze_with_ai(
            query, listings, category=request.category, profiles=store
        )
    else:
        structured = structure_products(listings, store)
        analysis = analyze_shopping_results(
            query, listings, structured, category=request.category, profiles=store
        )

    recommendation = {
        "recomendacion_final": analysis.recomendacion_final,
        "productos": fuse_analysis(listings, analysis),
        "total_results": results.total_results or len(listings),
    }

    search_id, created_at = save(query, request.user_id, recommendation)
    return {**recommendation, "id": search_id, "createdAt": created_at}

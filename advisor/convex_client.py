"""Convex DB storage of analyzed searches and search history."""
import logging
from datetime import datetime, timezone
from typing import Optional

from .config import CONVEX_URL

logger = logging.getLogger(__name__)


def _get_client():
    from convex import ConvexClient

    if not CONVEX_URL:
        raise ValueError("CONVEX_URL must be set in .env to store searches.")
    return ConvexClient(CONVEX_URL)


def save_search(
    query: str, user_id: str, recommendation: dict, client=None
) -> tuple[str, datetime]:
    """
    Store a search and its fused products.

    Args:
        query: the query that was searched
        user_id: owner of the search
        recommendation: dict with recomendacion_final, productos and total_results

    Returns:
        (search id, creation time)
    """
    client = client or _get_client()
    created_at = datetime.now(timezone.utc)
    productos = recommendation.get("productos") or []

    try:
        # 1) search document
        search_id = client.mutation("searches:create", {
            "userId": user_id,
            "query": query,
            "createdAt": created_at.timestamp() * 1000,
            "recomendacionFinal": recommendation.get("recomendacion_final", ""),
            "totalResults": int(recommendation.get("total_results") or 0),
        })

        # 2) products of the search
        for rank, product in enumerate(productos, start=1):
            client.mutation("searchProducts:insert", {
                "searchId": search_id,
                "productId": str(product.get("product_id", "")),
                "rank": rank,
                "product": product,
            })
    except Exception:
        logger.exception("Failed to save search %r for user %s", query, user_id)
        raise

    logger.info("Search saved with id %s (%d products)", search_id, len(productos))
    return search_id, created_at


def get_search_products(search_id: str, client=None) -> list[dict]:
    """Products of a stored search, in rank order."""
    client = client or _get_client()
    rows = client.query("searchProducts:getBySearch", {"searchId": search_id}) or []
    rows = sorted(rows, key=lambda r: r.get("rank", 0))
    return [r.get("product", {}) for r in rows]


def get_user_history(user_id: str, limit: int = 20, client=None) -> list[dict]:
    """A user's searches, newest first, each with its stored products."""
    client = client or _get_client()
    searches = client.query("searches:getByUser", {"userId": user_id, "limit": limit}) or []
    searches = sorted(searches, key=lambda s: s.get("createdAt", 0), reverse=True)

    history = []
    for search in searches:
        search_id = search.get("_id")
        history.append({
            "id": search_id,
            "query": search.get("query", ""),
            "createdAt": _to_datetime(search.get("createdAt")),
            "result": {
                "productos": get_search_products(search_id, client=client),
                "recomendacion_final": search.get("recomendacionFinal")
                or "No hay recomendación disponible",
                "total_results": search.get("totalResults", 0),
            },
        })
    return history


def _to_datetime(millis: Optional[float]) -> Optional[datetime]:
    if millis is None:
        return None
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)

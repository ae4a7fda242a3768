import logging
from typing import Union

from .models import AnalysisResult, ProductListing

logger = logging.getLogger(__name__)


def fuse_analysis(
    listings: list[ProductListing], analysis: Union[AnalysisResult, dict]
) -> list[dict]:
    """
    Attach pros, contras and isRecommended to the original listing records.

    The result follows the analysis order. Analysis items whose product id is
    not among the listings are skipped with a warning.
    """
    if isinstance(analysis, AnalysisResult):
        analysis = analysis.to_dict()

    by_id = {}
    for listing in listings:
        if listing.product_id and listing.product_id not in by_id:
            by_id[listing.product_id] = listing

    fused = []
    for item in analysis.get("productos_analisis") or []:
        product_id = str(item.get("product_id") or "")
        listing = by_id.get(product_id)
        if listing is None:
            logger.warning("Analyzed product not found among listings: %s", product_id)
            continue
        record = listing.to_dict()
        record["pros"] = list(item.get("pros") or [])
        record["contras"] = list(item.get("contras") or [])
        record["isRecommended"] = bool(item.get("isRecommended", False))
        fused.append(record)
    return fused

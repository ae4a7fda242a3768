"""Rank shopping results saved in a JSON file and print the recommendation."""
import argparse
import json
import logging
import sys

from .config import setup_logging
from .errors import AdvisorError
from .models import ProductListing, SearchRequest, SearchResults
from .orchestrator import perform_search
from .profiles import default_store

logger = logging.getLogger(__name__)


def load_listings(path: str) -> list[ProductListing]:
    """Listings from a JSON list or from a SerpApi response with ``shopping_results``."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("shopping_results") or data.get("products") or []
    return [ProductListing.from_dict(item) for item in data if isinstance(item, dict)]


def _skip_save(query, user_id, recommendation):
    return None, None


def main(argv=None) -> int:
    store = default_store()

    ap = argparse.ArgumentParser(description="Rank shopping results stored in a JSON file.")
    ap.add_argument("listings", help="JSON file with a list of results or a SerpApi shopping response")
    ap.add_argument("--query", required=True, help="The user's search")
    ap.add_argument("--category", choices=store.categories(), default=None,
                    help="Scoring profile (default: detected from the query)")
    ap.add_argument("--ai", action="store_true", help="Ask Claude instead of the local rule engine")
    ap.add_argument("--save", action="store_true", help="Store the result in Convex")
    ap.add_argument("--user-id", default="cli", help="Owner of the stored search (default: cli)")
    args = ap.parse_args(argv)

    setup_logging()

    try:
        listings = load_listings(args.listings)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("Could not read listings from %s: %s", args.listings, e)
        return 1

    request = SearchRequest(
        query=args.query,
        user_id=args.user_id,
        category=args.category or "default",
    )
    try:
        outcome = perform_search(
            request,
            lambda r: SearchResults(products=listings, total_results=len(listings)),
            profiles=store,
            saver=None if args.save else _skip_save,
            use_ai=args.ai,
        )
    except (AdvisorError, ValueError) as e:
        logger.error("%s", e)
        return 1

    created_at = outcome.get("createdAt")
    outcome["createdAt"] = created_at.isoformat() if created_at else None
    print(json.dumps(outcome, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""
Unit tests for Convex persistence, using a mocked client.
"""
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from advisor import convex_client


def _recommendation():
    return {
        "recomendacion_final": "Te recomiendo A",
        "productos": [
            {"product_id": "a", "title": "A", "pros": ["x"], "contras": [], "isRecommended": True},
            {"product_id": "b", "title": "B", "pros": [], "contras": [], "isRecommended": False},
        ],
        "total_results": 40,
    }


def test_save_search():
    client = MagicMock()
    client.mutation.side_effect = ["search-1", "p1", "p2"]

    search_id, created_at = convex_client.save_search("celular", "user-1", _recommendation(), client=client)

    assert search_id == "search-1"
    assert isinstance(created_at, datetime)

    name, args = client.mutation.call_args_list[0].args
    assert name == "searches:create"
    assert args["userId"] == "user-1"
    assert args["query"] == "celular"
    assert args["totalResults"] == 40
    assert args["recomendacionFinal"] == "Te recomiendo A"

    product_calls = client.mutation.call_args_list[1:]
    assert [c.args[0] for c in product_calls] == ["searchProducts:insert"] * 2
    assert [c.args[1]["rank"] for c in product_calls] == [1, 2]
    assert product_calls[0].args[1]["searchId"] == "search-1"
    assert product_calls[0].args[1]["productId"] == "a"


def test_save_search_propagates_errors():
    client = MagicMock()
    client.mutation.side_effect = RuntimeError("convex down")

    with pytest.raises(RuntimeError):
        convex_client.save_search("celular", "user-1", _recommendation(), client=client)


def test_get_user_history():
    client = MagicMock()
    older = {"_id": "s1", "query": "heladera", "createdAt": 1_000_000.0,
             "recomendacionFinal": "", "totalResults": 3}
    newer = {"_id": "s2", "query": "celular", "createdAt": 2_000_000.0,
             "recomendacionFinal": "Te recomiendo A", "totalResults": 40}

    def query(name, args):
        if name == "searches:getByUser":
            return [older, newer]
        if args["searchId"] == "s2":
            return [{"rank": 2, "product": {"product_id": "b"}},
                    {"rank": 1, "product": {"product_id": "a"}}]
        return []

    client.query.side_effect = query

    history = convex_client.get_user_history("user-1", client=client)

    assert [h["id"] for h in history] == ["s2", "s1"]
    assert history[0]["createdAt"] == datetime.fromtimestamp(2000, tz=timezone.utc)
    assert [p["product_id"] for p in history[0]["result"]["productos"]] == ["a", "b"]
    assert history[0]["result"]["total_results"] == 40
    assert history[1]["result"]["recomendacion_final"] == "No hay recomendación disponible"


def test_missing_url(monkeypatch):
    monkeypatch.setattr(convex_client, "CONVEX_URL", "")
    with pytest.raises(ValueError):
        convex_client._get_client()

"""
Unit tests for the command line entry point.
"""
import json

import pytest

from advisor import cli


@pytest.fixture
def results_file(tmp_path, scenario_a_listings):
    path = tmp_path / "results.json"
    payload = {"shopping_results": [p.to_dict() for p in scenario_a_listings]}
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def phone_profiles(monkeypatch, phone_store):
    monkeypatch.setattr(cli, "default_store", lambda: phone_store)


class TestMain:
    """Ranking a saved results file."""

    def test_prints_recommendation(self, results_file, capsys):
        code = cli.main([str(results_file), "--query", "celular samsung"])
        out = json.loads(capsys.readouterr().out)

        assert code == 0
        assert out["productos"][0]["product_id"] == "1"
        assert out["productos"][0]["isRecommended"] is True
        assert out["productos"][0]["link"] == "https://example.com/1"
        assert out["recomendacion_final"].startswith("Considerando 'celular samsung'")
        assert out["id"] is None

    def test_category_must_be_a_known_profile(self, results_file):
        with pytest.raises(SystemExit):
            cli.main([str(results_file), "--query", "x", "--category", "bicicleta"])

    def test_missing_file(self, tmp_path, capsys):
        code = cli.main([str(tmp_path / "nope.json"), "--query", "celular"])
        assert code == 1
        assert capsys.readouterr().out == ""

    def test_empty_results(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("[]", encoding="utf-8")
        assert cli.main([str(path), "--query", "celular"]) == 1


def test_load_listings_accepts_plain_list(tmp_path):
    path = tmp_path / "list.json"
    path.write_text(json.dumps([{"product_id": "a", "title": "A"}, "ruido"]), encoding="utf-8")

    listings = cli.load_listings(str(path))
    assert [p.product_id for p in listings] == ["a"]

import json

import pytest

from meritwise.catalog import ProgramCatalog, UnknownProgramError


def test_get_and_unknown(catalog):
    assert catalog.get("se-h12").name == "Software Engineering"
    with pytest.raises(UnknownProgramError):
        catalog.get("nope")
    assert len(catalog) == 4


def test_fuzzy_find(catalog):
    assert catalog.find("software engg").id == "se-h12"
    assert catalog.find("Mechanical").id == "me-h12"
    assert catalog.find("qqqqqqqq") is None
    assert ProgramCatalog().find("anything") is None


def test_latest_closing_takes_final_round_of_latest_year(catalog):
    assert catalog.latest_closing("se-h12") == 74.0
    assert catalog.latest_closing("me-h12") == 74.0
    assert catalog.latest_closing("ee-rwp") is None
    assert catalog.latest_closing("bba-h12") is None


def test_average_closing(catalog):
    assert catalog.average_closing("se-h12") == pytest.approx((74.0 + 78.5) / 2)
    assert catalog.average_closing("me-h12") == pytest.approx(72.0)
    assert catalog.average_closing("me-h12", years=1) == pytest.approx(74.0)
    assert catalog.average_closing("bba-h12") is None


def test_thresholds(catalog):
    rows = catalog.thresholds("se-h12")
    assert [(t.round_number, t.closing_aggregate) for t in rows] == [(1, 80.0), (2, 77.0), (3, 74.0)]
    assert [t.round_number for t in catalog.thresholds("se-h12", year=2023)] == [1, 3]
    assert catalog.thresholds("me-h12") == []
    assert catalog.thresholds("bba-h12") == []


def test_options(catalog):
    opts = catalog.options(["se-h12", "bba-h12"])
    assert [o.id for o in opts] == ["se-h12", "bba-h12"]
    assert opts[0].last_year_closing_aggregate == 74.0
    assert opts[0].discipline_group == "Computing"
    assert opts[1].last_year_closing_aggregate is None
    assert len(catalog.options()) == 4


def test_load_json_with_camel_case_keys(tmp_path):
    doc = {
        "programs": [{"id": "p1", "name": "Physics", "code": "PHY", "campus": "H-12", "school": "SNS",
                      "disciplineGroup": "Sciences", "seats": 40}],
        "meritHistory": [{"programId": "p1", "year": 2024, "meritListNumber": 1,
                          "closingMeritPosition": 3000, "closingAggregate": 68.2, "sourceName": "sample"}],
    }
    path = tmp_path / "sample.json"
    path.write_text(json.dumps(doc), encoding="utf-8")
    cat = ProgramCatalog.load_json(path)
    assert cat.get("p1").discipline_group == "Sciences"
    assert cat.thresholds("p1")[0].closing_position == 3000
    assert cat.latest_closing("p1") == 68.2

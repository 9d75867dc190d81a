import pytest
from pydantic import ValidationError

from meritwise.models.merit_list import LinearDecayLadder
from meritwise.models.preference import (
    EMPTY_MESSAGE, campus_score, combined_score, export_preference_list_as_text, generate_preference_list,
    interest_score, merit_list_score, risk_category,
)
from meritwise.schemas import UserInterests


def test_empty_candidates():
    result = generate_preference_list(80, [], UserInterests())
    assert result.ranked_list == []
    assert result.summary.total_programs == 0
    assert result.recommendations == ["Please select some programs to generate a preference list."]
    assert result.recommendations == [EMPTY_MESSAGE]


def test_sub_scores(interests):
    assert interest_score("Computing", interests) == 100
    assert interest_score("Business", interests) == 20
    assert interest_score("Medicine", interests) == 60
    assert campus_score("H-12", interests.preferred_campuses) == 100
    assert campus_score("Rawalpindi", interests.preferred_campuses) == 85
    assert campus_score("Quetta", interests.preferred_campuses) == 50
    assert campus_score("Z", [str(i) for i in range(10)] + ["Z"]) == 10
    assert merit_list_score(1) == 100
    assert merit_list_score(3) == 76
    assert merit_list_score(9) == 10
    assert merit_list_score(None) == 20
    assert combined_score(100, 100, 100, 100) == pytest.approx(100)


@pytest.mark.parametrize("rating", [-1, 6, 9])
def test_interest_rating_out_of_range_rejected(rating):
    with pytest.raises(ValidationError):
        UserInterests(discipline_scores={"Computing": rating})


@pytest.mark.parametrize("rating,expected", [(0, 60), (1, 20), (5, 100)])
def test_interest_score_stays_in_range(rating, expected):
    score = interest_score("Computing", UserInterests(discipline_scores={"Computing": rating}))
    assert score == expected
    assert 0 <= score <= 100


@pytest.mark.parametrize("chance,expected", [(100, "Safe"), (70, "Safe"), (69, "Moderate"),
                                             (40, "Moderate"), (39, "Ambitious"), (0, "Ambitious")])
def test_risk_category(chance, expected):
    assert risk_category(chance) == expected


def test_ranked_descending_with_ranks(make_option, interests):
    options = [
        make_option("a", 84.0),
        make_option("b", 74.0, group="Computing"),
        make_option("c", 78.5, campus="Rawalpindi"),
        make_option("d", None, group="Business"),
    ]
    result = generate_preference_list(78.0, options, interests)
    scores = [x.combined_score for x in result.ranked_list]
    assert scores == sorted(scores, reverse=True)
    assert [x.rank for x in result.ranked_list] == [1, 2, 3, 4]
    assert result.ranked_list[0].program.id == "b"
    s = result.summary
    assert s.safe_count + s.moderate_count + s.ambitious_count == s.total_programs == 4


def test_item_fields(make_option, interests):
    item = generate_preference_list(78.0, [make_option("b", 74.0, group="Computing")], interests).ranked_list[0]
    # diff +4 -> 86% chance; ladder from 74 clears round 1 with margin 4
    assert item.chance_percentage == 86
    assert item.risk_category == "Safe"
    assert item.predicted_round == 1
    assert item.interest_score == 100
    assert item.combined_score == pytest.approx(86 * 0.4 + 100 * 0.35 + 100 * 0.15 + 100 * 0.10)
    assert item.reasoning == "86% admission chance • likely 1st merit list • high interest match • good backup option"


def test_ties_keep_input_order(make_option):
    options = [make_option(pid, 75.0) for pid in ("x", "y", "z")]
    result = generate_preference_list(75.0, options, UserInterests())
    assert [x.program.id for x in result.ranked_list] == ["x", "y", "z"]


def test_missing_closing_uses_neutral_chance(make_option):
    item = generate_preference_list(76.0, [make_option("n", None)]).ranked_list[0]
    assert item.chance_percentage == 50
    assert item.risk_category == "Moderate"
    # no closing -> empty thresholds -> bucket estimate (>=75 -> round 2)
    assert item.predicted_round == 2


def test_grouping_and_average(make_option):
    options = [make_option("safe", 70.0), make_option("mod", 78.0), make_option("amb", 85.0)]
    result = generate_preference_list(78.0, options, UserInterests())
    assert [x.program.id for x in result.by_risk.safe] == ["safe"]
    assert [x.program.id for x in result.by_risk.moderate] == ["mod"]
    assert [x.program.id for x in result.by_risk.ambitious] == ["amb"]
    expected = sum(x.chance_percentage for x in result.ranked_list) / 3
    assert result.summary.average_chance == pytest.approx(expected)


def test_no_safe_options_warns(make_option):
    options = [make_option(str(i), 90.0) for i in range(6)]
    recs = generate_preference_list(70.0, options, UserInterests(risk_tolerance="Aggressive")).recommendations
    assert recs[0] == "Consider adding more safe options to your list for better security."
    assert any("no safe options" in r for r in recs)
    assert any("heavy on ambitious" in r for r in recs)
    assert not any("adding more program options" in r for r in recs)


def test_list_size_rules(make_option):
    few = generate_preference_list(90.0, [make_option("a", 70.0)], UserInterests()).recommendations
    assert few == ["Consider adding more program options to increase your chances of admission."]
    many = generate_preference_list(90.0, [make_option(str(i), 70.0) for i in range(16)]).recommendations
    assert many == ["You have many options selected. Focus on your top 10-12 preferences."]


def test_balanced_list_gets_default_message(make_option):
    options = [make_option(str(i), c) for i, c in enumerate([70, 70, 70, 77.5, 77.5, 84])]
    recs = generate_preference_list(78.0, options, UserInterests(risk_tolerance="Moderate")).recommendations
    assert recs == ["Your preference list has a good balance of safe, moderate, and ambitious choices."]


def test_custom_ladder_strategy(make_option):
    calls = []

    def ladder(base):
        calls.append(base)
        return LinearDecayLadder(step=0.5)(base)

    generate_preference_list(74.0, [make_option("a", 75.0)], UserInterests(), ladder=ladder)
    assert calls == [75.0]


def test_export_as_text(make_option, interests):
    result = generate_preference_list(78.0, [make_option("b", 74.0, group="Computing")], interests)
    text = export_preference_list_as_text(result)
    assert text.startswith("=== Preference List ===")
    assert "1. B" in text
    assert "Risk: Safe | Chance: 86%" in text
    assert "Expected Merit List: 1" in text
    assert "--- Recommendations ---" in text

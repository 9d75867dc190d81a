"""
Preference list generator.

Every candidate program is scored on admission chance, the student's interest
in its discipline, campus preference and how early it is likely to be offered,
then ranked. Risk buckets come from the chance alone.
"""
from __future__ import annotations
import logging
from typing import Callable, Iterable, List, Optional

from ..schemas import (
    ChancePrediction, ClosingThreshold, MeritListPrediction, PreferenceItem, PreferenceListResult,
    PreferenceSummary, ProgramOption, RiskCategory, RiskGroups, RiskTolerance, UserInterests,
)
from ..utils import ordinal
from .chance import predict_chance
from .merit_list import LinearDecayLadder, predict_merit_list

log = logging.getLogger(__name__)

Ladder = Callable[[float], List[ClosingThreshold]]

# kept apart from the chance bands on purpose; the numbers only happen to line up
RISK_THRESHOLDS = {"safe": 70, "moderate": 40}

SCORING_WEIGHTS = {
    "chance": 0.40,
    "interest": 0.35,
    "campus": 0.15,
    "merit_list": 0.10,
}

RECOMMENDED_MIX = {
    "Conservative": {"safe": 0.6, "moderate": 0.3, "ambitious": 0.1},
    "Moderate":     {"safe": 0.4, "moderate": 0.4, "ambitious": 0.2},
    "Aggressive":   {"safe": 0.2, "moderate": 0.4, "ambitious": 0.4},
}

NEUTRAL_INTEREST = 3
MAX_INTEREST = 5
UNLISTED_CAMPUS_SCORE = 50
CAMPUS_STEP, CAMPUS_FLOOR = 15, 10
ROUND_STEP, ROUND_FLOOR, NO_ROUND_SCORE = 12, 10, 20
MIN_PROGRAMS, MAX_PROGRAMS = 5, 15

EMPTY_MESSAGE = "Please select some programs to generate a preference list."

# -------------------------------------------------------
# Sub-scores (each 0..100)
# -------------------------------------------------------
def interest_score(discipline_group: str, interests: UserInterests) -> float:
    rating = interests.discipline_scores.get(discipline_group) or NEUTRAL_INTEREST
    return rating / MAX_INTEREST * 100

def campus_score(campus: str, preferred_campuses: List[str]) -> float:
    if campus not in preferred_campuses:
        return UNLISTED_CAMPUS_SCORE
    return max(CAMPUS_FLOOR, 100 - preferred_campuses.index(campus) * CAMPUS_STEP)

def merit_list_score(predicted_round: Optional[int]) -> float:
    if predicted_round is None:
        return NO_ROUND_SCORE
    return max(ROUND_FLOOR, 100 - (predicted_round - 1) * ROUND_STEP)

def combined_score(chance: float, interest: float, campus: float, merit_list: float) -> float:
    w = SCORING_WEIGHTS
    return (chance * w["chance"] + interest * w["interest"]
            + campus * w["campus"] + merit_list * w["merit_list"])

def risk_category(chance_percentage: float) -> RiskCategory:
    if chance_percentage >= RISK_THRESHOLDS["safe"]: return "Safe"
    if chance_percentage >= RISK_THRESHOLDS["moderate"]: return "Moderate"
    return "Ambitious"

# -------------------------------------------------------
# Text
# -------------------------------------------------------
def _reasoning(chance: ChancePrediction, merit: MeritListPrediction,
               interest: float, risk: RiskCategory) -> str:
    parts = [f"{chance.chance_percentage}% admission chance"]
    if merit.predicted_round:
        parts.append(f"likely {ordinal(merit.predicted_round)} merit list")
    if interest >= 80:
        parts.append("high interest match")
    elif interest <= 40:
        parts.append("lower interest match")
    if risk == "Safe":
        parts.append("good backup option")
    elif risk == "Ambitious":
        parts.append("reach/aspirational choice")
    return " • ".join(parts)

def _recommendations(summary: PreferenceSummary, tolerance: RiskTolerance) -> List[str]:
    mix = RECOMMENDED_MIX[tolerance]
    total = summary.total_programs
    safe_ratio = summary.safe_count / total
    ambitious_ratio = summary.ambitious_count / total

    recs = []
    if safe_ratio < mix["safe"] - 0.1:
        recs.append("Consider adding more safe options to your list for better security.")
    if summary.safe_count == 0:
        recs.append("Warning: you have no safe options. Strongly consider adding programs "
                    "with high admission chances.")
    if ambitious_ratio > mix["ambitious"] + 0.2:
        recs.append("Your list is heavy on ambitious choices. This is risky - ensure you have backups.")
    if total < MIN_PROGRAMS:
        recs.append("Consider adding more program options to increase your chances of admission.")
    if total > MAX_PROGRAMS:
        recs.append("You have many options selected. Focus on your top 10-12 preferences.")

    if not recs:
        recs.append("Your preference list has a good balance of safe, moderate, and ambitious choices.")
    return recs

# -------------------------------------------------------
# Generator
# -------------------------------------------------------
def _score_program(user_aggregate: float, program: ProgramOption,
                   interests: UserInterests, ladder: Ladder) -> PreferenceItem:
    closing = program.last_year_closing_aggregate
    chance = predict_chance(user_aggregate, closing, program.name)
    thresholds = ladder(closing) if closing is not None else []
    merit = predict_merit_list(user_aggregate, thresholds, program.name)

    interest = interest_score(program.discipline_group, interests)
    score = combined_score(
        chance.chance_percentage,
        interest,
        campus_score(program.campus, interests.preferred_campuses),
        merit_list_score(merit.predicted_round),
    )
    risk = risk_category(chance.chance_percentage)
    return PreferenceItem(
        program=program,
        risk_category=risk,
        chance_percentage=chance.chance_percentage,
        predicted_round=merit.predicted_round,
        interest_score=interest,
        combined_score=score,
        reasoning=_reasoning(chance, merit, interest, risk),
    )

def generate_preference_list(user_aggregate: float, programs: Iterable[ProgramOption],
                             interests: Optional[UserInterests] = None,
                             ladder: Optional[Ladder] = None) -> PreferenceListResult:
    programs = list(programs)
    if not programs:
        return PreferenceListResult(recommendations=[EMPTY_MESSAGE])

    interests = interests or UserInterests()
    ladder = ladder or LinearDecayLadder()

    scored = [_score_program(user_aggregate, p, interests, ladder) for p in programs]
    # sorted() is stable: ties keep input order
    scored = sorted(scored, key=lambda x: x.combined_score, reverse=True)
    ranked = [item.model_copy(update={"rank": i}) for i, item in enumerate(scored, start=1)]

    groups = RiskGroups(
        safe=[x for x in ranked if x.risk_category == "Safe"],
        moderate=[x for x in ranked if x.risk_category == "Moderate"],
        ambitious=[x for x in ranked if x.risk_category == "Ambitious"],
    )
    summary = PreferenceSummary(
        total_programs=len(ranked),
        safe_count=len(groups.safe),
        moderate_count=len(groups.moderate),
        ambitious_count=len(groups.ambitious),
        average_chance=sum(x.chance_percentage for x in ranked) / len(ranked),
    )
    log.debug("preference list: %d programs, %d safe", summary.total_programs, summary.safe_count)
    return PreferenceListResult(
        ranked_list=ranked,
        by_risk=groups,
        summary=summary,
        recommendations=_recommendations(summary, interests.risk_tolerance),
    )

def export_preference_list_as_text(result: PreferenceListResult) -> str:
    s = result.summary
    lines = [
        "=== Preference List ===",
        "",
        f"Total Programs: {s.total_programs}",
        f"Safe: {s.safe_count} | Moderate: {s.moderate_count} | Ambitious: {s.ambitious_count}",
        "",
        "--- Ranked List ---",
        "",
    ]
    for item in result.ranked_list:
        lines.append(f"{item.rank}. {item.program.name}")
        lines.append(f"   Campus: {item.program.campus}")
        lines.append(f"   Risk: {item.risk_category} | Chance: {item.chance_percentage}%")
        if item.predicted_round:
            lines.append(f"   Expected Merit List: {item.predicted_round}")
        lines.append("")
    lines.append("--- Recommendations ---")
    lines.extend(f"• {rec}" for rec in result.recommendations)
    return "\n".join(lines) + "\n"

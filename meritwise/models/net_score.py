"""
NET score recommender: the inverse of the aggregate formula.

Given a target aggregate and the student's fixed school components, solve for
the NET score. Scores are rounded up so a recommendation never falls short.
"""
from __future__ import annotations
import math
from typing import Any, Dict, List, Union

from ..aggregate import (
    EQUIVALENCE_WEIGHTS, LOCAL_WEIGHTS, MAX_NET_SCORE, forward_aggregate,
)
from ..schemas import (
    Achievability, EquivalenceCurriculum, LocalCurriculum, NetScoreRecommendation,
    NetScoreRequirement, NetScoreScenario,
)
from ..utils import clamp, round2
from .chance import chance_from_difference

CurriculumT = Union[LocalCurriculum, EquivalenceCurriculum]

# target aggregate = closing + margin
MARGINS = {"minimum": -1.0, "recommended": 1.0, "target": 3.0}

# upper NET score bound of each achievability band
ACHIEVABILITY_CUTOFFS = [
    (120, "Easy"),
    (150, "Moderate"),
    (175, "Challenging"),
]

SCENARIO_DESCRIPTIONS = {
    "High Chance": "Strong position for admission",
    "Medium Chance": "Competitive, good chance",
    "Low Chance": "Below cutoff, risky",
    "Very Low Chance": "Significantly below cutoff",
}

def _fixed_contribution(curriculum: CurriculumT) -> float:
    if isinstance(curriculum, EquivalenceCurriculum):
        return (curriculum.equivalence_percentage or 0.0) * EQUIVALENCE_WEIGHTS["equivalence"]
    return curriculum.hsc_percentage * LOCAL_WEIGHTS["hsc"] + curriculum.ssc_percentage * LOCAL_WEIGHTS["ssc"]

def _net_weight(curriculum: CurriculumT) -> float:
    if isinstance(curriculum, EquivalenceCurriculum):
        return EQUIVALENCE_WEIGHTS["net"]
    return LOCAL_WEIGHTS["net"]

def required_net_score(target_aggregate: float, curriculum: CurriculumT) -> NetScoreRequirement:
    net_pct = (target_aggregate - _fixed_contribution(curriculum)) / _net_weight(curriculum)
    raw_score = net_pct * MAX_NET_SCORE / 100
    return NetScoreRequirement(
        required_net_score=int(clamp(math.ceil(raw_score), 0, MAX_NET_SCORE)),
        required_net_percentage=round2(clamp(net_pct, 0, 100)),
        achievable=0 <= raw_score <= MAX_NET_SCORE,
    )

def net_for_target_aggregate(target_aggregate: float, curriculum: CurriculumT) -> int:
    return required_net_score(target_aggregate, curriculum).required_net_score

def _achievability(req: NetScoreRequirement) -> Achievability:
    # a clamped, unachievable requirement at the top means the target is out of reach
    if not req.achievable and req.required_net_score >= MAX_NET_SCORE:
        return "Not Achievable"
    for upper, label in ACHIEVABILITY_CUTOFFS:
        if req.required_net_score <= upper:
            return label
    return "Very Challenging"

def _scenarios(curriculum: CurriculumT, closing: float, recommended: int) -> List[NetScoreScenario]:
    points = sorted({
        max(80, recommended - 30),
        max(100, recommended - 15),
        recommended,
        min(MAX_NET_SCORE, recommended + 15),
        min(MAX_NET_SCORE, recommended + 30),
    })
    out = []
    for net in points:
        aggregate = forward_aggregate(net, curriculum)
        category, chance = chance_from_difference(aggregate - closing)
        out.append(NetScoreScenario(
            net_score=net,
            resulting_aggregate=round2(aggregate),
            chance_category=category,
            chance_percentage=chance,
            description=SCENARIO_DESCRIPTIONS[category],
        ))
    return out

def _school_summary(curriculum: CurriculumT) -> str:
    if isinstance(curriculum, EquivalenceCurriculum):
        return f"Equivalence: {curriculum.equivalence_percentage or 0.0:.1f}%"
    return f"HSC: {curriculum.hsc_percentage:.1f}%, SSC: {curriculum.ssc_percentage:.1f}%"

def _explanation(program_name: str, closing: float, reqs: Dict[str, NetScoreRequirement],
                 curriculum: CurriculumT, achievability: Achievability) -> str:
    lines = [
        f"To have a good chance at {program_name} (last year closing: {closing:.1f}%), "
        f"with your academic scores ({_school_summary(curriculum)}):",
        "",
        "NET score targets:",
        f"- Minimum chance: NET >= {reqs['minimum'].required_net_score}/{MAX_NET_SCORE}",
        f"- Good chance: NET >= {reqs['recommended'].required_net_score}/{MAX_NET_SCORE} (Recommended)",
        f"- High chance: NET >= {reqs['target'].required_net_score}/{MAX_NET_SCORE}",
        "",
    ]
    if achievability == "Not Achievable":
        lines.append(f"Note: The required NET score exceeds the maximum ({MAX_NET_SCORE}). "
                     "You may need to improve your academic scores or consider programs with lower cutoffs.")
    elif achievability == "Very Challenging":
        lines.append("Note: This target is very challenging. Consider also applying to programs "
                     "with lower cutoffs as backup options.")
    elif achievability in ("Easy", "Moderate"):
        lines.append("This target is achievable with dedicated preparation.")
    return "\n".join(lines).rstrip()

def recommend_net_score(closing_aggregate: float, curriculum: CurriculumT,
                        program_name: str = "this program") -> NetScoreRecommendation:
    reqs = {tier: required_net_score(closing_aggregate + margin, curriculum)
            for tier, margin in MARGINS.items()}
    achievability = _achievability(reqs["recommended"])
    return NetScoreRecommendation(
        minimum_net_score=reqs["minimum"].required_net_score,
        recommended_net_score=reqs["recommended"].required_net_score,
        target_net_score=reqs["target"].required_net_score,
        max_net_score=MAX_NET_SCORE,
        achievability=achievability,
        explanation=_explanation(program_name, closing_aggregate, reqs, curriculum, achievability),
        scenarios=_scenarios(curriculum, closing_aggregate, reqs["recommended"].required_net_score),
    )

def program_achievability(closing_aggregate: float, curriculum: CurriculumT) -> Dict[str, Any]:
    """Can the closing be reached at all, even with a perfect NET score?"""
    best = forward_aggregate(MAX_NET_SCORE, curriculum)
    gap = closing_aggregate - best
    return {
        "achievable": gap <= 0,
        "max_possible_aggregate": round2(best),
        "gap": round2(max(0.0, gap)),
    }

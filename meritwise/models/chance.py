"""
Rule-based admission chance.

The gap between the student's aggregate and a reference closing aggregate is
mapped onto five contiguous bands. Inside a band the chance is linearly
interpolated; the two outer bands extrapolate with a fixed slope and clamp.
"""
from __future__ import annotations
import logging
from typing import List, Optional, Tuple

import numpy as np

from ..schemas import ChanceCategory, ChanceMetadata, ChancePrediction
from ..utils import clamp, round_half_up

log = logging.getLogger(__name__)

# lower edge of each band, in aggregate points relative to the closing
CHANCE_THRESHOLDS = {
    "high_above": 2.0,
    "medium_high_above": 0.0,
    "medium_below": -1.0,
    "low_below": -3.0,
}

CHANCE_RANGES = {
    "high": (80, 95),
    "medium_high": (60, 79),
    "medium": (40, 59),
    "low": (15, 39),
    "very_low": (5, 14),
}

HIGH_SLOPE = 3.0      # points of chance per aggregate point above +2
VERY_LOW_SLOPE = 2.0  # points of chance per aggregate point below -3

LOW_AGGREGATE = 60

NO_DATA_TIPS = [
    "Check official announcements for previous year closing merits",
    "Consider this program as a moderate-risk option in your preferences",
    "Keep improving your NET score to increase your chances",
]

CATEGORY_TIPS = {
    "High Chance": [
        "Keep this program high in your preference list",
        "You may also qualify for more competitive programs",
        "Stay prepared for document verification",
    ],
    "Medium Chance": [
        "Include this program in your middle preferences",
        "Have backup options with lower cutoffs",
        "Monitor merit list releases carefully",
    ],
    "Low Chance": [
        "Consider this as a reach/stretch option",
        "Prioritize programs with lower closing merits",
        "Look at alternative campuses for similar programs",
    ],
    "Very Low Chance": [
        "Strongly consider alternative programs",
        "Check programs at other campuses",
        "Consider retaking NET if possible",
    ],
}

CATEGORY_NARRATIVE = {
    "High Chance": "This puts you in a strong position with a high probability of admission. "
                   "You're likely to get selected in the early merit lists.",
    "Medium Chance": "Your position is competitive. You have a reasonable chance of admission, "
                     "especially if seats remain after initial lists or competition is lower than last year.",
    "Low Chance": "Admission to this program is challenging with your current aggregate. "
                  "Consider having backup options and try to improve your NET score if retaking.",
    "Very Low Chance": "This program is highly competitive for your current aggregate. "
                       "We strongly recommend considering alternative programs or campuses with lower cutoffs.",
}

def _interp(diff: float, lo_edge: float, hi_edge: float, rng: Tuple[int, int]) -> float:
    return float(np.interp(diff, [lo_edge, hi_edge], list(rng)))

def chance_from_difference(diff: float) -> Tuple[ChanceCategory, int]:
    t, r = CHANCE_THRESHOLDS, CHANCE_RANGES

    if diff >= t["high_above"]:
        lo, hi = r["high"]
        return "High Chance", round_half_up(min(hi, lo + (diff - t["high_above"]) * HIGH_SLOPE))
    if diff >= t["medium_high_above"]:
        return "Medium Chance", round_half_up(_interp(diff, t["medium_high_above"], t["high_above"], r["medium_high"]))
    if diff >= t["medium_below"]:
        return "Medium Chance", round_half_up(_interp(diff, t["medium_below"], t["medium_high_above"], r["medium"]))
    if diff >= t["low_below"]:
        return "Low Chance", round_half_up(_interp(diff, t["low_below"], t["medium_below"], r["low"]))

    lo, hi = r["very_low"]
    return "Very Low Chance", round_half_up(max(lo, hi + (diff - t["low_below"]) * VERY_LOW_SLOPE))

def _tips(category: ChanceCategory, user_aggregate: float) -> List[str]:
    tips = list(CATEGORY_TIPS[category])
    if user_aggregate < LOW_AGGREGATE:
        tips.append("Focus on programs with historically lower cutoffs")
    return tips

def _explanation(user_aggregate: float, closing: float, diff: float,
                 category: ChanceCategory, program_name: str) -> str:
    above_below = "above" if diff >= 0 else "below"
    base = (f"Your aggregate of {user_aggregate:.2f}% is {abs(diff):.2f}% {above_below} "
            f"last year's closing aggregate of {closing:.2f}% for {program_name} "
            f"(difference {diff:+.2f}).")
    return f"{base} {CATEGORY_NARRATIVE[category]}"

def _no_data(user_aggregate: float, program_name: str) -> ChancePrediction:
    log.info("no closing data for %s; returning neutral chance", program_name)
    return ChancePrediction(
        chance_percentage=50,
        category="Medium Chance",
        explanation=(f"We don't have historical closing data for {program_name} yet. "
                     f"Your aggregate of {user_aggregate:.2f}% puts you in a reasonable position, "
                     "but we can't provide a precise prediction."),
        tips=list(NO_DATA_TIPS),
        metadata=ChanceMetadata(user_aggregate=user_aggregate, data_available=False),
    )

def predict_chance(user_aggregate: float,
                   reference_closing_aggregate: Optional[float] = None,
                   program_name: str = "this program",
                   average_closing_aggregate: Optional[float] = None) -> ChancePrediction:
    """Chance against last year's closing, or the multi-year average when that is all we have.

    The average is for callers holding only summary figures. A ProgramCatalog
    never has an average without a latest closing, so AdmissionScorer omits it.
    """
    reference = reference_closing_aggregate
    if reference is None:
        reference = average_closing_aggregate
    if reference is None:
        return _no_data(user_aggregate, program_name)

    diff = user_aggregate - reference
    category, chance = chance_from_difference(diff)
    log.debug("chance %s: diff=%.2f -> %d (%s)", program_name, diff, chance, category)
    return ChancePrediction(
        chance_percentage=chance,
        category=category,
        explanation=_explanation(user_aggregate, reference, diff, category, program_name),
        tips=_tips(category, user_aggregate),
        metadata=ChanceMetadata(
            user_aggregate=user_aggregate,
            reference_closing_aggregate=reference,
            difference=diff,
            data_available=True,
        ),
    )

# -------------------------------------------------------
# Position-based estimate (closing merit position, no aggregate)
# -------------------------------------------------------
def estimate_aggregate_from_position(merit_position: float, total_seats: int = 100) -> float:
    """Top of the list ~90%, the last seat ~70%. A placeholder mapping, not data-derived."""
    seats = total_seats if total_seats and total_seats > 0 else 100
    ratio = min(merit_position / seats, 2)
    return clamp(90 - ratio * 20, 50, 95)

def predict_chance_from_position(user_aggregate: float, closing_position: float,
                                 total_seats: int, program_name: str = "this program") -> ChancePrediction:
    estimated = estimate_aggregate_from_position(closing_position, total_seats)
    return predict_chance(user_aggregate, estimated, program_name)

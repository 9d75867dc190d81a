"""
Merit list predictor: in which round (1st..8th) a student is likely to be selected.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from ..schemas import ClosingThreshold, Confidence, MeritListPrediction
from ..utils import ordinal

log = logging.getLogger(__name__)

MAX_ROUNDS = 8
MAX_ALTERNATIVES = 2
NEAR_MISS_WINDOW = 3.0  # uncleared rounds this close are still worth listing

CONFIDENCE_THRESHOLDS = {"high": 2.0, "medium": 0.0}

# (minimum aggregate, estimated round, explanation) when no history is available
ESTIMATE_BUCKETS = [
    (80, 1, "you have a strong chance of selection in the 1st or 2nd merit list for {name}. "
            "However, this is an estimate as we don't have historical data."),
    (75, 2, "you're likely to be selected around the 2nd to 3rd merit list for {name}. This is an estimate."),
    (70, 4, "you might be selected in middle merit lists (3rd-5th) for {name}. This is a rough estimate."),
    (65, 6, "selection might happen in later merit lists (5th-7th) for {name}, if seats remain. "
            "This is an estimate."),
]

# -------------------------------------------------------
# Threshold ladder
# -------------------------------------------------------
@dataclass(frozen=True)
class LinearDecayLadder:
    """Synthesise per-round closings from one known closing aggregate.

    Each round closes `step` points below the previous one, never below `floor`.
    A guess, not a model: swap in another callable when real trends are known.
    """
    step: float = 1.5
    floor: float = 50.0
    rounds: int = MAX_ROUNDS

    def __call__(self, base_aggregate: float) -> List[ClosingThreshold]:
        return [
            ClosingThreshold(round_number=i,
                             closing_aggregate=max(self.floor, base_aggregate - (i - 1) * self.step))
            for i in range(1, self.rounds + 1)
        ]

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "LinearDecayLadder":
        ladder = cfg.get("ladder") or {}
        return cls(step=float(ladder.get("step", cls.step)),
                   floor=float(ladder.get("floor", cls.floor)),
                   rounds=int(ladder.get("rounds", cls.rounds)))

def generate_estimated_thresholds(base_aggregate: float = 78, rounds: int = MAX_ROUNDS) -> List[ClosingThreshold]:
    return LinearDecayLadder(rounds=rounds)(base_aggregate)

# -------------------------------------------------------
# Prediction
# -------------------------------------------------------
def _confidence(margin: float) -> Confidence:
    if margin >= CONFIDENCE_THRESHOLDS["high"]: return "High"
    if margin >= CONFIDENCE_THRESHOLDS["medium"]: return "Medium"
    return "Low"

def _estimate(user_aggregate: float, program_name: str) -> MeritListPrediction:
    for minimum, round_no, text in ESTIMATE_BUCKETS:
        if user_aggregate >= minimum:
            alts = [n for n in (round_no + 1, round_no + 2) if n <= MAX_ROUNDS]
            return MeritListPrediction(
                predicted_round=round_no,
                confidence="Low",
                explanation=f"With an aggregate of {user_aggregate:.2f}%, " + text.format(name=program_name),
                alternative_rounds=alts,
                is_estimate=True,
            )
    return MeritListPrediction(
        predicted_round=None,
        confidence="Low",
        explanation=(f"With an aggregate of {user_aggregate:.2f}%, admission to {program_name} "
                     "may be challenging. Consider programs with lower cutoffs."),
        alternative_rounds=[],
        is_estimate=True,
    )

def _explanation(predicted: Optional[int], confidence: Confidence, user_aggregate: float,
                 thresholds: List[ClosingThreshold], program_name: str) -> str:
    if predicted is None:
        return (f"Based on historical data for {program_name}, your aggregate of {user_aggregate:.2f}% "
                "falls below all recorded closing aggregates. Admission is unlikely this cycle unless "
                "competition changes significantly.")

    text = (f"Based on historical trends, you're likely to be selected in the "
            f"{ordinal(predicted)} merit list for {program_name}.")
    closing = next((t.closing_aggregate for t in thresholds if t.round_number == predicted), None)
    if closing is not None:
        diff = user_aggregate - closing
        if diff > 2:
            text += (f" Your aggregate ({user_aggregate:.2f}%) is {diff:.2f}% above the historical closing "
                     f"({closing:.2f}%), giving you a comfortable margin.")
        elif diff > 0:
            text += f" Your aggregate is slightly above the historical closing of {closing:.2f}%."
        else:
            text += (f" Your aggregate is close to the historical closing of {closing:.2f}%, "
                     "so competition levels may affect the outcome.")
    if confidence == "Low":
        text += (" Note: This prediction has low confidence due to limited data or your aggregate "
                 "being close to the threshold.")
    return text

def predict_merit_list(user_aggregate: float, thresholds: Iterable[ClosingThreshold],
                       program_name: str = "this program") -> MeritListPrediction:
    thresholds = sorted(thresholds, key=lambda t: t.round_number)
    if not any(t.closing_aggregate is not None for t in thresholds):
        log.info("no closing aggregates for %s; using aggregate buckets", program_name)
        return _estimate(user_aggregate, program_name)

    predicted: Optional[int] = None
    confidence: Confidence = "Low"
    closest = float("inf")
    alternatives: List[int] = []

    for t in thresholds:
        if t.closing_aggregate is None:
            continue
        diff = user_aggregate - t.closing_aggregate
        if diff >= 0:
            if predicted is None:
                predicted, confidence, closest = t.round_number, _confidence(diff), diff
            elif diff < closest:
                alternatives.append(predicted)
                predicted, confidence, closest = t.round_number, _confidence(diff), diff
            else:
                alternatives.append(t.round_number)
        elif predicted is None and abs(diff) < NEAR_MISS_WINDOW:
            alternatives.append(t.round_number)

    # dedupe, keep insertion order
    alternatives = [n for n in dict.fromkeys(alternatives) if n != predicted][:MAX_ALTERNATIVES]

    return MeritListPrediction(
        predicted_round=predicted,
        confidence=confidence,
        explanation=_explanation(predicted, confidence, user_aggregate, thresholds, program_name),
        alternative_rounds=alternatives,
        is_estimate=False,
    )

def predict_merit_list_batch(user_aggregate: float, programs: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """programs: dicts with program_id, program_name and thresholds."""
    return [
        {
            "program_id": p["program_id"],
            "program_name": p["program_name"],
            "prediction": predict_merit_list(user_aggregate, p.get("thresholds") or [], p["program_name"]),
        }
        for p in programs
    ]

"""
Aggregate calculator.

FSc / HSSC students:   NET 75% + HSC 15% + SSC 10%
O/A Level students:    NET 75% + equivalence 25%

The NET test is marked out of 200; everything else is a percentage.
"""
from __future__ import annotations
import logging, math
from typing import Any, Dict, Optional, Tuple, Union

from pydantic import ValidationError

from .schemas import (
    AggregateBreakdown, EquivalenceCurriculum, LocalCurriculum, ScoreInput, ValidationResult,
)
from .utils import round2

log = logging.getLogger(__name__)

MAX_NET_SCORE = 200
MIN_PERCENTAGE = 0
MAX_PERCENTAGE = 100

LOCAL_WEIGHTS = {"net": 0.75, "hsc": 0.15, "ssc": 0.10}
EQUIVALENCE_WEIGHTS = {"net": 0.75, "equivalence": 0.25}

CurriculumT = Union[LocalCurriculum, EquivalenceCurriculum]

# -------------------------------------------------------
# Validation
# -------------------------------------------------------
def _check_percentage(value: float, label: str, errors: list) -> None:
    if not math.isfinite(value):
        errors.append(f"{label} percentage must be a number")
    elif value < MIN_PERCENTAGE:
        errors.append(f"{label} percentage cannot be negative")
    elif value > MAX_PERCENTAGE:
        errors.append(f"{label} percentage cannot exceed {MAX_PERCENTAGE}%")

def validate_score_input(score_input: ScoreInput) -> ValidationResult:
    """Collect every range problem instead of stopping at the first one."""
    errors = []
    # NaN fails every comparison, so check it first
    if not math.isfinite(score_input.net_score):
        errors.append("NET score must be a number")
    elif score_input.net_score < 0:
        errors.append("NET score cannot be negative")
    elif score_input.net_score > MAX_NET_SCORE:
        errors.append(f"NET score cannot exceed {MAX_NET_SCORE}")

    cur = score_input.curriculum
    if isinstance(cur, EquivalenceCurriculum):
        if cur.equivalence_percentage is None:
            errors.append("Equivalence percentage is required for O/A Level students")
        else:
            _check_percentage(cur.equivalence_percentage, "Equivalence", errors)
    else:
        _check_percentage(cur.hsc_percentage, "HSC/FSc", errors)
        _check_percentage(cur.ssc_percentage, "SSC/Matric", errors)

    return ValidationResult(is_valid=not errors, errors=errors)

def _describe_error(err: Dict[str, Any]) -> str:
    loc = ".".join(str(p) for p in err.get("loc", ()))
    return f"{loc}: {err.get('msg', 'invalid value')}" if loc else str(err.get("msg"))

def validate_payload(raw: Dict[str, Any]) -> Tuple[Optional[ScoreInput], ValidationResult]:
    """Parse a request-shaped dict. Structural problems become messages too."""
    try:
        score_input = ScoreInput.model_validate(raw)
    except ValidationError as e:
        errors = [_describe_error(err) for err in e.errors()]
        log.debug("payload rejected: %s", errors)
        return None, ValidationResult(is_valid=False, errors=errors)
    return score_input, validate_score_input(score_input)

# -------------------------------------------------------
# Forward formula
# -------------------------------------------------------
def net_score_to_percentage(net_score: float) -> float:
    return net_score / MAX_NET_SCORE * 100

def _contributions(net_score: float, curriculum: CurriculumT) -> Dict[str, float]:
    net_pct = net_score_to_percentage(net_score)
    if isinstance(curriculum, EquivalenceCurriculum):
        eq = curriculum.equivalence_percentage or 0.0
        return {
            "net": net_pct * EQUIVALENCE_WEIGHTS["net"],
            "equivalence": eq * EQUIVALENCE_WEIGHTS["equivalence"],
        }
    return {
        "net": net_pct * LOCAL_WEIGHTS["net"],
        "hsc": curriculum.hsc_percentage * LOCAL_WEIGHTS["hsc"],
        "ssc": curriculum.ssc_percentage * LOCAL_WEIGHTS["ssc"],
    }

def forward_aggregate(net_score: float, curriculum: CurriculumT) -> float:
    """Unrounded aggregate for a NET score and fixed school components."""
    return sum(_contributions(net_score, curriculum).values())

def calculate_aggregate(score_input: ScoreInput) -> AggregateBreakdown:
    cur = score_input.curriculum
    parts = _contributions(score_input.net_score, cur)
    total = sum(parts.values())
    net_pct = net_score_to_percentage(score_input.net_score)

    if isinstance(cur, EquivalenceCurriculum):
        if cur.equivalence_percentage is None:
            log.warning("equivalence percentage missing; counted as 0")
        return AggregateBreakdown(
            kind="equivalence",
            net_contribution=round2(parts["net"]),
            equivalence_contribution=round2(parts["equivalence"]),
            total_aggregate=round2(total),
            explanation=_equivalence_explanation(score_input.net_score, net_pct,
                                                 cur.equivalence_percentage or 0.0, parts, total),
        )

    return AggregateBreakdown(
        kind="local",
        net_contribution=round2(parts["net"]),
        hsc_contribution=round2(parts["hsc"]),
        ssc_contribution=round2(parts["ssc"]),
        total_aggregate=round2(total),
        explanation=_local_explanation(score_input.net_score, net_pct, cur, parts, total),
    )

def _local_explanation(net_score, net_pct, cur: LocalCurriculum, parts, total) -> str:
    w = LOCAL_WEIGHTS
    return "\n".join([
        "Your aggregate (FSc formula):",
        f"NET score: {net_score:g}/{MAX_NET_SCORE} = {net_pct:.2f}%",
        f"  contribution ({w['net']:.0%}): {net_pct:.2f} x {w['net']:.2f} = {parts['net']:.2f}",
        f"FSc/HSSC: {cur.hsc_percentage:.2f}%",
        f"  contribution ({w['hsc']:.0%}): {cur.hsc_percentage:.2f} x {w['hsc']:.2f} = {parts['hsc']:.2f}",
        f"SSC/Matric: {cur.ssc_percentage:.2f}%",
        f"  contribution ({w['ssc']:.0%}): {cur.ssc_percentage:.2f} x {w['ssc']:.2f} = {parts['ssc']:.2f}",
        f"Total aggregate: {total:.2f}%",
    ])

def _equivalence_explanation(net_score, net_pct, eq_pct, parts, total) -> str:
    w = EQUIVALENCE_WEIGHTS
    return "\n".join([
        "Your aggregate (O/A Level formula):",
        f"NET score: {net_score:g}/{MAX_NET_SCORE} = {net_pct:.2f}%",
        f"  contribution ({w['net']:.0%}): {net_pct:.2f} x {w['net']:.2f} = {parts['net']:.2f}",
        f"O-Level equivalence: {eq_pct:.2f}%",
        f"  contribution ({w['equivalence']:.0%}): {eq_pct:.2f} x {w['equivalence']:.2f} = {parts['equivalence']:.2f}",
        f"Total aggregate: {total:.2f}%",
    ])

# -------------------------------------------------------
# Display helpers
# -------------------------------------------------------
def format_aggregate(aggregate: float) -> str:
    return f"{aggregate:.2f}%"

def aggregate_category(aggregate: float) -> str:
    if aggregate >= 80: return "Excellent"
    if aggregate >= 70: return "Good"
    if aggregate >= 60: return "Average"
    return "Below Average"

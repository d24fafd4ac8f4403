"""
Integrity scoring — the Anti-Bullshit Score (ABS) and related helpers.

ABS measures "action" (deep work, shipped output) against "motion"
(planning, organising, talking about work). Bands over
action_ratio = action / (motion + action), each linear and continuous
at the edges, floored to an integer:

  action_ratio >= 0.8         ->  90 + (r - 0.8) * 50    [90, 100]
  0.5 <= action_ratio < 0.8   ->  60 + (r - 0.5) * 100   [60, 90)
  action_ratio < 0.5          ->  r * 120                [0, 60)

No activity at all scores 100: absence of evidence is not dishonesty.
Arithmetic is done with Fraction so band edges are exact.
"""
from __future__ import annotations

import math
from fractions import Fraction
from typing import Iterable, Optional, Sequence

from promise_ledger.core.errors import ContractViolationError
from promise_ledger.services.entities import ProofEntry

MIN_PROOF_LENGTH = 10
MAIN_GOAL_WEIGHT = 0.7

_HIGH_BAND = Fraction(4, 5)
_MID_BAND = Fraction(1, 2)


def _require_non_negative(name: str, value: float) -> None:
    if value is None or not math.isfinite(value) or value < 0:
        raise ContractViolationError(name, value, "must be a finite non-negative number")


def calculate_abs(motion_units: float, action_units: float) -> int:
    """Integer integrity score in [0, 100]. Non-decreasing in action_units."""
    _require_non_negative("motion_units", motion_units)
    _require_non_negative("action_units", action_units)
    if motion_units == 0 and action_units == 0:
        return 100

    motion = Fraction(motion_units)
    action = Fraction(action_units)
    ratio = action / (motion + action)

    if ratio >= _HIGH_BAND:
        score = 90 + (ratio - _HIGH_BAND) * 50
    elif ratio >= _MID_BAND:
        score = 60 + (ratio - _MID_BAND) * 100
    else:
        score = ratio * 120
    return min(100, max(0, math.floor(score)))


def validate_proof_of_work(units: float, proof: Optional[str]) -> bool:
    """Claimed units need a written proof of at least 10 non-blank-edged chars."""
    if units == 0:
        return True
    return proof is not None and len(proof.strip()) >= MIN_PROOF_LENGTH


def proof_text(entries: Iterable[ProofEntry]) -> str:
    return " ".join(e.value.strip() for e in entries if e.value and e.value.strip())


# ---------------------------------------------------------------------------
# Goal / daily integrity
# ---------------------------------------------------------------------------

def calculate_goal_daily_score(scheduled_completions: Sequence[bool]) -> float:
    """Share of a goal's promises scheduled today that were kept."""
    if not scheduled_completions:
        return 0.0
    return sum(1 for c in scheduled_completions if c) / len(scheduled_completions)


def calculate_daily_integrity(
    main_goal_score: float,
    secondary_scores: Sequence[float],
    main_goal_weight: float = MAIN_GOAL_WEIGHT,
) -> float:
    """Main goal weighted at `main_goal_weight`; secondaries split the rest evenly."""
    if not secondary_scores:
        return main_goal_score
    secondary_weight = (1 - main_goal_weight) / len(secondary_scores)
    return main_goal_score * main_goal_weight + sum(s * secondary_weight for s in secondary_scores)


def calculate_sprint_weekly_promise_rate(weekly_ratios: Sequence[float]) -> float:
    if not weekly_ratios:
        return 0.0
    return sum(weekly_ratios) / len(weekly_ratios)

"""
Promise Progress Calculator.

Combines completion events with the Target Resolver into actual / target /
ratio / status for a single commitment over any window.

Status cut points (shared with goal trends and the ABS bands):
  ratio >= 0.8          -> on-track
  0.5 <= ratio < 0.8    -> at-risk
  ratio < 0.5           -> missed
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Iterable

from promise_ledger.services.calendar import Window
from promise_ledger.services.entities import (
    Commitment,
    CommitmentKind,
    CompletionEvent,
    Sprint,
)
from promise_ledger.services.targets import resolve_target

logger = logging.getLogger(__name__)

ON_TRACK_RATIO = 0.8
AT_RISK_RATIO = 0.5


class PromiseStatus(str, enum.Enum):
    on_track = "on-track"
    at_risk = "at-risk"
    missed = "missed"


@dataclass(frozen=True)
class PromiseSummary:
    promise_id: int
    label: str
    goal_id: int
    goal_text: str
    kind: CommitmentKind
    actual: int
    target: int
    ratio: float
    status: PromiseStatus

    @property
    def is_behind(self) -> bool:
        return self.status in (PromiseStatus.at_risk, PromiseStatus.missed)


def safe_ratio(numerator: float, denominator: float) -> float:
    """numerator / denominator, or 0 when the denominator is not positive."""
    return numerator / denominator if denominator > 0 else 0.0


def classify_ratio(ratio: float) -> PromiseStatus:
    if ratio >= ON_TRACK_RATIO:
        return PromiseStatus.on_track
    if ratio >= AT_RISK_RATIO:
        return PromiseStatus.at_risk
    return PromiseStatus.missed


def count_completions(
    commitment_id: int,
    events: Iterable[CompletionEvent],
    window: Window,
) -> int:
    return sum(
        1
        for e in events
        if e.commitment_id == commitment_id and e.completed and window.contains(e.day)
    )


def calculate_promise_progress(
    commitment: Commitment,
    events: Iterable[CompletionEvent],
    window: Window,
    goal_text: str = "",
) -> PromiseSummary:
    actual = count_completions(commitment.id, events, window)
    target = resolve_target(commitment, window)
    ratio = safe_ratio(actual, target)
    return PromiseSummary(
        promise_id=commitment.id,
        label=commitment.text,
        goal_id=commitment.goal_id,
        goal_text=goal_text,
        kind=commitment.kind,
        actual=actual,
        target=target,
        ratio=ratio,
        status=classify_ratio(ratio),
    )


def calculate_promise_summaries(
    sprint: Sprint,
    events: Iterable[CompletionEvent],
    window: Window,
) -> dict[int, PromiseSummary]:
    """One PromiseSummary per commitment in the sprint, in sprint order."""
    events = tuple(events)
    summaries: dict[int, PromiseSummary] = {}
    for goal in sprint.goals:
        for commitment in goal.commitments:
            summaries[commitment.id] = calculate_promise_progress(
                commitment, events, window, goal_text=goal.text
            )
    logger.debug(
        "promise progress sprint=%s window=%s..%s promises=%d",
        sprint.id, window.start, window.end, len(summaries),
    )
    return summaries

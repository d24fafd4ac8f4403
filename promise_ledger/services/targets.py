"""
Target Resolver — expected number of completions for a commitment in a window.

Weekly commitments are prorated by window length in weeks and rounded half up.
Daily commitments count scheduled days exactly: whole weeks contribute
|schedule_days| each, and the leftover days are checked one by one, because
schedules like Mon/Wed/Fri vs Tue/Thu make naive proration wrong near period
boundaries.
"""
from __future__ import annotations

import math
from datetime import timedelta
from fractions import Fraction

from promise_ledger.services.calendar import Window, is_scheduled_on, normalize_schedule
from promise_ledger.services.entities import Commitment, CommitmentKind


def _weekly_target(weekly_target: int, days: int) -> int:
    exact = Fraction(days * weekly_target, 7)
    return math.floor(exact + Fraction(1, 2))


def _daily_target(schedule_days, window: Window) -> int:
    valid = normalize_schedule(schedule_days)
    if not valid:
        return 0
    full_weeks, extra_days = divmod(window.days, 7)
    target = full_weeks * len(valid)
    remainder_start = window.start + timedelta(days=full_weeks * 7)
    for offset in range(extra_days):
        if is_scheduled_on(valid, remainder_start + timedelta(days=offset)):
            target += 1
    return target


def resolve_target(commitment: Commitment, window: Window) -> int:
    if window.days == 0:
        return 0
    if commitment.kind == CommitmentKind.weekly:
        return _weekly_target(commitment.weekly_target or 0, window.days)
    return _daily_target(commitment.schedule_days, window)

from .sprint import Sprint, Goal, SprintPriority
from .daily_audit import DailyAudit
from .commitment import Commitment, CompletionEvent

__all__ = [
    "Sprint",
    "Goal",
    "SprintPriority",
    "DailyAudit",
    "Commitment",
    "CompletionEvent",
]

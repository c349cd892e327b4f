"""Task enrichment - recompute derived scheduling fields."""

from dataclasses import replace
from datetime import datetime

from .ledger import last_three
from .schedule import classify, compute_next_due
from .tasks import CompletionLog, Task


def enrich(task: Task, logs: list[CompletionLog], now: datetime) -> Task:
    """
    Return a copy of `task` with next_due_at, status and
    last_three_completions recomputed from its stored fields and logs.

    Pure function - the logs are only read.
    """
    return replace(
        task,
        next_due_at=compute_next_due(task, now.tzinfo),
        status=classify(task, now),
        last_three_completions=last_three(logs),
    )
